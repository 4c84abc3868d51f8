import pytest

from monitoring_demo.core.config import BACKENDS, load_settings
from monitoring_demo.core.errors import ConfigurationError
from tests.conftest import REQUIRED_ENV


def test_defaults(settings):
    assert settings.PORT == 8080
    assert settings.LOAD_SEC == 900
    assert settings.LOAD_MODE == "count"
    assert settings.RUN_MODE == "sync"
    assert settings.MYSQL_NUM == 1000
    assert settings.REDIS_NUM == 10000


def test_all_required_missing(clean_env):
    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(_env_file=None)

    assert sorted(exc_info.value.missing) == sorted(REQUIRED_ENV)


def test_one_missing_variable(backend_env):
    backend_env.delenv("RABBITMQ_URL")

    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(_env_file=None)

    assert exc_info.value.missing == ["RABBITMQ_URL"]
    assert exc_info.value.messages() == ["$RABBITMQ_URL is required"]


def test_empty_variable_counts_as_missing(backend_env):
    backend_env.setenv("REDIS_URL", "")

    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(_env_file=None)

    assert exc_info.value.missing == ["REDIS_URL"]


def test_invalid_number_is_reported(backend_env):
    backend_env.setenv("MYSQL_NUM", "lots")

    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(_env_file=None)

    assert exc_info.value.missing == []
    assert exc_info.value.invalid[0].startswith("MYSQL_NUM")


def test_alias_variables(backend_env):
    backend_env.delenv("MONGODB_URL")
    backend_env.delenv("CASSANDRA_URL")
    backend_env.setenv("MONGODB_ADDR", "mongo-alt:27017")
    backend_env.setenv("CASSANDRA_HOST", "cass-alt")

    settings = load_settings(_env_file=None)

    assert settings.MONGODB_URL == "mongo-alt:27017"
    assert settings.CASSANDRA_URL == "cass-alt"


def test_tuning_variables(backend_env):
    backend_env.setenv("MYSQL_NUM", "3")
    backend_env.setenv("LOAD_MODE", "timer")
    backend_env.setenv("LOAD_SEC", "30")
    backend_env.setenv("RUN_MODE", "background")
    backend_env.setenv("MONGODB_TEARDOWN", "false")
    backend_env.setenv("PORT", "9090")

    settings = load_settings(_env_file=None)

    assert settings.MYSQL_NUM == 3
    assert settings.LOAD_MODE == "timer"
    assert settings.LOAD_SEC == 30
    assert settings.RUN_MODE == "background"
    assert settings.PORT == 9090
    assert settings.backend("mongodb").teardown is False


def test_backend_view(settings):
    mysql = settings.backend("mysql")

    assert mysql.name == "mysql"
    assert mysql.url == REQUIRED_ENV["MYSQL_URL"]
    assert mysql.iterations == 1000
    assert mysql.teardown is True

    # Backends without a schema report teardown as on
    assert settings.backend("redis").teardown is True

    for name in BACKENDS:
        assert settings.backend(name).url


def test_backend_view_unknown(settings):
    with pytest.raises(KeyError):
        settings.backend("oracle")


def test_get_settings_is_cached(backend_env, monkeypatch, tmp_path):
    from monitoring_demo.core.config import get_settings

    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
        assert get_settings().REDIS_URL == REQUIRED_ENV["REDIS_URL"]
    finally:
        get_settings.cache_clear()


@pytest.mark.parametrize("var, expected", [
    ("MYSQL_NUM", 1000),
    ("LOAD_SEC", 900),
    ("PORT", 8080),
])
def test_empty_optional_variable_uses_default(backend_env, var, expected):
    backend_env.setenv(var, "")

    settings = load_settings(_env_file=None)

    assert getattr(settings, var) == expected


@pytest.mark.parametrize("var, value", [
    ("MEMCACHE_ADDR", "memcache:abc"),
    ("MEMCACHE_ADDR", "memcache:70000"),
    ("CASSANDRA_URL", "c1:9042,c2:x/demo"),
    ("CASSANDRA_URL", ",/demo"),
])
def test_bad_address_is_reported(backend_env, var, value):
    backend_env.setenv(var, value)

    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(_env_file=None)

    assert exc_info.value.missing == []
    assert len(exc_info.value.invalid) == 1
    assert exc_info.value.invalid[0].startswith(var)
