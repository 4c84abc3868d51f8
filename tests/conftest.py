import threading

import pytest

from monitoring_demo.core.config import ADDRESS_VARS, load_settings
from monitoring_demo.exercisers.base import Exerciser

REQUIRED_ENV = {
    "MYSQL_URL": "user:pass@tcp(db:3306)/demo",
    "PGSQL_URL": "user:pass@pg:5432/demo",
    "REDIS_URL": "cache:6379",
    "MEMCACHE_ADDR": "memcache:11211",
    "MONGODB_URL": "mongo:27017/demo",
    "CASSANDRA_URL": "cass1,cass2/demo",
    "RABBITMQ_URL": "guest:guest@mq:5672/",
}

ALIAS_VARS = ("MONGODB_ADDR", "CASSANDRA_HOST")


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every backend variable from the environment"""
    for var in list(ADDRESS_VARS.values()) + list(ALIAS_VARS):
        monkeypatch.delenv(var, raising=False)
    for var in ("LOAD_MODE", "LOAD_SEC", "RUN_MODE", "PORT", "MYSQL_NUM"):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


@pytest.fixture
def backend_env(clean_env):
    """All required backend variables set"""
    for var, value in REQUIRED_ENV.items():
        clean_env.setenv(var, value)
    return clean_env


@pytest.fixture
def settings(backend_env):
    return load_settings(_env_file=None)


class FakeExerciser(Exerciser):
    """In-memory exerciser; counts iterations, can fail or block on demand"""

    style = "btn-primary"

    def __init__(self, name, fail_with=None, hold=None):
        super().__init__(url=f"fake://{name}")
        self.name = name
        self.label = name.title()
        self.fail_with = fail_with
        self.hold = hold
        self.started = threading.Event()
        self.calls = 0

    def exercise(self, keep_going):
        self.calls += 1
        self.started.set()
        if self.hold is not None:
            self.hold.wait(timeout=5)
        if self.fail_with is not None:
            raise self.fail_with

        iterations = 0
        while keep_going():
            iterations += 1
        return iterations


@pytest.fixture
def fake_exercisers():
    return {name: FakeExerciser(name) for name in ("mysql", "redis")}
