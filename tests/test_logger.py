import logging

import pytest
import structlog

from monitoring_demo.core.logger import get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def test_development_uses_console_renderer(settings):
    setup_logging(settings)

    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


def test_other_environments_render_json(backend_env):
    from monitoring_demo.core.config import load_settings

    backend_env.setenv("ENVIRONMENT", "production")
    backend_env.setenv("LOG_LEVEL", "warning")
    setup_logging(load_settings(_env_file=None))

    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.processors.JSONRenderer)
    assert logging.getLogger("pika").level == logging.WARNING


def test_json_lines_carry_context(backend_env, capsys):
    from monitoring_demo.core.config import load_settings

    backend_env.setenv("ENVIRONMENT", "production")
    setup_logging(load_settings(_env_file=None))

    get_logger("test").info("Run finished", backend="mysql", iterations=3)

    out = capsys.readouterr().out
    assert '"event": "Run finished"' in out
    assert '"backend": "mysql"' in out
    assert '"level": "info"' in out
