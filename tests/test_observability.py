import logging

import pytest
import structlog

import observability
from settings import get_settings


@pytest.fixture
def fresh_settings(monkeypatch):
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


@pytest.fixture
def restore_logging():
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield
    root_logger.handlers = handlers
    root_logger.setLevel(level)
    structlog.reset_defaults()
    observability._initialized = False


def test_settings_read_environment(fresh_settings):
    fresh_settings.setenv("RESPONSE_ID_PREFIX", "ANS")
    fresh_settings.setenv("ID_ALLOCATION_RETRIES", "5")

    settings = get_settings()

    assert settings.response_id_prefix == "ANS"
    assert settings.id_allocation_retries == 5
    assert settings.application_id_prefix == "APP"


def test_init_observability_configures_once(fresh_settings, restore_logging):
    fresh_settings.setenv("LOG_FORMAT", "console")
    fresh_settings.setenv("LOG_LEVEL", "debug")
    observability._initialized = False
    handler_count = len(logging.getLogger().handlers)

    observability.init_observability()
    observability.init_observability()

    root_logger = logging.getLogger()
    assert len(root_logger.handlers) == handler_count + 1
    assert root_logger.level == logging.DEBUG
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_init_observability_arguments_override_settings(fresh_settings, restore_logging):
    fresh_settings.setenv("LOG_LEVEL", "debug")
    observability._initialized = False

    observability.init_observability(log_format="json", log_level="warning")

    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("alembic").level == logging.WARNING
