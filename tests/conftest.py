"""Root test configuration."""

import logging

import pytest
import structlog
from amnotifier.alerting.alert import Alert
from amnotifier.alertmanager.config import Config
from amnotifier.alertmanager.provider import AlertProvider
from amnotifier.config.settings import get_settings
from amnotifier.endpoint.models import Endpoint, Result


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def _clear_settings_cache(monkeypatch):
    monkeypatch.delenv("AMNOTIFIER_CONFIG_PATH", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def endpoint() -> Endpoint:
    return Endpoint(name="Test API", url="https://api.example.com/health", group="production")


@pytest.fixture
def failing_result() -> Result:
    return Result(success=False, errors=["connection timeout", "DNS resolution failed"])


@pytest.fixture
def provider() -> AlertProvider:
    return AlertProvider(
        default_config=Config(
            url="http://alertmanager:9093",
            default_severity="warning",
            extra_labels={"environment": "test"},
            extra_annotations={"runbook": "https://wiki.example.com/runbook"},
        ),
    )


@pytest.fixture
def alert() -> Alert:
    return Alert(description="API health check failed")
