import pytest
import structlog

from evm_stepper import Evm


@pytest.fixture(scope="session", autouse=True)
def route_logs_through_stdlib():
    """Send structlog output through stdlib logging so it never lands on stdout."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.KeyValueRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def evm():
    return Evm(1_000_000)
