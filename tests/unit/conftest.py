import pytest
from unittest.mock import Mock

from tests.utils.test_logger import create_test_logger


@pytest.fixture
def mock_logger():
    """Create a mock logger."""
    logger = Mock()
    logger.log_info = Mock()
    logger.log_error = Mock()
    logger.log_warning = Mock()
    logger.log_debug = Mock()
    return logger


@pytest.fixture
def test_logger():
    """Create a logger that records every message."""
    return create_test_logger()


@pytest.fixture(autouse=True)
def restore_aiohttp_loggers():
    """Undo any log interception a test installed on aiohttp's loggers."""
    import logging
    from liveness.modules.logging.intercept import AIOHTTP_LOGGERS

    saved = {}
    for name in AIOHTTP_LOGGERS:
        std_logger = logging.getLogger(name)
        saved[name] = (list(std_logger.handlers), std_logger.level, std_logger.propagate)
    yield
    for name, (handlers, level, propagate) in saved.items():
        std_logger = logging.getLogger(name)
        std_logger.handlers = handlers
        std_logger.setLevel(level)
        std_logger.propagate = propagate
