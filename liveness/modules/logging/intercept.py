import logging
from typing import Iterable
from .base import BaseLogger

# aiohttp reports handler and transport errors through these stdlib loggers
AIOHTTP_LOGGERS = ("aiohttp.server", "aiohttp.web", "aiohttp.access")


class InterceptHandler(logging.Handler):
    """Forwards stdlib logging records to a BaseLogger."""

    def __init__(self, target: BaseLogger):
        super().__init__()
        self.target = target

    def emit(self, record: logging.LogRecord) -> None:
        message = record.getMessage()
        if record.exc_info and record.exc_info[1] is not None:
            message = f"{message}: {record.exc_info[1]!r}"

        if record.levelno >= logging.ERROR:
            self.target.log_error(message)
        elif record.levelno >= logging.WARNING:
            self.target.log_warning(message)
        elif record.levelno >= logging.INFO:
            self.target.log_info(message)
        else:
            self.target.log_debug(message)


def intercept_stdlib_logging(target: BaseLogger, names: Iterable[str] = AIOHTTP_LOGGERS) -> InterceptHandler:
    """Route the named stdlib loggers to target instead of the root logger."""
    handler = InterceptHandler(target)
    for name in names:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [handler]
        std_logger.setLevel(logging.DEBUG)
        std_logger.propagate = False
    return handler
