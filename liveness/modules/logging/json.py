import sys
from .base import BaseLogger


class JsonLogger(BaseLogger):
    """Logger that outputs JSON records for log collectors."""
    
    def __init__(self, log_level: str = "INFO"):
        super().__init__(log_level)
        self.logger.configure(
            handlers=[{
                "sink": sys.stderr,
                "serialize": True,
                "format": "{time} | {level} | {message}",
                "level": log_level
            }]
        )

    def log_error(self, message: str):
        self.logger.bind(type="error").error(message)

    def log_warning(self, message: str):
        self.logger.bind(type="warning").warning(message)

    def log_info(self, message: str):
        self.logger.bind(type="info").info(message)

    def log_debug(self, message: str):
        self.logger.bind(type="debug").debug(message)
