"""
Centralized logging manager for the Toolchain Bootstrap Tool
"""
import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = "[{time:YYYY-MM-DD HH:mm:ss}] {level} {name}: {message}"


class LoggingManager:
    def __init__(self, log_level: str = "INFO", log_file: Optional[str] = None):
        self.log_level = log_level.upper()
        self.log_file = log_file

    def setup(self):
        logger.remove()
        # stdout is reserved for export lines and report tables
        logger.add(lambda msg: print(msg, end="", file=sys.stderr), level=self.log_level, format=LOG_FORMAT)
        if self.log_file:
            logger.add(self.log_file, level=self.log_level, format=LOG_FORMAT)
        logger.info(f"Logging initialized at level: {self.log_level}")

    def debug(self, message: str):
        logger.debug(message)

    def info(self, message: str):
        logger.info(message)

    def warning(self, message: str):
        logger.warning(message)

    def error(self, message: str):
        logger.error(message)
