import logging
from typing import Optional


class LogConfig:
    """Process-wide log level and format"""

    LEVELS = {"DEBUG": logging.DEBUG, "INFO": logging.INFO, "WARNING": logging.WARNING, "ERROR": logging.ERROR}
    FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"

    @classmethod
    def set_log_level(cls, level: Optional[str]) -> int:
        """Reconfigure the root logger, returning the level applied.

        Unknown level names fall back to INFO.
        """
        log_level = cls.LEVELS.get((level or "").upper(), logging.INFO)
        logging.basicConfig(level=log_level, format=cls.FORMAT, datefmt="%Y-%m-%dT%H:%M:%S", force=True)
        return log_level


class Logger:
    """Thin wrapper around a named Python logger.

    ``extra_data`` is rendered after the message so structured context ends up
    in plain log lines without a custom formatter.
    """

    def __init__(self, source: str):
        self.source = source
        self.python_logger = logging.getLogger(source)

    @staticmethod
    def _format(message: str, extra_data: Optional[dict]) -> str:
        if extra_data:
            return f"{message} - {extra_data}"
        return message

    def debug(self, message: str, extra_data: dict = None) -> None:
        self.python_logger.debug(self._format(message, extra_data))

    def info(self, message: str, extra_data: dict = None) -> None:
        self.python_logger.info(self._format(message, extra_data))

    def warning(self, message: str, extra_data: dict = None) -> None:
        self.python_logger.warning(self._format(message, extra_data))

    def error(self, message: str, extra_data: dict = None) -> None:
        self.python_logger.error(self._format(message, extra_data))
