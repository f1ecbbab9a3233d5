import logging
import json
import os
from pathlib import Path
import threading


ROOT_LOGGER_NAME = "inventory"


class CorrelationIdFilter(logging.Filter):
    """
    Attach the current request's correlation id to every record.
    Records emitted outside a request context get "-".
    """

    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = "-"
        try:
            from flask import g, has_request_context
            if has_request_context():
                correlation_id = g.get("correlation_id", "-")
        except RuntimeError:
            pass
        record.correlation_id = correlation_id
        return True


class SingletonLogger:
    """
    Singleton logger that ensures the handler tree is configured only once per process.
    Named loggers returned by get_logger() are children of the "inventory" logger and
    propagate to its handlers.
    """
    _instance = None
    _lock = threading.Lock()
    _root = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(SingletonLogger, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            with self._lock:
                if not self._initialized:
                    self._root = None
                    self._initialized = True

    def get_logger(self, name: str = ROOT_LOGGER_NAME) -> logging.Logger:
        """
        Get a logger attached to the singleton handler tree.

        Args:
            name (str): Dotted logger name, e.g. "inventory.services.assets"

        Returns:
            logging.Logger: Configured logger
        """
        if self._root is None:
            with self._lock:
                if self._root is None:
                    self._root = self._create_logger()
        if not name or name == ROOT_LOGGER_NAME:
            return self._root
        if not name.startswith(ROOT_LOGGER_NAME + "."):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        return logging.getLogger(name)

    def _create_logger(self) -> logging.Logger:
        """
        Create the root application logger with file and console handlers.

        Returns:
            logging.Logger: Configured logger instance
        """
        logger = logging.getLogger(ROOT_LOGGER_NAME)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False

        # Clear any existing handlers
        logger.handlers.clear()

        formatter = JsonFormatter({
            "timestamp": "asctime",
            "level": "levelname",
            "logger": "name",
            "correlation_id": "correlation_id",
            "module": "module",
            "function": "funcName",
            "line": "lineno",
            "message": "message"
        })
        correlation_filter = CorrelationIdFilter()

        logs_dir = Path(os.environ.get("LOG_DIR", "logs"))
        logs_dir.mkdir(parents=True, exist_ok=True)

        # Log files are truncated on each run
        file_handler = logging.FileHandler(logs_dir / "inventory.log", mode='w', encoding='utf-8')
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(correlation_filter)
        logger.addHandler(file_handler)

        error_file_handler = logging.FileHandler(logs_dir / "errors.log", mode='w', encoding='utf-8')
        error_file_handler.setLevel(logging.ERROR)
        error_file_handler.setFormatter(formatter)
        error_file_handler.addFilter(correlation_filter)
        logger.addHandler(error_file_handler)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, os.environ.get("LOG_LEVEL", "DEBUG").upper(), logging.DEBUG))
        console_handler.setFormatter(formatter)
        console_handler.addFilter(correlation_filter)
        logger.addHandler(console_handler)

        return logger


class JsonFormatter(logging.Formatter):
    """
    Formatter that outputs JSON strings after parsing the LogRecord.

    @param dict fmt_dict: Key: logging format attribute pairs. Defaults to {"message": "message"}.
    @param str time_format: time.strftime() format string. Default: "%Y-%m-%dT%H:%M:%S"
    @param str msec_format: Microsecond formatting. Appended at the end. Default: "%s.%03dZ"
    """
    def __init__(self, fmt_dict: dict = None, time_format: str = "%Y-%m-%dT%H:%M:%S", msec_format: str = "%s.%03dZ"):
        super().__init__()
        self.fmt_dict = fmt_dict if fmt_dict is not None else {"message": "message"}
        self.default_time_format = time_format
        self.default_msec_format = msec_format
        self.datefmt = None

    def usesTime(self) -> bool:
        return "asctime" in self.fmt_dict.values()

    def formatMessage(self, record) -> dict:
        """
        Return a dict of the configured LogRecord attributes instead of a string.
        Attributes missing from the record (e.g. correlation_id when no filter ran) become None.
        """
        return {fmt_key: record.__dict__.get(fmt_val) for fmt_key, fmt_val in self.fmt_dict.items()}

    def format(self, record) -> str:
        record.message = record.getMessage()

        if self.usesTime():
            record.asctime = self.formatTime(record, self.datefmt)

        message_dict = self.formatMessage(record)

        if record.exc_info:
            # Cache the traceback text to avoid converting it multiple times
            if not record.exc_text:
                record.exc_text = self.formatException(record.exc_info)

        if record.exc_text:
            message_dict["exc_info"] = record.exc_text

        if record.stack_info:
            message_dict["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(message_dict, default=str)


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger from the singleton handler tree.

    Args:
        name (str): Logger name

    Returns:
        logging.Logger: Logger instance
    """
    return SingletonLogger().get_logger(name)
