"""
Logging Configuration and Utilities

Standard-library logging with an optional JSON formatter, a rotating
file handler and a context-carrying logger adapter used by every
repository and service.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from campusqa.config.settings import Settings, settings as default_settings

TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter for structured logging"""

    def __init__(self, *args: Any, environment: str = "development", **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.environment = environment

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['function'] = record.funcName
        log_record['line'] = record.lineno
        log_record['environment'] = self.environment

        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)


class LoggerAdapter:
    """Enhanced logger adapter with context management"""

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self._context: Dict[str, Any] = {}

    def add_context(self, **kwargs):
        """Add context to all log messages"""
        self._context.update(kwargs)
        return self

    def _log(self, level: int, message: str, *args, **kwargs):
        extra = dict(kwargs.get('extra') or {})
        extra.update(self._context)
        kwargs['extra'] = extra

        self.logger.log(level, message, *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        self._log(logging.DEBUG, message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        self._log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        self._log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        self._log(logging.ERROR, message, *args, **kwargs)


def get_logger(name: Optional[str] = None) -> LoggerAdapter:
    """
    Get configured logger instance.

    Args:
        name: Logger name (defaults to the package logger)

    Returns:
        Enhanced logger adapter
    """
    return LoggerAdapter(logging.getLogger(name or "campusqa"))


def _build_formatter(config: Settings) -> logging.Formatter:
    if config.LOG_FORMAT == "json":
        return CustomJsonFormatter(
            '%(asctime)s %(name)s %(levelname)s %(message)s',
            environment=config.ENVIRONMENT,
        )
    return logging.Formatter(TEXT_FORMAT)


def setup_logging(config: Optional[Settings] = None) -> logging.Logger:
    """
    Configure the ``campusqa`` logger hierarchy.

    Handlers are attached to the package logger rather than the root
    logger so that embedding applications keep their own configuration.
    Calling this twice replaces the previously installed handlers.
    """
    config = config or default_settings
    level = getattr(logging, config.LOG_LEVEL)

    package_logger = logging.getLogger("campusqa")
    package_logger.setLevel(level)
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()

    formatter = _build_formatter(config)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if config.LOG_FILE:
        log_path = Path(config.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=config.LOG_MAX_BYTES,
            backupCount=config.LOG_BACKUP_COUNT,
            encoding="utf8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    package_logger.propagate = False

    # SQL statements only when explicitly requested
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if config.DB_ECHO else logging.WARNING
    )

    package_logger.debug(
        "Logging system initialized",
        extra={'log_level': config.LOG_LEVEL, 'log_format': config.LOG_FORMAT},
    )
    return package_logger


__all__ = [
    'get_logger',
    'setup_logging',
    'LoggerAdapter',
    'CustomJsonFormatter',
]
