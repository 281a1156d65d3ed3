"""
vaultfs Logging Configuration

Configures the ``vaultfs`` logger hierarchy. The external tools are not routed
through here: they write to the inherited stdout/stderr of the process.
"""

import logging
import logging.config
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from .config import LoggingConfig, get_config

LOGGER_NAME = "vaultfs"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class StructuredFormatter(logging.Formatter):
    """Formatter that appends a record's ``structured_data`` to the message."""

    def format(self, record: logging.LogRecord) -> str:
        if hasattr(record, "structured_data"):
            record.msg = f"{record.msg} | Data: {record.structured_data}"
        return super().format(record)


def _file_handler(log_file: Path, level: str, settings: LoggingConfig) -> Dict[str, Any]:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filename": str(log_file),
        "maxBytes": settings.max_file_size,
        "backupCount": settings.backup_count,
        "encoding": "utf-8",
    }


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
    settings: Optional[LoggingConfig] = None,
) -> None:
    """
    Configure logging for vaultfs.

    Args:
        log_level: Logging level, overrides ``settings.level``
        log_file: Rotating log file, overrides ``settings.file_path``
        settings: Logging settings (taken from the global config if None)
    """
    settings = settings or get_config().logging
    level = (log_level or settings.level).upper()

    if log_file is None and settings.file_path:
        log_file = Path(settings.file_path)

    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "structured",
            "stream": sys.stderr,
        }
    }
    if log_file:
        handlers["file"] = _file_handler(log_file, level, settings)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structured": {
                    "()": StructuredFormatter,
                    "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                    "datefmt": DATE_FORMAT,
                },
                "detailed": {
                    "format": "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s",
                    "datefmt": DATE_FORMAT,
                },
            },
            "handlers": handlers,
            "loggers": {
                LOGGER_NAME: {
                    "level": level,
                    "handlers": list(handlers),
                    "propagate": False,
                },
            },
        }
    )


def log_structured(
    logger: logging.Logger, level: int, message: str, **structured_data: Any
) -> None:
    """
    Log a message with structured data.

    Args:
        logger: Logger instance
        level: Logging level
        message: Log message
        **structured_data: Additional structured data to include
    """
    if not logger.isEnabledFor(level):
        return
    record = logger.makeRecord(logger.name, level, "", 0, message, (), None)
    record.structured_data = structured_data
    logger.handle(record)
