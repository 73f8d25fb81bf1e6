"""
Logging configuration for WhatsApp Analysis.

The CLI and the API server both call setup_logging() once at startup; library
modules only create module loggers and never configure handlers.

Environment Variables:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL (case-insensitive).
               Unset or unknown values mean INFO.
    LOG_FILE: Optional path of a rotating log file, used when no log_file
              argument is given.

Usage:
    from whatsapp_analysis.logger_config import setup_logging
    setup_logging()
    setup_logging(level=logging.DEBUG, log_file="analysis.log")
"""

import logging
import logging.config
import os
from typing import Any, Dict, Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Third-party loggers kept at WARNING or above
QUIET_LOGGERS = ("multipart", "uvicorn.access")


def get_log_level() -> int:
    """
    Read the log level from the LOG_LEVEL environment variable.

    Returns:
        Logging level constant, logging.INFO if unset or invalid.
    """
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), None)
    return level if isinstance(level, int) else logging.INFO


def build_logging_config(
    level: int,
    format_string: str = DEFAULT_FORMAT,
    log_file: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the dictConfig schema for the given level and outputs.

    Console output goes to stdout. A rotating UTF-8 file handler is added
    when log_file is given.
    """
    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "standard",
            "stream": "ext://sys.stdout",
        },
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "standard",
            "filename": log_file,
            "maxBytes": LOG_FILE_MAX_BYTES,
            "backupCount": LOG_FILE_BACKUPS,
            "encoding": "utf-8",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": format_string, "datefmt": DATE_FORMAT},
        },
        "handlers": handlers,
        "loggers": {name: {"level": max(level, logging.WARNING)} for name in QUIET_LOGGERS},
        "root": {"level": level, "handlers": list(handlers)},
    }


def setup_logging(
    level: Optional[int] = None,
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure application logging.

    Each call replaces the handlers of the previous one.

    Args:
        level: Logging level. Defaults to LOG_LEVEL (INFO).
        format_string: Optional custom record format.
        log_file: Optional rotating log file. Defaults to LOG_FILE.
    """
    logging.config.dictConfig(
        build_logging_config(
            level if level is not None else get_log_level(),
            format_string or DEFAULT_FORMAT,
            log_file or os.getenv("LOG_FILE"),
        )
    )
