"""
Logging configuration
"""

import json
import logging
import logging.config
import os
from datetime import datetime, timezone

from kidmap.config import settings

LOG_DIR = "logs"
LOG_FILE = os.path.join(LOG_DIR, "kidmap.log")
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Third-party loggers and the level they are capped at
LIBRARY_LEVELS = {
    "uvicorn": "INFO",
    "sqlalchemy.engine": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
}

# Attributes every LogRecord carries; anything else was passed through ``extra``
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record. Fields passed via ``extra`` (provider,
    bbox, query, ...) are emitted as top-level keys.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        extra = {
            key: value for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        entry.update(extra)

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _handlers() -> dict:
    formatter = "json" if settings.LOG_FORMAT == "json" else "plain"
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": settings.LOG_LEVEL,
            "formatter": formatter,
            "stream": "ext://sys.stdout",
        }
    }

    if not settings.is_testing:
        os.makedirs(LOG_DIR, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "json",
            "filename": LOG_FILE,
            "maxBytes": LOG_FILE_MAX_BYTES,
            "backupCount": LOG_FILE_BACKUPS,
        }
    return handlers


def setup_logging():
    """
    Configure application logging
    """
    handlers = _handlers()

    loggers = {
        name: {"level": level, "handlers": ["console"], "propagate": False}
        for name, level in LIBRARY_LEVELS.items()
    }
    # Under test, kidmap records reach the root logger so pytest can capture them
    loggers["kidmap"] = {
        "level": settings.LOG_LEVEL,
        "handlers": [] if settings.is_testing else list(handlers),
        "propagate": settings.is_testing,
    }

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {"format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s"},
            "json": {"()": JSONFormatter},
        },
        "handlers": handlers,
        "loggers": loggers,
        "root": {"level": settings.LOG_LEVEL, "handlers": ["console"]},
    })
