"""
Handler factories for logging.dictConfig.

Each function returns a handler configuration dict (not a handler instance),
so builder.py stays a plain config assembler and the choices here are easy to
unit test.

| Name          | Destination      | Levels      | Used when                  |
| ------------- | ---------------- | ----------- | -------------------------- |
| console       | stderr           | LOG_LEVEL+  | always                     |
| file          | app.log (rotate) | LOG_LEVEL+  | LOG_TO_STDOUT=False        |
| error_file    | errors.log       | ERROR+      | LOG_TO_STDOUT=False        |
"""

from pathlib import Path

from crudkit.config.settings import Settings

_FILTERS = ["request_id", "redact"]


def _formatter_name(settings: Settings) -> str:
    return "json" if settings.LOG_FORMAT == "json" else "standard"


def get_console_handler(settings: Settings) -> dict:
    return {
        "class": "logging.StreamHandler",
        "formatter": _formatter_name(settings),
        "level": settings.LOG_LEVEL,
        "filters": _FILTERS,
    }


def get_file_handler(settings: Settings) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": _formatter_name(settings),
        "level": settings.LOG_LEVEL,
        "filename": str(Path(settings.LOG_DIR) / "app.log"),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": _FILTERS,
    }


def get_error_file_handler(settings: Settings) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json",  # keep error files structured for ingestion
        "level": "ERROR",
        "filename": str(Path(settings.LOG_DIR) / "errors.log"),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": _FILTERS,
    }
