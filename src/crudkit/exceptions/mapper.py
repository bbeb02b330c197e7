r"""
Map raw document-store errors to app-level DatabaseErrors.

Two levels, same as before:

    1. `classify_store_error(exc)` (signatures.py) answers "what exactly failed
       in the database" -> a DatabaseErrorKind plus the fields involved.
    2. `map_database_error(exc)` turns that classification into the public
       `DatabaseError` that repositories raise and the HTTP boundary renders.

| Store signal                         | Kind                  | Status |
| ------------------------------------ | --------------------- | ------ |
| code 11000 / E11000 duplicate key    | DUPLICATE_KEY         | 400    |
| InvalidId / CastError                | INVALID_ID            | 400    |
| code 121 document failed validation  | DB_VALIDATION_ERROR   | 400    |
| code 112 / TransientTransactionError | WRITE_CONFLICT        | 409    |
| server selection / network timeout   | DATABASE_UNAVAILABLE  | 500    |
| anything else                        | UNKNOWN               | 500    |

The mapping is total: every input yields a DatabaseError, and raw driver
messages never end up in the client-facing description.
"""
import logging
from contextlib import asynccontextmanager

from .base import AppError, DatabaseError, DatabaseErrorKind
from .signatures import classify_store_error

logger = logging.getLogger(__name__)


def _raw_text(exc: BaseException) -> str:
    try:
        return str(exc)
    except Exception:
        return f"<unprintable {type(exc).__name__}>"


def map_database_error(exc: BaseException, entity: str | None = None) -> DatabaseError:
    """
    Translate an opaque store exception into a DatabaseError. Never raises.
    """
    model_part = entity or "Record"
    try:
        kind, fields = classify_store_error(exc)
    except Exception:
        logger.debug("mapper.classification_failed", extra={"model": model_part, "error_class": type(exc).__name__})
        kind, fields = DatabaseErrorKind.UNKNOWN, None

    if kind is DatabaseErrorKind.DUPLICATE_KEY:
        # Expected client-level scenario; field names only, never values.
        logger.info("mapper.duplicate_detected", extra={"model": model_part, "fields": fields})

    elif kind in (DatabaseErrorKind.INVALID_ID, DatabaseErrorKind.DB_VALIDATION_ERROR):
        logger.info("mapper.client_error", extra={"model": model_part, "kind": kind.value, "fields": fields})

    elif kind in (DatabaseErrorKind.WRITE_CONFLICT, DatabaseErrorKind.DATABASE_UNAVAILABLE):
        logger.warning(
            "mapper.%s", kind.value.lower(),
            extra={"model": model_part, "error_class": type(exc).__name__},
        )

    else:
        logger.warning("mapper.unknown_store_error", extra={"model": model_part, "error_class": type(exc).__name__})
        # Raw text only at DEBUG
        logger.debug("mapper.unknown_store_error_raw", extra={"model": model_part, "raw": _raw_text(exc)[:500]})

    return DatabaseError.from_kind(kind, entity=model_part, fields=fields)


@asynccontextmanager
async def store_error_boundary(entity: str | None = None):
    """
    Usage:
        async with store_error_boundary(self.entity_name):
            ... store calls that may raise driver errors ...

    Typed AppErrors raised inside the block propagate unchanged; anything else
    is replaced by the mapped DatabaseError, chained to the original.
    """
    try:
        yield
    except AppError:
        raise
    except Exception as exc:
        raise map_database_error(exc, entity) from exc
