"""
Structural classification of raw document-store errors.

The classifier never uses `isinstance` against driver classes: it looks at the
numeric `code`, the class names in the exception's MRO, the `errorLabels` the
server attached and, as a last resort, the message text. That keeps the
mapper usable with any driver build (pymongo, test doubles, wrapped errors)
and makes it the single isolation boundary between the store and the app.
"""

import logging
import re
from enum import IntEnum
from typing import Any

from .base import DatabaseErrorKind

logger = logging.getLogger(__name__)


# =================================================================================================================
# Server error codes
# =================================================================================================================

# https://www.mongodb.com/docs/manual/reference/error-codes/
class MongoErrorCodes(IntEnum):
    HOST_UNREACHABLE = 6
    HOST_NOT_FOUND = 7
    MAX_TIME_MS_EXPIRED = 50
    NETWORK_TIMEOUT = 89
    SHUTDOWN_IN_PROGRESS = 91
    WRITE_CONFLICT = 112
    DOCUMENT_VALIDATION_FAILURE = 121
    PRIMARY_STEPPED_DOWN = 189
    EXCEEDED_TIME_LIMIT = 262
    NOT_WRITABLE_PRIMARY = 10107
    DUPLICATE_KEY = 11000
    DUPLICATE_KEY_UPDATE = 11001
    INTERRUPTED_AT_SHUTDOWN = 11600
    INTERRUPTED_DUE_TO_REPL_STATE_CHANGE = 11602
    NOT_PRIMARY_NO_SECONDARY_OK = 13435
    NOT_PRIMARY_OR_SECONDARY = 13436
    DUPLICATE_KEY_LEGACY = 12582


CODE_KIND_MAP: dict[int, DatabaseErrorKind] = {
    MongoErrorCodes.DUPLICATE_KEY: DatabaseErrorKind.DUPLICATE_KEY,
    MongoErrorCodes.DUPLICATE_KEY_UPDATE: DatabaseErrorKind.DUPLICATE_KEY,
    MongoErrorCodes.DUPLICATE_KEY_LEGACY: DatabaseErrorKind.DUPLICATE_KEY,
    MongoErrorCodes.DOCUMENT_VALIDATION_FAILURE: DatabaseErrorKind.DB_VALIDATION_ERROR,
    MongoErrorCodes.WRITE_CONFLICT: DatabaseErrorKind.WRITE_CONFLICT,
    MongoErrorCodes.HOST_UNREACHABLE: DatabaseErrorKind.DATABASE_UNAVAILABLE,
    MongoErrorCodes.HOST_NOT_FOUND: DatabaseErrorKind.DATABASE_UNAVAILABLE,
    MongoErrorCodes.MAX_TIME_MS_EXPIRED: DatabaseErrorKind.DATABASE_UNAVAILABLE,
    MongoErrorCodes.NETWORK_TIMEOUT: DatabaseErrorKind.DATABASE_UNAVAILABLE,
    MongoErrorCodes.SHUTDOWN_IN_PROGRESS: DatabaseErrorKind.DATABASE_UNAVAILABLE,
    MongoErrorCodes.PRIMARY_STEPPED_DOWN: DatabaseErrorKind.DATABASE_UNAVAILABLE,
    MongoErrorCodes.EXCEEDED_TIME_LIMIT: DatabaseErrorKind.DATABASE_UNAVAILABLE,
    MongoErrorCodes.NOT_WRITABLE_PRIMARY: DatabaseErrorKind.DATABASE_UNAVAILABLE,
    MongoErrorCodes.INTERRUPTED_AT_SHUTDOWN: DatabaseErrorKind.DATABASE_UNAVAILABLE,
    MongoErrorCodes.INTERRUPTED_DUE_TO_REPL_STATE_CHANGE: DatabaseErrorKind.DATABASE_UNAVAILABLE,
    MongoErrorCodes.NOT_PRIMARY_NO_SECONDARY_OK: DatabaseErrorKind.DATABASE_UNAVAILABLE,
    MongoErrorCodes.NOT_PRIMARY_OR_SECONDARY: DatabaseErrorKind.DATABASE_UNAVAILABLE,
}

INVALID_ID_CLASS_NAMES = frozenset({"InvalidId", "CastError"})

UNAVAILABLE_CLASS_NAMES = frozenset({
    "ServerSelectionTimeoutError",
    "NetworkTimeout",
    "AutoReconnect",
    "ConnectionFailure",
    "ExecutionTimeout",
    "WaitQueueTimeoutError",
    "TimeoutError",
})

WRITE_CONFLICT_LABELS = frozenset({"TransientTransactionError"})

# Message fallbacks, checked in this order.
_MESSAGE_PATTERNS: tuple[tuple[DatabaseErrorKind, tuple[str, ...]], ...] = (
    (DatabaseErrorKind.DUPLICATE_KEY, ("e11000", "duplicate key")),
    (DatabaseErrorKind.INVALID_ID, ("is not a valid objectid", "cast to objectid failed")),
    (DatabaseErrorKind.DB_VALIDATION_ERROR, ("document failed validation",)),
    (DatabaseErrorKind.WRITE_CONFLICT, ("write conflict", "writeconflict")),
    (DatabaseErrorKind.DATABASE_UNAVAILABLE, ("server selection timeout", "timed out", "connection refused")),
)


# =================================================================================================================
# Attribute helpers
# =================================================================================================================

def _error_code(exc: BaseException) -> int | None:
    code = getattr(exc, "code", None)
    if isinstance(code, bool):
        return None
    if isinstance(code, int):
        return code
    details = _error_details(exc)
    code = details.get("code")
    return code if isinstance(code, int) and not isinstance(code, bool) else None


def _error_details(exc: BaseException) -> dict[str, Any]:
    details = getattr(exc, "details", None)
    return details if isinstance(details, dict) else {}


def _class_names(exc: BaseException) -> set[str]:
    return {cls.__name__ for cls in type(exc).__mro__}


_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_sequence(value: Any) -> list[Any] | tuple[Any, ...] | set[Any] | frozenset[Any]:
    return value if isinstance(value, _SEQUENCE_TYPES) else ()


def _error_labels(exc: BaseException) -> set[str]:
    labels = getattr(exc, "_error_labels", None) or _error_details(exc).get("errorLabels")
    return {str(label) for label in _as_sequence(labels)}


def _match_any(msg: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in msg for keyword in keywords)


# =================================================================================================================
# Field extraction
# =================================================================================================================

def _fields_from_duplicate(exc: BaseException) -> list[str] | None:
    """
    Best-effort extraction of the fields behind a unique-index violation.

    Sources, in order:
      - details["keyValue"] / details["keyPattern"] (server >= 4.2)
      - 'dup key: { email: "a@b.com" }' in the message
      - 'index: email_1 dup key' -> the index name with the direction suffix dropped
    Only field names are returned; values stay out of logs and payloads.
    """
    details = _error_details(exc)
    for key in ("keyValue", "keyPattern"):
        value = details.get(key)
        if isinstance(value, dict) and value:
            return [str(key) for key in value]

    msg = str(details.get("errmsg") or exc)

    m = re.search(r"dup key:\s*\{\s*(?P<body>[^}]*)\}", msg)
    if m:
        names = re.findall(r"([A-Za-z_][\w.]*)\s*:", m.group("body"))
        if names:
            return names

    m = re.search(r"index:\s*(?P<index>[\w.$]+)", msg)
    if m:
        parts = m.group("index").split("_")
        # email_1 / sku_1_name_-1 style names alternate field, direction
        names = [p for p in parts[0::2] if p]
        if names and all(d.lstrip("-").isdigit() for d in parts[1::2]):
            return names
        return [m.group("index")]

    return None


def _fields_from_validation(exc: BaseException) -> list[str] | None:
    """
    Pull failing property names out of errInfo.details.schemaRulesNotSatisfied
    (server >= 5.0 DocumentValidationFailure payload).
    """
    err_info = _as_dict(_error_details(exc).get("errInfo"))
    rules = _as_sequence(_as_dict(err_info.get("details")).get("schemaRulesNotSatisfied"))
    names: list[str] = []
    for rule in rules:
        rule = _as_dict(rule)
        for prop in _as_sequence(rule.get("propertiesNotSatisfied")):
            name = _as_dict(prop).get("propertyName")
            if isinstance(name, str) and name and name not in names:
                names.append(name)
        for name in _as_sequence(rule.get("missingProperties")):
            if isinstance(name, str) and name and name not in names:
                names.append(name)
    return names or None


# =================================================================================================================
# Classifier
# =================================================================================================================

def classify_store_error(exc: BaseException) -> tuple[DatabaseErrorKind, list[str] | None]:
    """
    Classify a raw store error into a DatabaseErrorKind (first match wins).

    Returns:
        A tuple of (kind, field names involved if they could be extracted)
    """
    code = _error_code(exc)
    names = _class_names(exc)
    labels = _error_labels(exc)

    kind = CODE_KIND_MAP.get(code) if code is not None else None

    if kind is None and names & INVALID_ID_CLASS_NAMES:
        kind = DatabaseErrorKind.INVALID_ID

    if kind is None and labels & WRITE_CONFLICT_LABELS:
        kind = DatabaseErrorKind.WRITE_CONFLICT

    if kind is None and names & UNAVAILABLE_CLASS_NAMES:
        kind = DatabaseErrorKind.DATABASE_UNAVAILABLE

    if kind is None:
        normalized = str(exc).lower()
        for candidate, keywords in _MESSAGE_PATTERNS:
            if _match_any(normalized, keywords):
                kind = candidate
                break

    if kind is None:
        logger.debug("Unrecognized store error signature", extra={"code": code, "error_class": type(exc).__name__})
        return DatabaseErrorKind.UNKNOWN, None

    extractor = _FIELD_EXTRACTORS.get(kind)
    if extractor is None:
        return kind, None
    try:
        return kind, extractor(exc)
    except Exception:
        # field names are optional; the kind alone is still a valid classification
        logger.debug("Could not extract fields from store error", extra={"code": code, "error_class": type(exc).__name__})
        return kind, None


_FIELD_EXTRACTORS = {
    DatabaseErrorKind.DUPLICATE_KEY: _fields_from_duplicate,
    DatabaseErrorKind.DB_VALIDATION_ERROR: _fields_from_validation,
}
