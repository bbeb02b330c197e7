"""
Application error taxonomy.

Every failure that is allowed to reach a client is one of the classes below.
Each class fixes its HTTP status code and a machine-readable `name`, so the
HTTP boundary never has to guess how to render an error.

    AppError
    ├── APIError            500  generic unexpected failure
    ├── BadRequestError     400
    ├── ValidationError     400  carries {field_path: [messages]}
    ├── DatabaseError       400/409/500 depending on DatabaseErrorKind
    ├── UnauthorizedError   403
    └── NotFoundError       404

Errors are constructed where the failure is detected, raised immediately and
never mutated afterwards. The centralized handlers in
`crudkit.api.v1.error_handlers` are the only consumers.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Sequence


class AppError(Exception):
    """
    Base class for typed application errors.

    - name: canonical machine-readable kind (e.g. 'NOT_FOUND'), used by clients
    - status_code: HTTP status that accompanies this error
    - description: human-friendly message (safe to show to clients)
    - is_operational: True for anticipated failures; False marks a programming
      defect, which the HTTP boundary renders as a generic 500
    - details: optional structured payload (field-level map for validation failures)
    """

    name: str = "APP_ERROR"
    status_code: int = 500

    def __init__(
        self,
        description: str,
        *,
        details: Mapping[str, Any] | None = None,
        is_operational: bool = True,
        status_code: int | None = None,
    ):
        super().__init__(description)
        self.description = description
        self.details = dict(details) if details else None
        self.is_operational = is_operational
        if status_code is not None:
            self.status_code = status_code

    @property
    def message(self) -> str:
        return self.description

    def __str__(self) -> str:
        if self.details:
            return f"{self.description} ({self.name}: {self.details})"
        return self.description

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, status_code={self.status_code}, description={self.description!r})"

    def to_payload(self) -> dict:
        """
        Return the `error` member of the error envelope.

        Shape:
            {"name": "NOT_FOUND", "message": "...", "details": {...}}

        `details` is omitted when empty. Stack traces are added by the HTTP
        boundary, never here.
        """
        payload: dict[str, Any] = {"name": self.name, "message": self.description}
        if self.details:
            payload["details"] = self.details
        return payload


class APIError(AppError):
    """Generic unexpected failure."""

    name = "API_ERROR"
    status_code = 500

    def __init__(self, description: str = "Internal server error", **kwargs):
        super().__init__(description, **kwargs)


class BadRequestError(AppError):
    name = "BAD_REQUEST"
    status_code = 400

    def __init__(self, description: str = "Bad request", **kwargs):
        super().__init__(description, **kwargs)


class ValidationError(AppError):
    """
    Raised when input does not satisfy its schema.

    `details` maps a dotted field path to the list of messages for that field:

        {"email": ["value is not a valid email address"],
         "password": ["String should have at least 8 characters"]}
    """

    name = "VALIDATION_ERROR"
    status_code = 400

    def __init__(
        self,
        description: str = "Validation failed",
        *,
        details: Mapping[str, Sequence[str]] | None = None,
    ):
        normalized = {field: list(messages) for field, messages in (details or {}).items()}
        super().__init__(description, details=normalized)

    @property
    def fields(self) -> list[str]:
        return sorted(self.details or {})


class UnauthorizedError(AppError):
    name = "UNAUTHORIZED"
    status_code = 403

    def __init__(self, description: str = "Not authorized", **kwargs):
        super().__init__(description, **kwargs)


class NotFoundError(AppError):
    name = "NOT_FOUND"
    status_code = 404

    def __init__(self, description: str = "Not found", **kwargs):
        super().__init__(description, **kwargs)


# =================================================================================================================
# Database errors
# =================================================================================================================

class DatabaseErrorKind(str, Enum):
    DUPLICATE_KEY = "DUPLICATE_KEY"
    INVALID_ID = "INVALID_ID"
    DB_VALIDATION_ERROR = "DB_VALIDATION_ERROR"
    WRITE_CONFLICT = "WRITE_CONFLICT"
    DATABASE_UNAVAILABLE = "DATABASE_UNAVAILABLE"
    UNKNOWN = "UNKNOWN"


# Each kind -> (status code, description template). Templates only use
# `{entity}` and `{fields}` so no raw driver text can reach a client.
DATABASE_ERROR_TABLE: dict[DatabaseErrorKind, tuple[int, str]] = {
    DatabaseErrorKind.DUPLICATE_KEY: (400, "{entity} with this {fields} already exists"),
    DatabaseErrorKind.INVALID_ID: (400, "Invalid {entity} identifier"),
    DatabaseErrorKind.DB_VALIDATION_ERROR: (400, "{entity} failed database validation"),
    DatabaseErrorKind.WRITE_CONFLICT: (409, "{entity} was modified concurrently, retry the operation"),
    DatabaseErrorKind.DATABASE_UNAVAILABLE: (500, "Database is unavailable"),
    DatabaseErrorKind.UNKNOWN: (500, "Unexpected database error while operating on {entity}"),
}


class DatabaseError(AppError):
    """
    Typed persistence failure. Only ever built by `crudkit.exceptions.mapper`
    (through `from_kind`), so status and wording stay tied to the kind.
    """

    name = "DATABASE_ERROR"

    def __init__(
        self,
        description: str,
        *,
        kind: DatabaseErrorKind = DatabaseErrorKind.UNKNOWN,
        details: Mapping[str, Any] | None = None,
    ):
        status_code, _ = DATABASE_ERROR_TABLE[kind]
        super().__init__(description, details=details, status_code=status_code)
        self.kind = kind

    @classmethod
    def from_kind(
        cls,
        kind: DatabaseErrorKind,
        *,
        entity: str | None = None,
        fields: Sequence[str] | None = None,
    ) -> "DatabaseError":
        _, template = DATABASE_ERROR_TABLE[kind]
        description = template.format(
            entity=entity or "Record",
            fields=", ".join(fields) if fields else "value",
        )
        details = None
        if fields:
            reason = "already exists" if kind is DatabaseErrorKind.DUPLICATE_KEY else "failed database validation"
            details = {field: [reason] for field in fields}
        return cls(description, kind=kind, details=details)

    @property
    def fields(self) -> list[str] | None:
        return sorted(self.details) if self.details else None

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["kind"] = self.kind.value
        return payload


__all__ = [
    "AppError",
    "APIError",
    "BadRequestError",
    "ValidationError",
    "UnauthorizedError",
    "NotFoundError",
    "DatabaseError",
    "DatabaseErrorKind",
    "DATABASE_ERROR_TABLE",
]
