# crudkit/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py          # App-level error taxonomy (AppError, NotFoundError, DatabaseError, ...)
# │   ├── signatures.py    # Structural classification of raw store errors
# │   └── mapper.py        # Raw store error -> DatabaseError, plus the async error boundary

from .base import (
    AppError,
    APIError,
    BadRequestError,
    ValidationError,
    UnauthorizedError,
    NotFoundError,
    DatabaseError,
    DatabaseErrorKind,
)
from .mapper import map_database_error, store_error_boundary

__all__ = [
    "AppError",
    "APIError",
    "BadRequestError",
    "ValidationError",
    "UnauthorizedError",
    "NotFoundError",
    "DatabaseError",
    "DatabaseErrorKind",
    "map_database_error",
    "store_error_boundary",
]
