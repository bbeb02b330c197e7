"""
Logging filters.

- RequestIdFilter: guarantees every LogRecord carries `request_id`, taken from
  the record's `extra`, else from the per-request ContextVar set by
  RequestIDMiddleware, else the sentinel "-".
- RedactFilter: masks values of sensitive `extra` keys (passwords, tokens,
  hashes) before any handler formats them.

A ContextVar (not threading.local) is used because concurrent requests share
the event loop thread; the value survives across `await` within one request.
"""

import logging
from logging import LogRecord
import contextvars

_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def set_request_id(request_id: str | None):
    """
    Set the request id in the current context and return the token to allow reset.
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token):
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    SENSITIVE = {
        "password",
        "password_hash",
        "secret",
        "token",
        "access_token",
        "refresh_token",
        "authorization",
        "jwt_secret_key",
    }

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = "***REDACTED***"
        return True
