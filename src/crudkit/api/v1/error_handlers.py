"""
Centralized exception handlers: every error that escapes a route ends up here
and is rendered as the error envelope

    {"success": false, "error": {"name": "...", "message": "...", "details": {...}}}

- operational AppError      -> its own status code and safe message
- non-operational AppError  -> treated like any unexpected error
- RequestValidationError    -> VALIDATION_ERROR (400) with field details
- Starlette HTTPException   -> same envelope (unknown route, wrong method, ...)
- anything else             -> 500 "Internal server error", logged with traceback

Register once from the app factory with `register_exception_handlers(app)`.
"""

import logging
import traceback
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from crudkit.exceptions.base import APIError, AppError, ValidationError
from crudkit.schemas.responses import error_response
from crudkit.validators.base_validator import issues_to_details

logger = logging.getLogger(__name__)

HTTP_STATUS_NAMES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "UNAUTHORIZED",
    404: "NOT_FOUND",
    422: "VALIDATION_ERROR",
}


def _show_stack(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.show_error_stack)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if not exc.is_operational:
        return await unhandled_exception_handler(request, exc)

    log = logger.warning if exc.status_code >= 500 else logger.info
    log(
        "http.app_error",
        extra={
            "method": request.method,
            "path": request.url.path,
            "error_name": exc.name,
            "status_code": exc.status_code,
        },
    )

    payload = exc.to_payload()
    if _show_stack(request):
        payload["stack"] = "".join(traceback.format_exception(exc))
    return error_response(exc.status_code, payload)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(
        "Invalid request",
        details=issues_to_details(exc.errors(), strip_location=True),
    )
    return await app_error_handler(request, error)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    status_code = exc.status_code
    if isinstance(exc.detail, str) and exc.detail:
        message = exc.detail
    else:
        message = HTTPStatus(status_code).phrase
    name = HTTP_STATUS_NAMES.get(status_code, "API_ERROR")

    logger.info(
        "http.http_exception",
        extra={"method": request.method, "path": request.url.path, "status_code": status_code},
    )
    response = error_response(status_code, {"name": name, "message": message})
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last resort. The client only ever sees the generic message; the original
    error and its traceback go to the logs.
    """
    logger.exception(
        "http.unhandled_error",
        exc_info=exc,
        extra={"method": request.method, "path": request.url.path, "error_class": type(exc).__name__},
    )
    return error_response(500, APIError().to_payload())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
