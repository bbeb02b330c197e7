"""
Response envelopes.

Success:  {"statusCode": 200, "data": ..., "message": "...", "success": true}
Error:    {"success": false, "error": {"name": "...", "message": "...", "details": {...}}}

`success` is the discriminant; a response is always exactly one of the two.
"""

from typing import Any, Literal

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field


class ApiResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(alias="statusCode")
    data: Any = None
    message: str = "Success"
    success: Literal[True] = True

    @classmethod
    def ok(cls, data: Any = None, message: str = "Success", status_code: int = 200) -> "ApiResponse":
        return cls(status_code=status_code, data=data, message=message)


class ErrorBody(BaseModel):
    name: str
    message: str
    kind: str | None = None
    details: dict[str, Any] | None = None
    stack: str | None = None


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    error: ErrorBody


def respond(data: Any = None, message: str = "Success", status_code: int = 200) -> JSONResponse:
    """
    Wrap `data` in the success envelope and return it with `status_code`.
    """
    envelope = ApiResponse.ok(data=data, message=message, status_code=status_code)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(envelope.model_dump(by_alias=True)),
    )


def error_response(status_code: int, error: dict[str, Any]) -> JSONResponse:
    envelope = ErrorResponse(error=ErrorBody(**error))
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(exclude_none=True),
    )
