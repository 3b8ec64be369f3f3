"""
phoenix/errors.py

API error taxonomy and the exception handlers that render it.

Every error reaches the client as {"msg": "<human readable message>"} with the
matching status code. Tracebacks are logged server-side only.
"""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from phoenix.logging_config import get_logger

_logger = get_logger(__name__)


class ApiError(HTTPException):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(status_code=self.status_code, detail=message or self.default_message)


class ValidationError(ApiError):
    status_code = 400
    default_message = "Invalid request"


class Conflict(ApiError):
    status_code = 400
    default_message = "User already exists"


class InvalidCredentials(ApiError):
    # Same message for unknown email and wrong password
    status_code = 400
    default_message = "Invalid credentials"


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Token is not valid"


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class NotImplementedApi(ApiError):
    status_code = 501
    default_message = "Not implemented"


class InternalError(ApiError):
    status_code = 500
    default_message = "Server error"


def _format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    formatted = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        formatted.append({"field": ".".join(loc) or "body", "error": err.get("msg", "invalid")})
    return formatted


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    headers = getattr(exc, "headers", None)
    return JSONResponse(status_code=exc.status_code, content={"msg": exc.detail}, headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = _format_validation_errors(exc.errors())
    _logger.info("request.invalid", path=request.url.path, errors=errors)
    fields = ", ".join(e["field"] for e in errors)
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={"msg": f"Invalid or missing fields: {fields}", "errors": errors},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    _logger.exception("request.unhandled_error", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"msg": InternalError.default_message})


def register_exception_handlers(app: FastAPI) -> None:
    # starlette's HTTPException is the base of fastapi's, so routing 404/405 render the same way
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
