"""Service-level exceptions and the FastAPI handlers that render them."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""

    status_code = 400
    code = "invalid"

    def __init__(self, message: str, code: str | None = None, status_code: int | None = None, **extra: Any):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra


class NotFoundError(ServiceError):
    status_code = 404
    code = "not_found"


class ForbiddenError(ServiceError):
    status_code = 403
    code = "forbidden"


class ConflictError(ServiceError):
    status_code = 409
    code = "conflict"


# (field, pydantic error type) -> message shown to API clients
VALIDATION_MESSAGES = {
    ("username", "missing"): "Username is required",
    ("username", "string_too_short"): "Username should have a minimum length of 6",
    ("username", "string_too_long"): "Username should have a maximum length of 15",
    ("email", "missing"): "Email is required",
    ("email", "value_error"): "Please provide a valid email address",
    ("password", "missing"): "Password is required",
    ("password", "string_too_short"): "Password should have a minimum length of 6",
    ("token", "missing"): "Reset token is required",
    ("new_password", "missing"): "New password is required",
    ("new_password", "string_too_short"): "New password should have a minimum length of 6",
    ("name", "missing"): "Product name is required",
    ("price", "missing"): "Price is required",
    ("price", "float_parsing"): "Price must be a number",
    ("price", "float_type"): "Price must be a number",
    ("price", "finite_number"): "Price must be a finite number",
    ("price", "greater_than_equal"): "Price cannot be negative",
    ("price", "less_than_equal"): "Price is too large",
    ("quantity", "missing"): "Quantity is required",
    ("quantity", "int_parsing"): "Quantity must be a number",
    ("quantity", "int_type"): "Quantity must be a number",
    ("quantity", "int_from_float"): "Quantity must be an integer",
    ("quantity", "greater_than_equal"): "Quantity cannot be negative",
    ("quantity", "less_than_equal"): "Quantity is too large",
    ("category", "missing"): "Category is required",
    ("product_ids", "missing"): "Product IDs are required",
    ("product_ids", "list_type"): "Product IDs must be an array",
    ("product_ids", "too_short"): "At least one product ID is required",
}


def _format_validation_error(err: dict) -> str:
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    kind = err.get("type")
    if kind == "string_too_short" and (err.get("ctx") or {}).get("min_length") == 1:
        # An empty required string reads as a missing field
        kind = "missing"
    custom = VALIDATION_MESSAGES.get((field, kind))
    if custom:
        return custom
    msg = err.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    body = {"detail": exc.message, "error": exc.code}
    body.update(exc.extra)
    return JSONResponse(body, status_code=exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [_format_validation_error(err) for err in exc.errors()]
    return JSONResponse({"detail": "Validation failed", "errors": errors}, status_code=400)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"detail": "Internal Server Error"}, status_code=500)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
