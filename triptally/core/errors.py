"""Domain exceptions and their HTTP translation.

Services raise the exceptions below; `main.create_app` registers the handlers
so every failure reaches the client as a single JSON body of the form
``{"error": <kind>, "message": <text>}`` (plus ``field`` for validation errors).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger("triptally.errors")

GENERIC_ERROR_MESSAGE = "An unexpected error occurred."


class TripTallyError(Exception):
    """Base class for client-reportable failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message}


class ValidationError(TripTallyError):
    """Malformed or missing input, or a violated cross-field invariant."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if self.field is not None:
            body["field"] = self.field
        return body


class NotFoundError(TripTallyError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"


class TransactionFailure(TripTallyError):
    """The store could not commit a multi-statement write; it was rolled back."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "transaction_failed"


def domain_error_handler(request: Request, exc: TripTallyError):  # type: ignore
    if exc.status_code >= 500:
        logger.error("%s: %s", exc.error, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def http_error_handler(request: Request, exc):  # type: ignore
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        content = {
            "error": "not_found",
            "message": f"No route for {request.method} {request.url.path}",
        }
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        content = {
            "error": "method_not_allowed",
            "message": f"{request.method} not allowed on {request.url.path}",
        }
    else:
        content = {"error": "http_error", "message": str(exc.detail)}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")]
    translated = ValidationError(
        first.get("msg", "invalid request"), field=".".join(loc) or None
    )
    return JSONResponse(status_code=translated.status_code, content=translated.to_dict())


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": GENERIC_ERROR_MESSAGE,
        },
    )
