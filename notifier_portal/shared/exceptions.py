"""Custom exception hierarchy and handlers."""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import HTMLResponse

logger = logging.getLogger(__name__)


class ClientException(Exception):
    """Base portal exception."""

    code = "client_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class FormValidationError(ClientException):
    """Raised when form input is rejected before any request is sent."""

    code = "validation_error"

    def __init__(self, field_id: str, message: str) -> None:
        self.field_id = field_id
        super().__init__(message)


class ApplicationError(ClientException):
    """Raised when the backend answers with a structured error body."""

    code = "application_error"

    def __init__(self, message: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(message)


class TransportError(ClientException):
    """Raised when a request never completes or its response is unreadable."""

    code = "transport_error"


async def unhandled_exception_handler(_: Request, exc: Exception) -> HTMLResponse:
    """Handle unexpected exceptions."""
    logger.exception("Unhandled error: %s", exc)
    return HTMLResponse(
        status_code=500,
        content="<!doctype html><title>Error</title><p>Internal server error</p>",
    )


def register_exception_handlers(app) -> None:
    """Register global exception handlers."""
    app.add_exception_handler(Exception, unhandled_exception_handler)
