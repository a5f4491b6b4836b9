"""Domain exceptions raised by service functions.

Routers translate these into HTTP responses with ``raise_http``.
"""

from __future__ import annotations

from typing import NoReturn

from fastapi import HTTPException


class ServiceError(Exception):
    """Base class for service-layer errors."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    """A lookup by reference found nothing in the caller's scope."""

    status_code = 404


class ValidationError(ServiceError):
    """A business rule rejected the request."""

    status_code = 400


class ForbiddenError(ServiceError):
    """The caller may not act on this record."""

    status_code = 403


class ConflictError(ServiceError):
    """The request collides with an existing record."""

    status_code = 409


def raise_http(exc: ServiceError) -> NoReturn:
    """Re-raise a service error as an HTTPException."""
    raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
