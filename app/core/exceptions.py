# app/core/exceptions.py
"""
Storefront error taxonomy.

Every failure a caller can see is one of these. Routes and services raise
them; the handlers registered in ``register_exception_handlers`` turn them
into ``{"detail": message}`` responses with the matching status code.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.monitoring import monitoring

logger = logging.getLogger(__name__)


class StoreError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthError(StoreError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Incorrect email or password."


class AccountBanned(AuthError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Account deactivated. Contact support for help."


class DuplicateEmail(StoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Email already registered. Please login instead."


class ValidationError(StoreError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Invalid request"


class NotFound(StoreError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Forbidden(StoreError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not allowed"


class Conflict(StoreError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class InvalidTransition(Conflict):
    default_message = "Order status cannot be changed"


class OrderPlacementFailed(StoreError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to place order"


class BackendUnavailable(StoreError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Something went wrong. Please try again."


async def store_error_handler(request: Request, exc: StoreError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def backend_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Backend failure on {request.method} {request.url.path}: {exc}")
    monitoring.record_error(str(exc))
    error = BackendUnavailable()
    return JSONResponse(status_code=error.status_code, content={"detail": error.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(SQLAlchemyError, backend_error_handler)
