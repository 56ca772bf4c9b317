"""
Typed application errors and their HTTP translation.

The data layer raises these instead of returning None, so routes stay
pass-through; main.py registers a handler that turns them into the same
{"detail": ...} body FastAPI uses for HTTPException.
"""

import logging
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base error carrying a client-facing message and HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(AppError):
    """Malformed or missing input (400)."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Bad Request"):
        super().__init__(message)


class NotFoundError(AppError):
    """Referenced entity does not exist (404)."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Not Found"):
        super().__init__(message)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")

    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    """Attach handlers for AppError and its subclasses to the app."""
    app.add_exception_handler(AppError, app_error_handler)
