# FILE: curations/errors.py
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .logger import get_logger

logger = get_logger(__name__)


class StoreError(Exception):
    """Base for every error the API answers with ``{"error": ...}``."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(StoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input."


class DuplicateSubscriber(StoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "This email is already subscribed."


class NotFound(StoreError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class Unauthorized(StoreError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid or missing admin token."


class TransportError(StoreError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Notification could not be dispatched."


class PersistenceWarning(Exception):
    """A backing file could not be written. Logged by the stores, never returned."""


async def _store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = None
    if isinstance(exc, Unauthorized):
        headers = {"WWW-Authenticate": "X-Admin-Token"}
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # malformed bodies are plain InvalidInput for clients (400, not 422)
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()) if x != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    message = "; ".join(parts) or InvalidInput.default_message
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StoreError, _store_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
