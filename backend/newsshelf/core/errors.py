"""
Error taxonomy shared by the document stores and the API layer.

Services raise these; ``register_exception_handlers`` maps them to HTTP
responses so endpoints never translate storage errors by hand.
"""

import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class NewsShelfError(Exception):
    """Base class for errors reported to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(NewsShelfError):
    """Missing or malformed required fields. Never retried."""

    status_code = 400


class Unauthorized(NewsShelfError):
    status_code = 401


class NotFound(NewsShelfError):
    """Referenced user or row is absent."""

    status_code = 404


class ConcurrentUpdate(NewsShelfError):
    """A versioned read-modify-write lost every attempt to a concurrent writer."""

    status_code = 409


class StorageUnavailable(NewsShelfError):
    """The underlying store is unreachable or rejected the operation."""

    status_code = 500


class UpstreamError(NewsShelfError):
    """The news-search API failed or reported an error."""

    status_code = 502

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.status_code = status_code


class PartialInitialization(NewsShelfError):
    """
    A new user's dependent rows could not be created.

    Logged and swallowed by UserDirectory; never surfaced to the caller.
    """


async def newsshelf_error_handler(request: Request, exc: NewsShelfError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report missing/malformed fields as 400 with a short message."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid {location}: {first.get('msg', 'invalid value')}"
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"detail": message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NewsShelfError, newsshelf_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
