"""Error taxonomy shared by the ownership engine and the API layer."""

import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# Configure logging
logger = logging.getLogger(__name__)


class BlogApiError(Exception):
    """Base class for every error the API reports to callers."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BlogApiError):
    """Malformed or missing input, raised before any store access."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(BlogApiError):
    """Missing, invalid or rejected credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(BlogApiError):
    """Authenticated caller lacks rights for this specific mutation."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(BlogApiError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(BlogApiError):
    """Username or email already taken."""

    status_code = status.HTTP_409_CONFLICT


class UploadError(BlogApiError):
    """Asset store rejected or failed an upload."""

    status_code = status.HTTP_502_BAD_GATEWAY


class StoreError(BlogApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_blog_api_error(request: Request, exc: BlogApiError) -> JSONResponse:
    """Translate a domain error into a JSON response."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")

    headers = None
    if isinstance(exc, AuthError):
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400, like every other validation failure."""
    messages = []
    for error in exc.errors():
        message = error.get("msg", "Invalid value")
        # pydantic prefixes messages raised from validators
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        messages.append(message)

    detail = "; ".join(dict.fromkeys(messages)) or "Invalid request"
    logger.warning(f"{request.method} {request.url.path} rejected (400): {detail}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BlogApiError, handle_blog_api_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
