"""
Error taxonomy shared by the store, the services and the HTTP layer.

Services raise these; the handlers registered in app.main turn them into
JSON responses with the matching status code.
"""
import logging
from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("app")


class BlogError(Exception):
    """Base class for every error the API reports to clients"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BlogError):
    """Malformed or missing required input (empty title, empty comment)"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class NotFoundError(BlogError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class PayloadTooLargeError(BlogError):
    status_code = status.HTTP_413_CONTENT_TOO_LARGE
    default_message = "Payload too large"


class UploadFormatError(BlogError):
    """Unsupported, oversized or malformed image data"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid upload"


class StorageError(BlogError):
    """I/O failure reading or writing the posts document"""
    default_message = "Storage failure"


async def blog_error_handler(request: Request, exc: BlogError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies as 400 with the first problem in plain words"""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": message})


exception_handlers = {
    BlogError: blog_error_handler,
    RequestValidationError: request_validation_error_handler,
}
