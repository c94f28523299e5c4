"""Service errors and the FastAPI handlers that turn them into JSON.

Every failure reaches the client as ``{"error": ...}``:

- ServiceError subclasses -> their own status code and message
- RequestValidationError (unparseable body) -> 400, same shape as payload errors
- 404/405 from routing -> 404 {"error": "Not found"}
- anything else -> 500 {"error": "Internal server error"}, logged with traceback
"""

from typing import List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from .validators import format_errors


class ServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_response(self) -> dict:
        return {"error": self.message}


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "VALIDATION_ERROR"

    def __init__(self, details: List[dict], message: Optional[str] = None):
        super().__init__(message)
        self.details = details

    def to_response(self) -> dict:
        return {"error": self.message, "details": self.details}


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    message = "Conflict"


class InternalError(ServiceError):
    pass


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.error("{} on {} {}", exc.message, request.method, request.url.path)
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = format_errors(exc.errors())
        logger.debug("Rejected body on {}: {}", request.url.path, details)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ValidationError(details).to_response(),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # unmatched path or method falls through to the catch-all 404
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": "Not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(
            "Unhandled error on {} {}", request.method, request.url.path
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=InternalError().to_response(),
        )
