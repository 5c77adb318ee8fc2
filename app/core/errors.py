"""
app/core/errors.py

Purpose: HTTP error rendering

- Every error body is an ErrorResponse {error, code, details}
- 5xx errors are logged with traceback; production hides their message and details
"""

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.exceptions import CargoLinkError
from app.core.logging import get_logger
from app.schemas.response import ErrorResponse

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An internal error occurred. Please try again later."


def error_response(status_code: int, message: str, code: str, details: Optional[Any] = None) -> JSONResponse:
    if status_code >= 500 and settings.is_production:
        message, details = GENERIC_ERROR_MESSAGE, None

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message, code=code, details=details).model_dump()
    )


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """

    @app.exception_handler(CargoLinkError)
    async def cargolink_exception_handler(request: Request, exc: CargoLinkError):
        if exc.status_code >= 500:
            logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}", exc_info=exc)
        else:
            logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
        return error_response(exc.status_code, exc.message, exc.code, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # 404 / 405 and friends
        return error_response(exc.status_code, str(exc.detail), "HTTP_ERROR")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Rejected payload on {request.url.path}: {len(exc.errors())} error(s)")
        return error_response(422, "Input validation failed", "VALIDATION_ERROR", jsonable_encoder(exc.errors()))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        client = request.client.host if request.client else "unknown"
        logger.error(f"Unhandled exception on {request.method} {request.url.path} from {client}: {exc}", exc_info=exc)
        return error_response(500, str(exc), "INTERNAL_ERROR")
