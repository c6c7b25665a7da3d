"""
Error Handling

Centralized error handling and response formatting. Every error response has
the same body: {"message", "error", "status", "path", "requestId"}.

- Business exceptions (LegalEaseError) → their own status code
- Request validation errors → 400
- HTTP exceptions raised by the framework (unknown route, bad method) → as raised
- Unexpected exceptions → 500, caught by ErrorHandlingMiddleware
"""
import traceback
from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from ...api.exceptions import LegalEaseError
from ...core.config import ENVIRONMENT
from ...core.logging_config import get_logger

logger = get_logger(__name__)


def error_response(request: Request, status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    try:
        reason = HTTPStatus(status_code).phrase
    except ValueError:
        reason = "Error"
    return JSONResponse(
        status_code=status_code,
        content={
            "message": message,
            "error": reason,
            "status": status_code,
            "path": request.url.path,
            "requestId": getattr(request.state, "request_id", None),
        },
        headers=headers,
    )


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "Invalid request: " + "; ".join(parts) if parts else "Invalid request"


async def handle_business_exception(request: Request, exc: LegalEaseError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"Business exception for {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} for {request.method} {request.url.path}: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return error_response(request, exc.status_code, exc.message, headers=headers)


async def handle_validation_exception(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _describe_validation_errors(exc)
    logger.info(f"Validation error for {request.method} {request.url.path}: {message}")
    return error_response(request, status.HTTP_400_BAD_REQUEST, message)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(request, exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(LegalEaseError, handle_business_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_exception)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that converts unexpected exceptions into a 500 JSON response.

    Handled exceptions never reach it; they are turned into responses by the
    handlers registered in register_exception_handlers().
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Unexpected error for {request.method} {request.url.path}: {e}", exc_info=True)
            if ENVIRONMENT != "production":
                logger.debug(f"Traceback:\n{traceback.format_exc()}")
            message = str(e) if ENVIRONMENT != "production" else "Internal server error"
            return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, message)
