"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from src.application.dto.responses import ErrorResponse
from src.config import get_logger
from src.core.exceptions import (
    ConfigurationError,
    DuplicateEmailError,
    ExportError,
    InvalidCredentialsError,
    LLMError,
    NotAuthenticatedError,
    NovaBillError,
    RecordNotFoundError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes; first isinstance match wins, so
# subclasses come before their bases
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    DuplicateEmailError: status.HTTP_409_CONFLICT,
    InvalidCredentialsError: status.HTTP_401_UNAUTHORIZED,
    NotAuthenticatedError: status.HTTP_401_UNAUTHORIZED,
    RecordNotFoundError: status.HTTP_404_NOT_FOUND,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    LLMError: status.HTTP_503_SERVICE_UNAVAILABLE,
    ExportError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    FileNotFoundError: status.HTTP_404_NOT_FOUND,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

# Hint messages per error code / exception type
HINT_MAP: dict[str, str] = {
    "PRODUCT_NOT_FOUND": "Check the product ID and try GET /api/products to list products.",
    "CUSTOMER_NOT_FOUND": "Check the customer ID and try GET /api/customers to list customers.",
    "INVOICE_NOT_FOUND": "Check the invoice ID and try GET /api/invoices to list invoices.",
    "ITEM_NOT_FOUND": "The line item is not on this invoice draft.",
    "DUPLICATE_EMAIL": "Log in with this email instead, or register with another one.",
    "INVALID_CREDENTIALS": "Check the email and password.",
    "NOT_AUTHENTICATED": "Log in with POST /api/auth/login or register with POST /api/auth/register.",
    "STORAGE_READ_ERROR": "Stored data is corrupt. Restore the database from a backup.",
    "EXPORT_FAILED": "The PDF could not be written. Check the export directory permissions.",
    "LLM_UNAVAILABLE": "The LLM provider is offline. Retry later.",
    "LLM_TIMEOUT": "The LLM request timed out. Retry later.",
    "CIRCUIT_BREAKER_OPEN": "Too many LLM failures. Wait for cooldown before retrying.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "FileNotFoundError": "The requested file or resource was not found.",
    "ValueError": "A parameter value is invalid. Check the request.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    401: "Authentication is required.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with existing data.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
    503: "The service is temporarily unavailable. Retry later.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert exception to standardized JSON response."""
    status_code = status_for(exc)
    error_code = exc.code if isinstance(exc, NovaBillError) else exc.__class__.__name__
    request_id = getattr(request.state, "request_id", None)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_failed",
        request_id=request_id,
        path=request.url.path,
        error_type=error_code,
        error=str(exc),
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    body = ErrorResponse(
        error_code=error_code,
        message=str(exc),
        hint=_get_hint(error_code, status_code),
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions that escape the exception handlers to standardized
    JSON error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(NovaBillError)
    async def domain_exception_handler(
        request: Request,
        exc: NovaBillError,
    ) -> JSONResponse:
        """Map domain errors to their HTTP status."""
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code)

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
        )


def _infer_error_code(status_code: int) -> str:
    return {
        400: "BAD_REQUEST",
        401: "NOT_AUTHENTICATED",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        422: "UNPROCESSABLE_ENTITY",
    }.get(status_code, "HTTP_ERROR")
