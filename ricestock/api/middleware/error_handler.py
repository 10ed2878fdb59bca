"""
Error responses for the ledger API.

Every error leaves the API as an ``ErrorResponse`` body:
- error_code: machine-readable identifier (``INSUFFICIENT_STOCK``, ...)
- message: human-readable description
- hint: what the caller can do about it
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ricestock.application.dto.responses import ErrorResponse
from ricestock.config import get_logger
from ricestock.core.exceptions import (
    ConfigurationError,
    InsufficientStockError,
    NotFoundError,
    RiceStockError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# First match wins.
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InsufficientStockError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

HINT_MAP: dict[str, str] = {
    "INVALID_INPUT": "Check the request fields. Quantities and prices must be greater than 0.",
    "MISSING_ACTOR": "Send the acting user's identity in the X-Actor header.",
    "INSUFFICIENT_STOCK": "Check the lot with GET /api/stock/balances/{id} and retry with a smaller quantity.",
    "STOCK_BALANCE_NOT_FOUND": "Check the lot ID and try GET /api/stock/balances to list lots.",
    "WAREHOUSE_NOT_FOUND": "Check the warehouse ID against the master data.",
    "VARIETY_NOT_FOUND": "Check the rice variety ID against the master data.",
    "SUPPLIER_NOT_FOUND": "Check the supplier ID against the master data.",
    "RECORD_NOT_FOUND": "Check the record ID and kind.",
    "STORAGE_FAILURE": "The mutation was rolled back and nothing was saved. Retry later.",
    "CORRUPT_RECORD": "A stored record could not be read back. Check the column named in the message.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
}

STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    405: "Stock is changed only through POST to the mutation endpoints.",
    409: "The request conflicts with current stock. Re-read the lot and retry.",
    500: "An internal error occurred. Check server logs.",
}

HTTP_ERROR_CODES: dict[int, str] = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _json_error(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    detail: str | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, ""),
        detail=detail,
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Map an exception to its status code and standard error body, and log it."""
    status_code = _status_for(exc)
    if isinstance(exc, RiceStockError):
        error_code, message = exc.code, exc.message
    else:
        error_code, message = exc.__class__.__name__, str(exc)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_error",
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        error_code=error_code,
        error=message,
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )
    return _json_error(request, status_code, error_code, message)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn exceptions that escape the route handlers into error responses."""

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
    @app.exception_handler(RiceStockError)
    async def ledger_exception_handler(request: Request, exc: RiceStockError) -> JSONResponse:
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            f"{' -> '.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        return _json_error(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "VALIDATION_ERROR",
            "Request validation failed",
            detail="; ".join(errors),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _json_error(
            request,
            exc.status_code,
            HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
            str(exc.detail or "An error occurred"),
        )
