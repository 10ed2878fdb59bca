"""API middleware."""

from ricestock.api.middleware.error_handler import ErrorHandlerMiddleware
from ricestock.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
