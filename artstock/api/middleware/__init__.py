"""API middleware."""

from artstock.api.middleware.error_handler import ErrorHandlerMiddleware
from artstock.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
