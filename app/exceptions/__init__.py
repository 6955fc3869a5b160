from .base import (
    AppException,
    ValidationError,
    AuthenticationError,
    ConfigurationError,
    GatewayError,
    EventNotFoundError,
)
from .handlers import app_exception_handler, general_exception_handler

__all__ = [
    "AppException",
    "ValidationError",
    "AuthenticationError",
    "ConfigurationError",
    "GatewayError",
    "EventNotFoundError",
    "app_exception_handler",
    "general_exception_handler"
]
