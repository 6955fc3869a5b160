from typing import Optional, Dict, Any


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppException):
    """Validation error exception."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class AuthenticationError(AppException):
    """Scheduler credentials missing or invalid."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, status_code=401)


class ConfigurationError(AppException):
    """A required integration is not configured."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=503, details=details)


class GatewayError(AppException):
    """Calendar query, create or delete failed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, status_code: int = 502):
        super().__init__(message, status_code=status_code, details=details)


class EventNotFoundError(GatewayError):
    """Calendar event no longer exists."""

    def __init__(self, event_id: str):
        message = f"Calendar event with id '{event_id}' not found"
        super().__init__(message, details={"event_id": event_id}, status_code=404)
        self.event_id = event_id
