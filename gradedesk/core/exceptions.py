"""
Custom exceptions for the GradeDesk core.
"""

from typing import Optional, Any, Dict, List

from .enums import ErrorCode


class GradeDeskException(Exception):
    """Base exception for all GradeDesk domain errors."""

    default_code = ErrorCode.SERVER_ERROR

    def __init__(self, message: str, error_code: Optional[ErrorCode] = None,
                 field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.field = field
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.error_code.value}, message={self.message!r})"


class ValidationError(GradeDeskException):
    """Raised when input fails validation before any gateway call."""

    default_code = ErrorCode.VALIDATION_ERROR

    @property
    def errors(self) -> List[str]:
        """Individual rule violations, falling back to the message."""
        return list(self.details.get('errors') or [self.message])


class NotFoundError(GradeDeskException):
    """Raised when a requested resource is not found."""
    default_code = ErrorCode.NOT_FOUND_ERROR


class GradeNotFoundError(NotFoundError):
    """Raised when the grade targeted by an operation does not exist."""
    default_code = ErrorCode.GRADE_NOT_FOUND


class CorrectionNotAllowedError(GradeDeskException):
    """Raised when a correction violates eligibility or attempt rules."""
    default_code = ErrorCode.CORRECTION_NOT_ALLOWED


class ServerError(GradeDeskException):
    """Raised when the gateway fails in an unexpected way."""
    default_code = ErrorCode.SERVER_ERROR


class AuthenticationError(GradeDeskException):
    """Raised by the transport layer when the session is not authenticated."""
    default_code = ErrorCode.AUTHENTICATION_ERROR


class AuthorizationError(GradeDeskException):
    """Raised when access is denied."""
    default_code = ErrorCode.AUTHORIZATION_ERROR


class NetworkError(GradeDeskException):
    """Raised when network operations fail."""
    default_code = ErrorCode.NETWORK_ERROR


class ConfigurationError(GradeDeskException):
    """Raised when configuration is invalid."""
    default_code = ErrorCode.CONFIGURATION_ERROR
