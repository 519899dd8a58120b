"""
Enumerations and constants for the GradeDesk core.
"""

from enum import Enum


class CorrectionStatus(str, Enum):
    """Lifecycle status of a grade correction request."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ErrorCode(str, Enum):
    """Kinds of domain errors surfaced to the UI layer."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
    NOT_FOUND_ERROR = "NOT_FOUND_ERROR"
    DUPLICATE_ERROR = "DUPLICATE_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    SERVER_ERROR = "SERVER_ERROR"
    BUSINESS_RULE_ERROR = "BUSINESS_RULE_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    # Grade-specific
    GRADE_NOT_FOUND = "GRADE_NOT_FOUND"
    CORRECTION_NOT_ALLOWED = "CORRECTION_NOT_ALLOWED"
    MAX_CORRECTIONS_REACHED = "MAX_CORRECTIONS_REACHED"
    DUPLICATE_CORRECTION = "DUPLICATE_CORRECTION"
    INVALID_GRADE_DATA = "INVALID_GRADE_DATA"


class ErrorSeverity(Enum):
    """Severity assigned to logged errors."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
