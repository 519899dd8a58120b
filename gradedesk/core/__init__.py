"""
Core module containing the grade and correction domain model.
"""

from .entities import *
from .enums import *
from .exceptions import *
from .grades import *
from .corrections import *
from .interfaces import *

__all__ = [
    # Entities
    "Grade",
    "GradeCorrection",
    "GradeCorrectionRequest",
    "GradeFilters",
    "CorrectionFilters",
    "Pagination",
    "PaginatedResponse",
    "GradeStatistics",
    "CorrectionSummary",
    "ValidationResult",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",

    # Rules
    "VALID_GRADES",
    "GRADE_POINTS",
    "GradeValidator",
    "GradeBusinessRules",
    "GradeCalculations",
    "MAX_CORRECTIONS_PER_GRADE",
    "CorrectionCreationResult",
    "GradeCorrectionValidator",
    "GradeCorrectionBusinessRules",
    "map_errors_to_fields",

    # Interfaces
    "GradeGateway",
    "KeyValueStorage",

    # Enums
    "CorrectionStatus",
    "ErrorCode",
    "ErrorSeverity",

    # Exceptions
    "GradeDeskException",
    "ValidationError",
    "NotFoundError",
    "GradeNotFoundError",
    "CorrectionNotAllowedError",
    "ServerError",
    "AuthenticationError",
    "AuthorizationError",
    "NetworkError",
    "ConfigurationError",
]
