"""
Services module containing the grade use cases and error logging.
"""

from .error_logger import ErrorLogEntry, ErrorLogger
from .grade_service import GradeService

__all__ = [
    "GradeService",
    "ErrorLogger",
    "ErrorLogEntry",
]
