"""
Core interfaces and abstract base classes for the GradeDesk core.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import (
    CorrectionFilters, Grade, GradeCorrection, GradeCorrectionRequest,
    GradeFilters, PaginatedResponse
)


class GradeGateway(ABC):
    """Data access for grades and corrections, implemented outside the core.

    Implementations raise ``GradeDeskException`` subclasses for failures
    they understand (authentication, network, not found); the service layer
    passes those through and wraps anything else as a server error.
    """

    @abstractmethod
    async def get_student_grades(self, student_id: str,
                                 filters: Optional[GradeFilters] = None) -> List[Grade]:
        """Get all grades for a student."""
        pass

    @abstractmethod
    async def get_student_grades_paginated(self, student_id: str, page: int, limit: int,
                                           filters: Optional[GradeFilters] = None) -> PaginatedResponse[Grade]:
        """Get one page of a student's grades."""
        pass

    @abstractmethod
    async def get_grade_by_id(self, grade_id: str, student_id: str) -> Optional[Grade]:
        """Get a single grade, or None when it does not exist."""
        pass

    @abstractmethod
    async def submit_grade_correction(self, request: GradeCorrectionRequest) -> GradeCorrection:
        """Store a new correction request and return the created record."""
        pass

    @abstractmethod
    async def get_grade_corrections(self, student_id: str,
                                    filters: Optional[CorrectionFilters] = None) -> List[GradeCorrection]:
        """Get all corrections submitted by a student."""
        pass

    @abstractmethod
    async def get_grade_corrections_paginated(self, student_id: str, page: int, limit: int,
                                              filters: Optional[CorrectionFilters] = None
                                              ) -> PaginatedResponse[GradeCorrection]:
        """Get one page of a student's corrections."""
        pass

    @abstractmethod
    async def get_correction_by_id(self, correction_id: str, student_id: str) -> Optional[GradeCorrection]:
        """Get a single correction, or None when it does not exist."""
        pass

    @abstractmethod
    async def can_submit_correction(self, grade_id: str, student_id: str) -> bool:
        """Check whether the backing store accepts a new correction for a grade."""
        pass

    @abstractmethod
    async def get_correction_attempts(self, grade_id: str, student_id: str) -> int:
        """Count corrections ever submitted for a grade."""
        pass


class KeyValueStorage(ABC):
    """String key/value storage used for client-side persistence."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Get a stored value."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove a value."""
        pass
