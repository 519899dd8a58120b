"""
Core entities for the GradeDesk core.

Entities are immutable pydantic models. They describe the shape of the
records exchanged with the grade gateway; the domain rules live in
``grades.py`` and ``corrections.py`` so that every violation can be
reported as a readable message instead of a parsing failure.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .enums import CorrectionStatus


T = TypeVar('T')

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class DomainModel(BaseModel):
    """Base model: frozen, snake_case attributes with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dict in the gateway's wire shape."""
        return self.model_dump(mode='json', by_alias=True)


class Grade(DomainModel):
    """A course result recorded for a student."""

    id: str = ""
    course_code: str
    course_name: str
    grade: str
    credit_hours: int
    semester: str
    student_id: str


class GradeCorrectionRequest(DomainModel):
    """A student's request to change the value of one grade."""

    grade_id: str = ""
    student_id: str = ""
    requested_grade: str = ""
    reason: str = ""
    supporting_details: str = ""


class GradeCorrection(DomainModel):
    """A correction request as tracked through its review lifecycle."""

    id: str = ""
    grade_id: str
    student_id: str
    requested_grade: str
    reason: str
    supporting_details: str = ""
    status: CorrectionStatus = CorrectionStatus.PENDING
    submission_date: datetime
    review_date: Optional[datetime] = None


class GradeFilters(DomainModel):
    semester: Optional[str] = None
    course_code: Optional[str] = None
    min_grade: Optional[str] = None
    max_grade: Optional[str] = None


class CorrectionFilters(DomainModel):
    status: Optional[CorrectionStatus] = None
    semester: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


class Pagination(DomainModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> 'Pagination':
        """Derive page counts and navigation flags from a total."""
        total_pages = math.ceil(total / limit) if limit > 0 else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class PaginatedResponse(DomainModel, Generic[T]):
    data: List[T]
    pagination: Pagination


class GradeStatistics(DomainModel):
    """Aggregates derived from a student's full grade list."""

    total_credits: int
    earned_credits: int
    gpa: float
    semester_gpa: Dict[str, float]
    grade_distribution: Dict[str, int]
    passing_grades: int
    failing_grades: int


class CorrectionSummary(DomainModel):
    """Aggregates derived from a student's correction history."""

    total_requests: int
    pending_requests: int
    approved_requests: int
    rejected_requests: int
    average_processing_days: float


@dataclass
class ValidationResult:
    """Outcome of a validation: a flag plus human-readable errors."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: List[str]) -> 'ValidationResult':
        return cls(is_valid=not errors, errors=list(errors))
