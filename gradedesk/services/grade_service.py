"""
Grade service: the use-case layer between the UI and the grade gateway.

Every operation validates its inputs before touching the gateway. Domain
exceptions raised by the gateway pass through unchanged; anything else is
logged and replaced by a ``ServerError`` carrying a generic message.

The service holds no state besides its collaborators, so concurrent calls
are independent. ``submit_grade_correction`` checks eligibility and then
writes; the two steps are not atomic, and two near-simultaneous submissions
for the same grade can both pass the pending check before either lands.
"""

import math
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from ..app_logger import get_logger
from ..core.corrections import (
    CorrectionRequestInput, GradeCorrectionBusinessRules, GradeCorrectionValidator
)
from ..core.entities import (
    DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, CorrectionFilters, CorrectionSummary, Grade,
    GradeCorrection, GradeFilters, GradeStatistics, PaginatedResponse, ValidationResult
)
from ..core.enums import CorrectionStatus
from ..core.exceptions import (
    CorrectionNotAllowedError, GradeDeskException, GradeNotFoundError, ServerError, ValidationError
)
from ..core.grades import GradeBusinessRules, GradeCalculations, GradeInput, GradeValidator
from ..core.interfaces import GradeGateway
from .error_logger import ErrorLogger


logger = get_logger(__name__)

SECONDS_PER_DAY = 86400


def _round_half_up(value: float, digits: int = 2) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


class GradeService:
    """Grade and correction use cases."""

    def __init__(self, gateway: GradeGateway, error_logger: Optional[ErrorLogger] = None):
        self._gateway = gateway
        self._error_logger = error_logger

    # ------------------------------------------------------------------
    # Grades
    # ------------------------------------------------------------------

    async def get_student_grades(self, student_id: str,
                                 filters: Optional[GradeFilters] = None) -> List[Grade]:
        student_id = self._require(student_id, 'Student ID')
        return await self._call_gateway(
            'Failed to fetch student grades',
            self._gateway.get_student_grades, student_id, filters
        )

    async def get_student_grades_paginated(self, student_id: str, page: int = 1,
                                           limit: int = DEFAULT_PAGE_SIZE,
                                           filters: Optional[GradeFilters] = None) -> PaginatedResponse[Grade]:
        student_id = self._require(student_id, 'Student ID')
        self._check_page(page, limit)
        return await self._call_gateway(
            'Failed to fetch paginated student grades',
            self._gateway.get_student_grades_paginated, student_id, page, limit, filters
        )

    async def get_grade_by_id(self, grade_id: str, student_id: str) -> Optional[Grade]:
        grade_id = self._require(grade_id, 'Grade ID')
        student_id = self._require(student_id, 'Student ID')
        return await self._call_gateway(
            'Failed to fetch grade',
            self._gateway.get_grade_by_id, grade_id, student_id
        )

    async def calculate_gpa(self, student_id: str, semester: Optional[str] = None) -> float:
        student_id = self._require(student_id, 'Student ID')
        filters = GradeFilters(semester=semester) if semester else None
        return await self._call_gateway(
            'Failed to calculate GPA',
            self._gateway.get_student_grades, student_id, filters,
            transform=GradeCalculations.calculate_gpa
        )

    async def get_total_credits(self, student_id: str) -> int:
        return await self._fetch_all_grades(
            student_id, 'Failed to calculate total credits', GradeCalculations.calculate_total_credits
        )

    async def get_earned_credits(self, student_id: str) -> int:
        return await self._fetch_all_grades(
            student_id, 'Failed to calculate earned credits', GradeCalculations.calculate_earned_credits
        )

    async def get_grades_by_semester(self, student_id: str) -> Dict[str, List[Grade]]:
        return await self._fetch_all_grades(
            student_id, 'Failed to fetch grades by semester', GradeCalculations.get_grades_by_semester
        )

    async def get_grade_statistics(self, student_id: str) -> GradeStatistics:
        """Credits, GPA overall and per semester, and the grade histogram, from one fetch."""
        return await self._fetch_all_grades(
            student_id, 'Failed to calculate grade statistics', self._build_statistics
        )

    @staticmethod
    def _build_statistics(grades: List[Grade]) -> GradeStatistics:
        semester_gpa = {
            semester: GradeCalculations.calculate_gpa(semester_grades)
            for semester, semester_grades in GradeCalculations.get_grades_by_semester(grades).items()
        }
        passing = GradeCalculations.count_passing(grades)

        return GradeStatistics(
            total_credits=GradeCalculations.calculate_total_credits(grades),
            earned_credits=GradeCalculations.calculate_earned_credits(grades),
            gpa=GradeCalculations.calculate_gpa(grades),
            semester_gpa=semester_gpa,
            grade_distribution=GradeCalculations.get_grade_distribution(grades),
            passing_grades=passing,
            failing_grades=len(grades) - passing,
        )

    # ------------------------------------------------------------------
    # Corrections
    # ------------------------------------------------------------------

    async def submit_grade_correction(self, request: CorrectionRequestInput) -> GradeCorrection:
        """Validate, check eligibility and attempt limits, then submit."""
        validation = self.validate_correction_request(request)
        if not validation.is_valid:
            raise self._validation_error(validation)

        normalized = GradeCorrectionBusinessRules.normalize_request(request)

        current_grade = await self.get_grade_by_id(normalized.grade_id, normalized.student_id)
        if current_grade is None:
            raise GradeNotFoundError('Grade not found', field='grade_id')

        validation = self.validate_correction_request(normalized, current_grade.grade)
        if not validation.is_valid:
            raise self._validation_error(validation)

        if not GradeBusinessRules.is_grade_eligible_for_correction(current_grade.grade):
            raise CorrectionNotAllowedError(
                'This grade is not eligible for correction',
                details={'grade': current_grade.grade}
            )

        if not await self.can_submit_correction(normalized.grade_id, normalized.student_id):
            raise CorrectionNotAllowedError('Cannot submit correction for this grade at this time')

        attempts = await self.get_correction_attempts(normalized.grade_id, normalized.student_id)
        max_attempts = GradeCorrectionBusinessRules.get_max_corrections_per_grade()
        if attempts >= max_attempts:
            raise CorrectionNotAllowedError(
                f'Maximum of {max_attempts} correction attempts reached for this grade',
                details={'attempts': attempts, 'max_attempts': max_attempts}
            )

        correction = await self._call_gateway(
            'Failed to submit grade correction',
            self._gateway.submit_grade_correction, normalized
        )
        logger.info("Correction submitted: grade=%s student=%s requested=%s attempt=%d",
                    normalized.grade_id, normalized.student_id, normalized.requested_grade, attempts + 1)
        return correction

    async def get_grade_corrections(self, student_id: str,
                                    filters: Optional[CorrectionFilters] = None) -> List[GradeCorrection]:
        student_id = self._require(student_id, 'Student ID')
        return await self._call_gateway(
            'Failed to fetch grade corrections',
            self._gateway.get_grade_corrections, student_id, filters
        )

    async def get_grade_corrections_paginated(self, student_id: str, page: int = 1,
                                              limit: int = DEFAULT_PAGE_SIZE,
                                              filters: Optional[CorrectionFilters] = None
                                              ) -> PaginatedResponse[GradeCorrection]:
        student_id = self._require(student_id, 'Student ID')
        self._check_page(page, limit)
        return await self._call_gateway(
            'Failed to fetch paginated grade corrections',
            self._gateway.get_grade_corrections_paginated, student_id, page, limit, filters
        )

    async def get_correction_by_id(self, correction_id: str, student_id: str) -> Optional[GradeCorrection]:
        correction_id = self._require(correction_id, 'Correction ID')
        student_id = self._require(student_id, 'Student ID')
        return await self._call_gateway(
            'Failed to fetch correction',
            self._gateway.get_correction_by_id, correction_id, student_id
        )

    async def can_submit_correction(self, grade_id: str, student_id: str) -> bool:
        grade_id = self._require(grade_id, 'Grade ID')
        student_id = self._require(student_id, 'Student ID')
        return await self._call_gateway(
            'Failed to check correction eligibility',
            self._gateway.can_submit_correction, grade_id, student_id
        )

    async def get_correction_attempts(self, grade_id: str, student_id: str) -> int:
        grade_id = self._require(grade_id, 'Grade ID')
        student_id = self._require(student_id, 'Student ID')
        return await self._call_gateway(
            'Failed to get correction attempts count',
            self._gateway.get_correction_attempts, grade_id, student_id
        )

    async def get_correction_summary(self, student_id: str) -> CorrectionSummary:
        """Counts by status and mean review time in days, from one fetch."""
        student_id = self._require(student_id, 'Student ID')
        return await self._call_gateway(
            'Failed to get correction summary',
            self._gateway.get_grade_corrections, student_id, None,
            transform=self._summarize_corrections
        )

    @staticmethod
    def _summarize_corrections(corrections: List[GradeCorrection]) -> CorrectionSummary:
        counts = {status: 0 for status in CorrectionStatus}
        for correction in corrections:
            counts[correction.status] += 1

        reviewed = [c for c in corrections if c.review_date is not None]
        average_days = 0.0
        if reviewed:
            total_days = sum(
                (c.review_date - c.submission_date).total_seconds() / SECONDS_PER_DAY
                for c in reviewed
            )
            average_days = _round_half_up(total_days / len(reviewed))

        return CorrectionSummary(
            total_requests=len(corrections),
            pending_requests=counts[CorrectionStatus.PENDING],
            approved_requests=counts[CorrectionStatus.APPROVED],
            rejected_requests=counts[CorrectionStatus.REJECTED],
            average_processing_days=average_days,
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_grade_data(self, grade_data: GradeInput) -> ValidationResult:
        return GradeValidator.validate_grade_data(grade_data)

    def validate_correction_request(self, request: CorrectionRequestInput,
                                    current_grade: Optional[str] = None) -> ValidationResult:
        return GradeCorrectionValidator.validate_correction_request(request, current_grade)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _fetch_all_grades(self, student_id: str, failure_message: str,
                                transform: Callable[[List[Grade]], Any]) -> Any:
        student_id = self._require(student_id, 'Student ID')
        return await self._call_gateway(
            failure_message, self._gateway.get_student_grades, student_id, None,
            transform=transform
        )

    async def _call_gateway(self, failure_message: str, operation: Callable[..., Awaitable[Any]],
                            *args: Any, transform: Optional[Callable[[Any], Any]] = None) -> Any:
        """Await a gateway call and apply ``transform`` to its result.

        Domain exceptions pass through. Anything else, from the call or from
        the transform, is recorded once and raised as ``ServerError``.
        """
        try:
            result = await operation(*args)
            return transform(result) if transform is not None else result
        except GradeDeskException:
            raise
        except Exception as e:
            operation_name = getattr(operation, '__name__', repr(operation))
            if self._error_logger is not None:
                self._error_logger.log_error(e, {'operation': operation_name, 'message': failure_message})
            else:
                logger.error("Gateway call %s failed: %s", operation_name, e, exc_info=True)
            raise ServerError(failure_message) from None

    @staticmethod
    def _require(value: Union[str, None], label: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f'{label} is required', field=label.lower().replace(' ', '_'))
        return value.strip()

    @staticmethod
    def _check_page(page: int, limit: int) -> None:
        if page < 1:
            raise ValidationError('Page must be greater than 0', field='page')
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise ValidationError(f'Limit must be between 1 and {MAX_PAGE_SIZE}', field='limit')

    @staticmethod
    def _validation_error(validation: ValidationResult) -> ValidationError:
        return ValidationError(', '.join(validation.errors), details={'errors': validation.errors})
