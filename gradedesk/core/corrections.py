"""
Grade correction validation and lifecycle rules.

A correction is created ``pending`` and is later approved or rejected by a
reviewer. Corrections are never deleted: the full history for a grade is
what attempt counting and resubmission checks are computed from.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from .entities import GradeCorrection, GradeCorrectionRequest, ValidationResult
from .enums import CorrectionStatus
from .exceptions import ValidationError
from .fields import is_blank, read_field
from .grades import VALID_GRADES


MAX_CORRECTIONS_PER_GRADE = 3

REASON_MIN_LENGTH = 10
REASON_MAX_LENGTH = 500
DETAILS_MIN_LENGTH = 5
DETAILS_MAX_LENGTH = 1000

CorrectionRequestInput = Union[GradeCorrectionRequest, Mapping]
StatusInput = Union[CorrectionStatus, str]

# Phrase -> form field, checked in order; first match wins.
_FIELD_PHRASES = (
    ('Grade ID', 'grade_id'),
    ('Student ID', 'student_id'),
    ('Requested grade', 'requested_grade'),
    ('Reason', 'reason'),
    ('Supporting details', 'supporting_details'),
)


def _status_value(status: Any) -> Any:
    return status.value if isinstance(status, CorrectionStatus) else status


@dataclass
class CorrectionCreationResult:
    """Outcome of building a correction: a pending record or the reasons it was refused."""
    correction: Optional[GradeCorrection] = None
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.correction is not None and not self.errors

    def unwrap(self) -> GradeCorrection:
        """Return the correction or raise ``ValidationError`` with every error."""
        if not self.success:
            raise ValidationError(
                f"Invalid correction request: {', '.join(self.errors)}",
                details={'errors': list(self.errors)}
            )
        return self.correction


class GradeCorrectionValidator:
    """Field validation for correction requests."""

    @staticmethod
    def validate_reason(reason: str) -> ValidationResult:
        errors: List[str] = []
        if is_blank(reason):
            errors.append('Reason is required')
        else:
            length = len(reason.strip())
            if length < REASON_MIN_LENGTH:
                errors.append(f'Reason must be at least {REASON_MIN_LENGTH} characters long')
            if length > REASON_MAX_LENGTH:
                errors.append(f'Reason must be no more than {REASON_MAX_LENGTH} characters long')
        return ValidationResult.from_errors(errors)

    @staticmethod
    def validate_supporting_details(supporting_details: Optional[str]) -> ValidationResult:
        """Supporting details are optional; bounds apply only when provided."""
        errors: List[str] = []
        if not is_blank(supporting_details):
            length = len(supporting_details.strip())
            if length < DETAILS_MIN_LENGTH:
                errors.append(
                    f'Supporting details must be at least {DETAILS_MIN_LENGTH} characters long if provided'
                )
            if length > DETAILS_MAX_LENGTH:
                errors.append(
                    f'Supporting details must be no more than {DETAILS_MAX_LENGTH} characters long'
                )
        return ValidationResult.from_errors(errors)

    @staticmethod
    def validate_requested_grade(requested_grade: str, current_grade: Optional[str]) -> ValidationResult:
        errors: List[str] = []
        if is_blank(requested_grade):
            errors.append('Requested grade is required')
        else:
            if requested_grade not in VALID_GRADES:
                errors.append(f"Requested grade must be one of: {', '.join(VALID_GRADES)}")
            if requested_grade == current_grade:
                errors.append('Requested grade cannot be the same as current grade')
        return ValidationResult.from_errors(errors)

    @classmethod
    def validate_correction_request(cls, request: CorrectionRequestInput,
                                    current_grade: Optional[str] = None) -> ValidationResult:
        errors: List[str] = []

        if is_blank(read_field(request, 'grade_id')):
            errors.append('Grade ID is required')
        if is_blank(read_field(request, 'student_id')):
            errors.append('Student ID is required')

        errors.extend(cls.validate_reason(read_field(request, 'reason')).errors)
        errors.extend(cls.validate_supporting_details(read_field(request, 'supporting_details')).errors)
        errors.extend(cls.validate_requested_grade(
            read_field(request, 'requested_grade'), current_grade or ''
        ).errors)

        return ValidationResult.from_errors(errors)

    @staticmethod
    def validate_status(status: StatusInput) -> ValidationResult:
        errors: List[str] = []
        valid_statuses = [s.value for s in CorrectionStatus]
        if _status_value(status) not in valid_statuses:
            errors.append(f"Status must be one of: {', '.join(valid_statuses)}")
        return ValidationResult.from_errors(errors)


class GradeCorrectionBusinessRules:
    """Eligibility, attempt and status-transition rules for corrections."""

    @staticmethod
    def normalize_request(request: CorrectionRequestInput) -> GradeCorrectionRequest:
        """Return a copy of the request with every string field trimmed."""
        return GradeCorrectionRequest(
            grade_id=(read_field(request, 'grade_id') or '').strip(),
            student_id=(read_field(request, 'student_id') or '').strip(),
            requested_grade=(read_field(request, 'requested_grade') or '').strip(),
            reason=(read_field(request, 'reason') or '').strip(),
            supporting_details=(read_field(request, 'supporting_details') or '').strip(),
        )

    @classmethod
    def create_correction_request(cls, request: CorrectionRequestInput,
                                  current_grade: Optional[str] = None) -> CorrectionCreationResult:
        validation = GradeCorrectionValidator.validate_correction_request(request, current_grade)
        if not validation.is_valid:
            return CorrectionCreationResult(errors=validation.errors)

        normalized = cls.normalize_request(request)
        correction = GradeCorrection(
            id='',
            grade_id=normalized.grade_id,
            student_id=normalized.student_id,
            requested_grade=normalized.requested_grade,
            reason=normalized.reason,
            supporting_details=normalized.supporting_details,
            status=CorrectionStatus.PENDING,
            submission_date=datetime.now(timezone.utc),
            review_date=None,
        )
        return CorrectionCreationResult(correction=correction)

    @staticmethod
    def can_submit_correction(existing_corrections: Iterable[GradeCorrection], grade_id: str) -> bool:
        """Only one pending correction per grade at a time."""
        return not any(
            c.grade_id == grade_id and c.status == CorrectionStatus.PENDING
            for c in existing_corrections
        )

    @staticmethod
    def can_resubmit_correction(existing_corrections: Iterable[GradeCorrection], grade_id: str) -> bool:
        """A new request may follow only a rejected one (or none at all)."""
        history = [c for c in existing_corrections if c.grade_id == grade_id]
        if not history:
            return True
        latest = max(history, key=lambda c: c.submission_date)
        return latest.status == CorrectionStatus.REJECTED

    @staticmethod
    def get_max_corrections_per_grade() -> int:
        return MAX_CORRECTIONS_PER_GRADE

    @staticmethod
    def get_correction_attempts(corrections: Iterable[GradeCorrection], grade_id: str) -> int:
        """Every correction counts as an attempt, whatever its outcome."""
        return sum(1 for c in corrections if c.grade_id == grade_id)

    @classmethod
    def can_submit_new_correction(cls, corrections: Iterable[GradeCorrection], grade_id: str) -> bool:
        corrections = list(corrections)
        attempts = cls.get_correction_attempts(corrections, grade_id)
        return (
            attempts < cls.get_max_corrections_per_grade()
            and cls.can_submit_correction(corrections, grade_id)
        )

    @staticmethod
    def update_correction_status(correction: GradeCorrection, new_status: StatusInput) -> GradeCorrection:
        """Return a copy with the new status.

        Every move to a non-pending status stamps ``review_date`` with the
        current time, including repeated moves to the same status.
        """
        validation = GradeCorrectionValidator.validate_status(new_status)
        if not validation.is_valid:
            raise ValidationError(
                f"Invalid status: {', '.join(validation.errors)}",
                field='status',
                details={'errors': validation.errors}
            )

        status = CorrectionStatus(_status_value(new_status))
        review_date = correction.review_date
        if status != CorrectionStatus.PENDING:
            review_date = datetime.now(timezone.utc)

        return correction.model_copy(update={'status': status, 'review_date': review_date})

    @staticmethod
    def is_pending(correction: GradeCorrection) -> bool:
        return correction.status == CorrectionStatus.PENDING

    @staticmethod
    def is_approved(correction: GradeCorrection) -> bool:
        return correction.status == CorrectionStatus.APPROVED

    @staticmethod
    def is_rejected(correction: GradeCorrection) -> bool:
        return correction.status == CorrectionStatus.REJECTED

    @staticmethod
    def get_days_since_submission(correction: GradeCorrection, now: Optional[datetime] = None) -> int:
        now = now or datetime.now(timezone.utc)
        elapsed = abs((now - correction.submission_date).total_seconds())
        return math.ceil(elapsed / 86400)

    @staticmethod
    def format_correction_summary(correction: GradeCorrection) -> str:
        status_text = correction.status.value.capitalize()
        return f"Correction Request: {correction.requested_grade} - {status_text}"


def map_errors_to_fields(errors: Iterable[str]) -> Dict[str, str]:
    """Key validation messages by the form field they refer to.

    Messages that match no known field are collected under ``general``;
    a later message for the same field replaces an earlier one.
    """
    field_errors: Dict[str, str] = {}
    for error in errors:
        for phrase, field_name in _FIELD_PHRASES:
            if phrase in error:
                field_errors[field_name] = error
                break
        else:
            field_errors['general'] = error
    return field_errors
