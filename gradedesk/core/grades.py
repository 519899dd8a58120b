"""
Grade validation, business rules and calculations.
"""

import re
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Union

from .entities import Grade, ValidationResult
from .exceptions import ValidationError
from .fields import is_blank as _is_blank, read_field as _read


VALID_GRADES = (
    'A+', 'A', 'A-',
    'B+', 'B', 'B-',
    'C+', 'C', 'C-',
    'D+', 'D',
    'F', 'I', 'W',
)

GRADE_POINTS: Dict[str, float] = {
    'A+': 4.0,
    'A': 4.0,
    'A-': 3.7,
    'B+': 3.3,
    'B': 3.0,
    'B-': 2.7,
    'C+': 2.3,
    'C': 2.0,
    'C-': 1.7,
    'D+': 1.3,
    'D': 1.0,
    'F': 0.0,
    'I': 0.0,  # Incomplete, excluded from GPA
    'W': 0.0,  # Withdrawal, excluded from GPA
}

PASSING_GRADES = frozenset(('A+', 'A', 'A-', 'B+', 'B', 'B-', 'C+', 'C', 'C-', 'D+', 'D'))
NON_GPA_GRADES = frozenset(('I', 'W'))

MIN_CREDIT_HOURS = 1
MAX_CREDIT_HOURS = 6

COURSE_CODE_PATTERN = re.compile(r'[A-Z]{2,4}[0-9]{3,4}')
SEMESTER_PATTERN = re.compile(r'(Fall|Spring|Summer)\s[0-9]{4}')

GradeInput = Union[Grade, Mapping]


class GradeValidator:
    """Field-level validation rules for grade records."""

    @classmethod
    def validate_course_code(cls, course_code: str) -> ValidationResult:
        errors: List[str] = []
        if _is_blank(course_code):
            errors.append('Course code is required')
        elif not COURSE_CODE_PATTERN.fullmatch(course_code.strip()):
            errors.append('Course code must be in format like CS101 or MATH201')
        return ValidationResult.from_errors(errors)

    @classmethod
    def validate_course_name(cls, course_name: str) -> ValidationResult:
        errors: List[str] = []
        if _is_blank(course_name):
            errors.append('Course name is required')
        else:
            length = len(course_name.strip())
            if length < 3:
                errors.append('Course name must be at least 3 characters long')
            if length > 100:
                errors.append('Course name must be no more than 100 characters long')
        return ValidationResult.from_errors(errors)

    @classmethod
    def validate_grade(cls, grade: str) -> ValidationResult:
        errors: List[str] = []
        if _is_blank(grade):
            errors.append('Grade is required')
        elif grade not in VALID_GRADES:
            errors.append(f"Grade must be one of: {', '.join(VALID_GRADES)}")
        return ValidationResult.from_errors(errors)

    @classmethod
    def validate_credit_hours(cls, credit_hours: Any) -> ValidationResult:
        errors: List[str] = []
        if credit_hours is None:
            errors.append('Credit hours is required')
        elif not cls._is_credit_hour_value(credit_hours):
            errors.append(
                f'Credit hours must be an integer between {MIN_CREDIT_HOURS} and {MAX_CREDIT_HOURS}'
            )
        return ValidationResult.from_errors(errors)

    @staticmethod
    def _is_credit_hour_value(value: Any) -> bool:
        if isinstance(value, bool):
            return False
        if isinstance(value, float):
            if not value.is_integer():
                return False
        elif not isinstance(value, int):
            return False
        return MIN_CREDIT_HOURS <= value <= MAX_CREDIT_HOURS

    @classmethod
    def validate_semester(cls, semester: str) -> ValidationResult:
        errors: List[str] = []
        if _is_blank(semester):
            errors.append('Semester is required')
        elif not SEMESTER_PATTERN.fullmatch(semester.strip()):
            errors.append('Semester must be in format like "Fall 2023" or "Spring 2024"')
        return ValidationResult.from_errors(errors)

    @classmethod
    def validate_grade_data(cls, grade_data: GradeInput) -> ValidationResult:
        """Validate every field of a grade record.

        Errors are reported in field order: course code, course name, grade,
        credit hours, semester, student id.
        """
        errors: List[str] = []
        errors.extend(cls.validate_course_code(_read(grade_data, 'course_code')).errors)
        errors.extend(cls.validate_course_name(_read(grade_data, 'course_name')).errors)
        errors.extend(cls.validate_grade(_read(grade_data, 'grade')).errors)
        errors.extend(cls.validate_credit_hours(_read(grade_data, 'credit_hours')).errors)
        errors.extend(cls.validate_semester(_read(grade_data, 'semester')).errors)

        if _is_blank(_read(grade_data, 'student_id')):
            errors.append('Student ID is required')

        return ValidationResult.from_errors(errors)


class GradeBusinessRules:
    """Business rules applied to individual grades."""

    @staticmethod
    def create_grade(grade_data: GradeInput) -> Grade:
        """Build a normalized grade; the id is assigned by persistence."""
        validation = GradeValidator.validate_grade_data(grade_data)
        if not validation.is_valid:
            raise ValidationError(
                f"Invalid grade data: {', '.join(validation.errors)}",
                details={'errors': validation.errors}
            )

        return Grade(
            id='',
            course_code=_read(grade_data, 'course_code').strip().upper(),
            course_name=_read(grade_data, 'course_name').strip(),
            grade=_read(grade_data, 'grade').strip(),
            credit_hours=int(_read(grade_data, 'credit_hours')),
            semester=_read(grade_data, 'semester').strip(),
            student_id=_read(grade_data, 'student_id').strip(),
        )

    @staticmethod
    def get_grade_points(grade: str) -> float:
        return GRADE_POINTS.get(grade, 0.0)

    @staticmethod
    def is_passing_grade(grade: str) -> bool:
        return grade in PASSING_GRADES

    @staticmethod
    def is_grade_eligible_for_correction(grade: str) -> bool:
        """Any completed grade can be corrected; incompletes and withdrawals cannot."""
        return grade in VALID_GRADES and grade not in NON_GPA_GRADES

    @classmethod
    def calculate_quality_points(cls, grade: Grade) -> float:
        return cls.get_grade_points(grade.grade) * grade.credit_hours

    @staticmethod
    def format_grade_display(grade: Grade) -> str:
        return f"{grade.course_code} - {grade.course_name}: {grade.grade} ({grade.credit_hours} credits)"


class GradeCalculations:
    """Aggregate calculations over a collection of grades."""

    @staticmethod
    def calculate_gpa(grades: Iterable[Grade]) -> float:
        """Credit-weighted GPA, ignoring incompletes and withdrawals."""
        eligible = [g for g in grades if g.grade not in NON_GPA_GRADES]
        if not eligible:
            return 0.0

        total_quality_points = sum(GradeBusinessRules.calculate_quality_points(g) for g in eligible)
        total_credit_hours = sum(g.credit_hours for g in eligible)

        if total_credit_hours <= 0:
            return 0.0
        return total_quality_points / total_credit_hours

    @staticmethod
    def calculate_total_credits(grades: Iterable[Grade]) -> int:
        return sum(g.credit_hours for g in grades)

    @staticmethod
    def calculate_earned_credits(grades: Iterable[Grade]) -> int:
        return sum(g.credit_hours for g in grades if GradeBusinessRules.is_passing_grade(g.grade))

    @staticmethod
    def get_grades_by_semester(grades: Iterable[Grade]) -> Dict[str, List[Grade]]:
        by_semester: Dict[str, List[Grade]] = {}
        for grade in grades:
            by_semester.setdefault(grade.semester, []).append(grade)
        return by_semester

    @staticmethod
    def get_grade_distribution(grades: Iterable[Grade]) -> Dict[str, int]:
        distribution: Dict[str, int] = {}
        for grade in grades:
            distribution[grade.grade] = distribution.get(grade.grade, 0) + 1
        return distribution

    @staticmethod
    def count_passing(grades: Iterable[Grade]) -> int:
        return sum(1 for g in grades if GradeBusinessRules.is_passing_grade(g.grade))
