"""Shared fixtures: an in-memory grade gateway and key/value storage."""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from gradedesk.core import (
    CorrectionFilters, CorrectionStatus, Grade, GradeCorrection, GradeCorrectionRequest,
    GradeGateway, KeyValueStorage, PaginatedResponse, Pagination
)


STUDENT_ID = "S001"
SUBMITTED_AT = datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def anyio_backend():
    return "asyncio"


class FakeGradeGateway(GradeGateway):
    """Gateway over plain lists; records every call and can be told to fail."""

    def __init__(self, grades: Optional[List[Grade]] = None,
                 corrections: Optional[List[GradeCorrection]] = None):
        self.grades = list(grades or [])
        self.corrections = list(corrections or [])
        self.calls: List[tuple] = []
        self.failures: Dict[str, BaseException] = {}
        self.allow_submission = True
        self.attempts_override: Optional[int] = None

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.failures:
            raise self.failures[name]

    def call_names(self):
        return [c[0] for c in self.calls]

    async def get_student_grades(self, student_id, filters=None):
        self._record('get_student_grades', student_id, filters)
        grades = [g for g in self.grades if g.student_id == student_id]
        if filters is not None and filters.semester:
            grades = [g for g in grades if g.semester == filters.semester]
        return grades

    async def get_student_grades_paginated(self, student_id, page, limit, filters=None):
        self._record('get_student_grades_paginated', student_id, page, limit, filters)
        grades = [g for g in self.grades if g.student_id == student_id]
        start = (page - 1) * limit
        return PaginatedResponse[Grade](
            data=grades[start:start + limit],
            pagination=Pagination.build(page, limit, len(grades)),
        )

    async def get_grade_by_id(self, grade_id, student_id):
        self._record('get_grade_by_id', grade_id, student_id)
        for grade in self.grades:
            if grade.id == grade_id and grade.student_id == student_id:
                return grade
        return None

    async def submit_grade_correction(self, request: GradeCorrectionRequest):
        self._record('submit_grade_correction', request)
        correction = GradeCorrection(
            id=f"c{len(self.corrections) + 1}",
            grade_id=request.grade_id,
            student_id=request.student_id,
            requested_grade=request.requested_grade,
            reason=request.reason,
            supporting_details=request.supporting_details,
            submission_date=datetime.now(timezone.utc),
        )
        self.corrections.append(correction)
        return correction

    async def get_grade_corrections(self, student_id, filters: Optional[CorrectionFilters] = None):
        self._record('get_grade_corrections', student_id, filters)
        corrections = [c for c in self.corrections if c.student_id == student_id]
        if filters is not None and filters.status is not None:
            corrections = [c for c in corrections if c.status == filters.status]
        return corrections

    async def get_grade_corrections_paginated(self, student_id, page, limit, filters=None):
        self._record('get_grade_corrections_paginated', student_id, page, limit, filters)
        corrections = [c for c in self.corrections if c.student_id == student_id]
        start = (page - 1) * limit
        return PaginatedResponse[GradeCorrection](
            data=corrections[start:start + limit],
            pagination=Pagination.build(page, limit, len(corrections)),
        )

    async def get_correction_by_id(self, correction_id, student_id):
        self._record('get_correction_by_id', correction_id, student_id)
        for correction in self.corrections:
            if correction.id == correction_id and correction.student_id == student_id:
                return correction
        return None

    async def can_submit_correction(self, grade_id, student_id):
        self._record('can_submit_correction', grade_id, student_id)
        return self.allow_submission

    async def get_correction_attempts(self, grade_id, student_id):
        self._record('get_correction_attempts', grade_id, student_id)
        if self.attempts_override is not None:
            return self.attempts_override
        return sum(1 for c in self.corrections
                   if c.grade_id == grade_id and c.student_id == student_id)


class DictStorage(KeyValueStorage):
    def __init__(self):
        self.data: Dict[str, str] = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value

    def remove(self, key):
        self.data.pop(key, None)


def make_grade(**overrides) -> Grade:
    values = dict(
        id="g1",
        course_code="CS101",
        course_name="Intro to CS",
        grade="B",
        credit_hours=3,
        semester="Fall 2023",
        student_id=STUDENT_ID,
    )
    values.update(overrides)
    return Grade(**values)


def make_correction(**overrides) -> GradeCorrection:
    values = dict(
        id="c1",
        grade_id="g1",
        student_id=STUDENT_ID,
        requested_grade="A",
        reason="Exam was mis-graded on question 4",
        status=CorrectionStatus.PENDING,
        submission_date=SUBMITTED_AT,
    )
    values.update(overrides)
    return GradeCorrection(**values)


def reviewed(correction: GradeCorrection, status: CorrectionStatus, days: float) -> GradeCorrection:
    return correction.model_copy(update={
        'status': status,
        'review_date': correction.submission_date + timedelta(days=days),
    })


@pytest.fixture
def gateway():
    return FakeGradeGateway(grades=[make_grade()])


@pytest.fixture
def storage():
    return DictStorage()
