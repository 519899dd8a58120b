"""
GradeDesk: grade and grade-correction management core.

Validates grade records and correction requests, enforces the correction
eligibility and lifecycle rules, and derives GPA, credit and correction
statistics from the data served by a grade gateway.
"""

__version__ = "1.0.0"
__author__ = "GradeDesk Development Team"
__description__ = "Grade and grade-correction management core"
