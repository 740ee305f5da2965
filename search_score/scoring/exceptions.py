"""Exceptions raised by the scoring engine."""

from typing import List, Optional


class ScoringError(Exception):
    """Base exception for scoring failures caused by caller input."""


class InvalidConditionError(ScoringError):
    """Raised when a condition mapping cannot be turned into a Condition."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = list(errors or [])
        detail = "; ".join(self.errors)
        super().__init__(f"{message}: {detail}" if detail else message)


class ConditionShapeError(ScoringError):
    """Raised when a record field does not have the shape its condition declares.

    Array conditions need a list or tuple of strings, scalar conditions need a
    string or a number.
    """

    def __init__(self, condition_name: str, expected: str, actual_type: str):
        self.condition_name = condition_name
        self.expected = expected
        self.actual_type = actual_type
        super().__init__(
            f"Field '{condition_name}' must be {expected}, got {actual_type}"
        )
