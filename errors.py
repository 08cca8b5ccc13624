"""Errors raised by the study planner."""

from __future__ import annotations

from typing import Iterable, List, Tuple


class PlanValidationError(ValueError):
    """Raised before generation starts when the request is malformed.

    ``issues`` holds ``(field_path, message)`` pairs, one per invalid field.
    """

    def __init__(self, issues: Iterable[Tuple[str, str]]) -> None:
        self.issues: List[Tuple[str, str]] = list(issues)
        details = "; ".join(f"{path}: {message}" for path, message in self.issues)
        super().__init__(f"Invalid study plan request ({details})" if details else "Invalid study plan request")

    @property
    def fields(self) -> List[str]:
        return [path for path, _ in self.issues]
