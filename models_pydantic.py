"""Pydantic models for validating study plan requests before generation."""

import re
from datetime import date
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from errors import PlanValidationError
from models import Availability, Subject

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class StudentPydantic(BaseModel):
    """Who the plan is for. Passed through to the plan metadata untouched."""

    name: str = Field(..., min_length=1)
    college: str = Field(..., min_length=1)
    branch: str = Field(..., min_length=1)
    year: Union[int, str] = Field(..., description="Year of study")
    email: str = Field(..., min_length=1)

    @field_validator("year")
    @classmethod
    def validate_year(cls, v: Union[int, str]) -> Union[int, str]:
        if isinstance(v, str) and not v.strip():
            raise ValueError("year must not be empty")
        return v


class SubjectPydantic(BaseModel):
    """One subject the student is studying this term."""

    name: str = Field(..., min_length=1, description="Subject name, unique within a request")
    credits: float = Field(..., gt=0, strict=True, allow_inf_nan=False, description="Credit weight of the subject")
    strong: List[str] = Field(..., description="Topics the student is comfortable with")
    weak: List[str] = Field(..., description="Topics the student struggles with")
    confidence: int = Field(..., ge=1, le=5, strict=True, description="Self-rated confidence (1=lowest, 5=highest)")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v

    def to_subject(self) -> Subject:
        return Subject(
            name=self.name,
            credits=self.credits,
            strong_topics=tuple(self.strong),
            weak_topics=tuple(self.weak),
            confidence=self.confidence,
        )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Data Structures",
                "credits": 4,
                "strong": ["Arrays"],
                "weak": ["Trees", "Graphs"],
                "confidence": 3,
            }
        }
    )


class AvailabilityPydantic(BaseModel):
    """Hours per weekday/weekend day and the preferred study window."""

    weekdays: float = Field(..., strict=True, allow_inf_nan=False, description="Study hours available on each weekday")
    weekends: float = Field(..., strict=True, allow_inf_nan=False, description="Study hours available on each weekend day")
    preferred_time: Literal["Morning", "Afternoon", "Night"] = Field(..., alias="preferredTime")

    model_config = ConfigDict(populate_by_name=True)

    def to_availability(self) -> Availability:
        return Availability(
            weekday_hours=self.weekdays,
            weekend_hours=self.weekends,
            preferred_time=self.preferred_time,
        )


class PlanRequestPydantic(BaseModel):
    """Complete plan request as sent by the presentation layer."""

    student: Optional[StudentPydantic] = None
    subjects: List[SubjectPydantic] = Field(..., min_length=1)
    availability: AvailabilityPydantic
    target_date: str = Field(..., alias="targetDate", description="YYYY-MM-DD")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "subjects": [
                    {
                        "name": "Data Structures",
                        "credits": 4,
                        "strong": ["Arrays"],
                        "weak": ["Trees", "Graphs"],
                        "confidence": 3,
                    }
                ],
                "availability": {"weekdays": 3, "weekends": 6, "preferredTime": "Night"},
                "targetDate": "2026-12-12",
            }
        },
    )

    @field_validator("target_date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        """Ensure date is in correct format."""
        if not DATE_PATTERN.match(v):
            raise ValueError(f"targetDate must be in YYYY-MM-DD format, got: {v}")
        try:
            date.fromisoformat(v)
        except ValueError:
            raise ValueError(f"targetDate is not a valid calendar date: {v}")
        return v

    @model_validator(mode="after")
    def validate_unique_names(self) -> "PlanRequestPydantic":
        seen = set()
        for subject in self.subjects:
            if subject.name in seen:
                raise ValueError(f"duplicate subject name: {subject.name}")
            seen.add(subject.name)
        return self

    def to_subjects(self) -> List[Subject]:
        return [s.to_subject() for s in self.subjects]

    @property
    def target(self) -> date:
        return date.fromisoformat(self.target_date)


def validate_plan_request(payload: Any) -> PlanRequestPydantic:
    """Validate a raw request dict; raise PlanValidationError listing every bad field."""
    try:
        return PlanRequestPydantic.model_validate(payload)
    except ValidationError as exc:
        raise PlanValidationError(_issues_from(exc)) from exc


def _issues_from(exc: ValidationError) -> List[tuple]:
    issues = []
    for err in exc.errors():
        path = ".".join(str(part) for part in err.get("loc", ())) or "request"
        issues.append((path, err.get("msg", "invalid value")))
    return issues


def student_as_dict(request: PlanRequestPydantic) -> Optional[Dict[str, Any]]:
    if request.student is None:
        return None
    return request.student.model_dump()
