from __future__ import annotations

import copy

import pytest

from errors import PlanValidationError
from models_pydantic import validate_plan_request
from plan_service import generate_study_plan


def _fields(payload) -> list:
    with pytest.raises(PlanValidationError) as excinfo:
        validate_plan_request(payload)
    return excinfo.value.fields


def test_valid_request_converts_to_domain_records(data_structures_request) -> None:
    request = validate_plan_request(data_structures_request)
    subject = request.to_subjects()[0]
    availability = request.availability.to_availability()

    assert subject.weak_topics == ("Trees", "Graphs")
    assert subject.credits == 4
    assert availability.preferred_time == "Night"
    assert request.target.isoformat() == "2026-03-02"
    assert request.student is None


def test_confidence_out_of_range(data_structures_request) -> None:
    payload = copy.deepcopy(data_structures_request)
    payload["subjects"][0]["confidence"] = 6
    assert _fields(payload) == ["subjects.0.confidence"]


def test_every_bad_field_is_listed(data_structures_request) -> None:
    payload = copy.deepcopy(data_structures_request)
    del payload["subjects"][0]["weak"]
    payload["availability"]["preferredTime"] = "Evening"
    payload["targetDate"] = "02/03/2026"

    fields = _fields(payload)
    assert "subjects.0.weak" in fields
    assert "availability.preferredTime" in fields
    assert "targetDate" in fields


def test_impossible_calendar_date(data_structures_request) -> None:
    payload = copy.deepcopy(data_structures_request)
    payload["targetDate"] = "2026-02-30"
    assert _fields(payload) == ["targetDate"]


def test_subjects_required_and_unique(data_structures_request) -> None:
    empty = copy.deepcopy(data_structures_request)
    empty["subjects"] = []
    assert _fields(empty) == ["subjects"]

    dup = copy.deepcopy(data_structures_request)
    dup["subjects"].append(copy.deepcopy(dup["subjects"][0]))
    with pytest.raises(PlanValidationError, match="duplicate subject name"):
        validate_plan_request(dup)


def test_topics_must_be_strings(data_structures_request) -> None:
    payload = copy.deepcopy(data_structures_request)
    payload["subjects"][0]["strong"] = [42]
    assert _fields(payload) == ["subjects.0.strong.0"]


def test_blank_subject_name(data_structures_request) -> None:
    payload = copy.deepcopy(data_structures_request)
    payload["subjects"][0]["name"] = "   "
    assert _fields(payload) == ["subjects.0.name"]


def test_student_needs_all_fields(data_structures_request) -> None:
    payload = copy.deepcopy(data_structures_request)
    payload["student"] = {"name": "Asha", "college": "IIT", "branch": "CSE", "year": 2}
    assert _fields(payload) == ["student.email"]


def test_zero_and_negative_hours_are_allowed(data_structures_request) -> None:
    payload = copy.deepcopy(data_structures_request)
    payload["availability"].update({"weekdays": 0, "weekends": -1})
    request = validate_plan_request(payload)
    assert request.availability.weekends == -1


def test_non_object_payload() -> None:
    with pytest.raises(PlanValidationError):
        validate_plan_request(["not", "a", "request"])


def test_numbers_are_not_coerced_from_strings_or_bools(data_structures_request) -> None:
    payload = copy.deepcopy(data_structures_request)
    payload["subjects"][0]["credits"] = "4"
    payload["subjects"][0]["confidence"] = True
    payload["availability"]["weekdays"] = "3"

    fields = _fields(payload)
    assert sorted(fields) == ["availability.weekdays", "subjects.0.confidence", "subjects.0.credits"]


def test_integer_hours_and_credits_still_accepted(data_structures_request) -> None:
    payload = copy.deepcopy(data_structures_request)
    payload["subjects"][0]["credits"] = 3.5
    payload["availability"].update({"weekdays": 2, "weekends": 4.5})
    request = validate_plan_request(payload)
    assert request.availability.weekdays == 2
    assert request.subjects[0].credits == 3.5


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_hours_rejected(data_structures_request, value) -> None:
    payload = copy.deepcopy(data_structures_request)
    payload["availability"]["weekdays"] = value
    assert _fields(payload) == ["availability.weekdays"]


def test_non_finite_credits_never_reach_allocation(data_structures_request) -> None:
    payload = copy.deepcopy(data_structures_request)
    payload["subjects"][0]["credits"] = float("inf")
    with pytest.raises(PlanValidationError) as excinfo:
        generate_study_plan(payload)
    assert excinfo.value.fields == ["subjects.0.credits"]
