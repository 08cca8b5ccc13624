from __future__ import annotations

from datetime import date
from typing import Any, Dict

import pytest

from models import Availability, Subject

MONDAY = date(2026, 1, 5)


@pytest.fixture
def start_date() -> date:
    return MONDAY


@pytest.fixture
def data_structures_request() -> Dict[str, Any]:
    return {
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
        "targetDate": "2026-03-02",
    }


@pytest.fixture
def science_subjects() -> list:
    return [
        Subject(name="Physics", credits=3, weak_topics=("Optics", "Waves", "Thermodynamics"), confidence=2),
        Subject(name="Chemistry", credits=3, strong_topics=("Bonding",), confidence=5),
        Subject(name="Biology", credits=4, weak_topics=("Genetics",), confidence=3),
    ]


@pytest.fixture
def morning_availability() -> Availability:
    return Availability(weekday_hours=2, weekend_hours=4, preferred_time="Morning")
