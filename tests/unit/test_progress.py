from __future__ import annotations

import random

from allocation import allocate
from models import Availability, Subject
from planner_core import place_week
from progress import compute_progress, toggle_block_completion


def _week(start_date):
    subject = Subject(name="Data Structures", credits=4, strong_topics=("Arrays",), weak_topics=("Trees", "Graphs"), confidence=3)
    availability = Availability(weekday_hours=3, weekend_hours=6, preferred_time="Night")
    allocation = allocate([subject], availability)
    week = place_week(allocation.analyzed_subjects, availability, allocation.buffer_hours, start_date=start_date, rng=random.Random(0))
    return allocation, week


def test_completion_counts_only_known_blocks(start_date) -> None:
    allocation, week = _week(start_date)
    monday_ids = [b.block_id for b in week[0].blocks]

    report = compute_progress(
        week,
        allocation.subject_hours(),
        monday_ids + [monday_ids[0], "Unknown-9-00000100"],
        subjects=allocation.analyzed_subjects,
    )

    assert report.total_blocks == 23
    assert report.completed_blocks == 3
    assert report.total_hours == 24
    assert report.completed_hours == 3
    assert round(report.completion_rate, 2) == 13.04
    assert report.current_confidence == {"Data Structures": 3}


def test_confidence_updates_override_plan_values(start_date) -> None:
    allocation, week = _week(start_date)
    report = compute_progress(week, allocation.subject_hours(), [], subjects=allocation.analyzed_subjects, confidence_updates={"Data Structures": 4})
    assert report.current_confidence == {"Data Structures": 4}
    assert report.completion_rate == 0.0


def test_empty_week_reports_zero() -> None:
    report = compute_progress([], {}, ["x"])
    assert report.total_blocks == 0
    assert report.completion_rate == 0.0
    assert report.completed_hours == 0


def test_toggle_block_completion() -> None:
    ids = toggle_block_completion([], "Physics-0-08000900", True)
    assert ids == ["Physics-0-08000900"]
    assert toggle_block_completion(ids, "Physics-0-08000900", True) == ids
    assert toggle_block_completion(ids, "Physics-0-08000900", False) == []
