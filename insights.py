from __future__ import annotations

import logging
import math
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from allocation import round_half_up
from models import (
    LEARNING,
    Allocation,
    AnalyzedSubject,
    Assessment,
    Checkpoint,
    DayBlock,
    Subject,
    Summary,
)
from prerequisites import required_prerequisites

logger = logging.getLogger(__name__)

MAX_FOCUS_ITEMS = 7
CHECKPOINT_FRACTIONS = (0.25, 0.5, 0.75)
REALLOCATION_SHARE = 0.1
HOURS_SAVED_PER_TOPIC = 2


def next_7_days_focus(week: Sequence[DayBlock], subjects: Sequence[AnalyzedSubject]) -> List[str]:
    focus: List[str] = []

    gaps = sorted(
        (s for s in subjects if s.missing_prerequisite_count > 0),
        key=lambda s: -s.missing_prerequisite_count,
    )
    for subject in gaps:
        required = required_prerequisites(subject.name)
        if required and subject.subject.weak_topics:
            focus.append(
                f"Revise {required[0]} before starting {subject.subject.weak_topics[0]} to close prerequisite gap"
            )

    seen: Dict[Tuple[str, str], None] = {}
    for day in week:
        for block in day.blocks:
            if block.color == "Red" and block.block_type == LEARNING and block.topic:
                seen.setdefault((block.subject, block.topic), None)
    for subject_name, topic in seen:
        focus.append(f"Next 7 days focus: {topic} ({subject_name})")

    for subject in subjects:
        if subject.subject.weak_topics:
            focus.append(f"Complete {subject.subject.weak_topics[0]} before Week 3 to avoid backlog")

    return focus[:MAX_FOCUS_ITEMS]


def days_until(target_date: date, today: date) -> int:
    return (target_date - today).days


def weeks_until(target_date: date, today: date) -> int:
    return math.ceil(days_until(target_date, today) / 7)


def progress_checkpoints(
    subjects: Sequence[AnalyzedSubject],
    target_date: date,
    today: Optional[date] = None,
) -> List[Checkpoint]:
    today = today or date.today()
    total_weeks = weeks_until(target_date, today)

    checkpoints: List[Checkpoint] = []
    for fraction in CHECKPOINT_FRACTIONS:
        week = math.ceil(total_weeks * fraction)
        assessments = [assess(s.subject, fraction) for s in subjects]
        checkpoints.append(
            Checkpoint(
                week=week,
                date=today + timedelta(days=week * 7),
                assessments=assessments,
                adaptation_suggestions=adaptation_suggestions(assessments, subjects),
            )
        )
    return checkpoints


def assess(subject: Subject, fraction: float) -> Assessment:
    expected = min(5, subject.confidence + math.ceil((5 - subject.confidence) * fraction))
    to_cover = math.ceil(len(subject.weak_topics) * fraction)
    return Assessment(
        subject=subject.name,
        current_confidence=subject.confidence,
        expected_confidence=expected,
        weak_topics_to_cover=to_cover,
        topics_to_review=tuple(subject.weak_topics[:to_cover]),
    )


def adaptation_suggestions(assessments: Sequence[Assessment], subjects: Sequence[AnalyzedSubject]) -> List[str]:
    hours = {s.name: s.allocated_hours for s in subjects}
    suggestions: List[str] = []
    for item in assessments:
        if item.expected_confidence > item.current_confidence + 1:
            shift = round_half_up(hours.get(item.subject, 0) * REALLOCATION_SHARE)
            suggestions.append(
                f"Confidence in {item.subject} improved from {item.current_confidence} to {item.expected_confidence}; "
                f"consider reallocating {shift} hours to weaker subjects"
            )
    return suggestions


def build_summary(
    subjects: Sequence[Subject],
    allocation: Allocation,
    target_date: date,
    today: Optional[date] = None,
) -> Summary:
    today = today or date.today()
    days = days_until(target_date, today)
    weeks = weeks_until(target_date, today)

    total_weak = sum(len(s.weak_topics) for s in subjects)
    avg_before = sum(s.confidence for s in subjects) / len(subjects) if subjects else 0.0
    avg_after = min(5, avg_before + math.ceil(total_weak * 0.3))
    improvement = avg_after - avg_before

    reduction = workload_reduction(total_weak, allocation, weeks)

    rationale = (
        f"Balanced allocation of {total_weak} weak topics across {len(subjects)} subjects, "
        f"{allocation.buffer_hours} hours buffer time, and high-focus blocks scheduled during "
        f"{allocation.preferred_time}. Prerequisite-heavy subjects prioritized."
    )
    return Summary(
        completion_date=target_date,
        days_until_target=days,
        weeks_until_target=weeks,
        average_confidence_before=avg_before,
        average_confidence_after=avg_after,
        workload_reduction_pct=reduction,
        estimated_timeline=f"{weeks} weeks ({days} days)",
        expected_confidence_improvement=f"From {avg_before:.1f}/5 to {avg_after:.1f}/5 (+{improvement:.1f})",
        last_minute_workload_reduction=f"{reduction}%",
        rationale=rationale,
    )


def workload_reduction(total_weak_topics: int, allocation: Allocation, weeks: int) -> int:
    """Rough estimate of last-minute hours avoided, as a percentage of the remaining plan."""
    covered = math.ceil(total_weak_topics * 0.8)
    hours_saved = covered * HOURS_SAVED_PER_TOPIC
    total_study_hours = sum(s.allocated_hours for s in allocation.analyzed_subjects)
    denominator = total_study_hours * weeks * 0.3
    if denominator <= 0:
        logger.debug("No study hours ahead of target date; workload reduction reported as 0")
        return 0
    return round_half_up(hours_saved / denominator * 100)
