from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import List, Sequence

from errors import PlanValidationError
from models import HIGH, Allocation, AnalyzedSubject, Availability, Subject, SubjectAnalysis
from priority import analyze, provisional_analysis

logger = logging.getLogger(__name__)

BUFFER_PERCENT = 0.12
MIN_SUBJECT_HOURS = 2
WEEKDAYS_PER_WEEK = 5
WEEKEND_DAYS_PER_WEEK = 2


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def weekly_hours(availability: Availability) -> float:
    return availability.weekday_hours * WEEKDAYS_PER_WEEK + availability.weekend_hours * WEEKEND_DAYS_PER_WEEK


def analyze_subjects(subjects: Sequence[Subject]) -> List[AnalyzedSubject]:
    """Two-pass analysis: each subject alone, then corrected against the full request."""
    provisional = [_with_analysis(s, provisional_analysis(s)) for s in subjects]

    names = [s.name for s in subjects]
    corrected: List[AnalyzedSubject] = []
    for item in provisional:
        result = _with_analysis(item.subject, analyze(item.subject, names))
        if result.missing_prerequisite_count != item.missing_prerequisite_count:
            logger.debug(
                "%s: missing prerequisites %d -> %d, priority %.2f -> %.2f",
                item.name,
                item.missing_prerequisite_count,
                result.missing_prerequisite_count,
                item.priority_score,
                result.priority_score,
            )
        corrected.append(result)
    return corrected


def _with_analysis(subject: Subject, analysis: SubjectAnalysis) -> AnalyzedSubject:
    return AnalyzedSubject(
        subject=subject,
        cognitive_load=analysis.cognitive_load,
        priority_score=analysis.priority_score,
        missing_prerequisite_count=analysis.missing_prerequisite_count,
        missing_prerequisites=analysis.missing_prerequisites,
    )


def allocate(
    subjects: Sequence[Subject],
    availability: Availability,
    buffer_percent: float = BUFFER_PERCENT,
    min_subject_hours: int = MIN_SUBJECT_HOURS,
) -> Allocation:
    total_weekly_hours = weekly_hours(availability)
    buffer_hours = round_half_up(total_weekly_hours * buffer_percent)
    available_hours = total_weekly_hours - buffer_hours

    if total_weekly_hours <= 0:
        logger.warning("No study hours available (%.1f per week); schedule will be empty.", total_weekly_hours)

    analyzed = sorted(
        analyze_subjects(subjects),
        key=lambda s: (-s.missing_prerequisite_count, -s.priority_score),
    )

    total_priority = sum(s.priority_score for s in analyzed)
    if analyzed and total_priority <= 0:
        raise PlanValidationError([("subjects", "priority scores sum to zero; cannot split study hours")])

    analyzed = [
        replace(s, allocated_hours=max(min_subject_hours, round_half_up(available_hours * s.priority_score / total_priority)))
        for s in analyzed
    ]

    total_allocated = sum(s.allocated_hours for s in analyzed)
    if total_allocated != 0 and total_allocated != available_hours:
        # Single rescale; rounding may leave the sum a few hours off.
        ratio = available_hours / total_allocated
        analyzed = [replace(s, allocated_hours=round_half_up(s.allocated_hours * ratio)) for s in analyzed]

    analyzed = [replace(s, justification=generate_justification(s)) for s in analyzed]

    logger.info(
        "Allocated %d of %.1f available hours across %d subjects (buffer %d)",
        sum(s.allocated_hours for s in analyzed),
        available_hours,
        len(analyzed),
        buffer_hours,
    )
    return Allocation(
        analyzed_subjects=analyzed,
        total_weekly_hours=total_weekly_hours,
        buffer_hours=buffer_hours,
        available_hours=available_hours,
        preferred_time=availability.preferred_time,
    )


def generate_justification(subject: AnalyzedSubject) -> str:
    reasons: List[str] = []
    weak = subject.subject.weak_topics
    if subject.missing_prerequisite_count > 0:
        reasons.append(f"prerequisite-heavy ({subject.missing_prerequisite_count} missing)")
    if weak:
        reasons.append(f"{len(weak)} weak topic{'s' if len(weak) > 1 else ''}")
    if subject.subject.confidence <= 2:
        reasons.append("low confidence level")
    if subject.subject.credits >= 4:
        reasons.append("higher credit weight")
    if subject.cognitive_load == HIGH:
        reasons.append("high cognitive load")
    if subject.subject.strong_topics and not weak:
        reasons.append("strong topics - reduced load to avoid over-studying")

    if reasons:
        return f"More time allocated due to: {', '.join(reasons)}"
    return "Balanced allocation based on standard workload"
