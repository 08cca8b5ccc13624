from __future__ import annotations

import logging
import random
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from allocation import BUFFER_PERCENT, MIN_SUBJECT_HOURS, allocate, round_half_up
from insights import build_summary, next_7_days_focus, progress_checkpoints
from models import Allocation, Checkpoint, DayBlock, StudyBlock, StudyPlan, Summary
from models_pydantic import student_as_dict, validate_plan_request
from planner_core import MAX_SESSION_HOURS, place_week
from progress import compute_progress

logger = logging.getLogger(__name__)

PLAN_VERSION = "2.0"


def generate_study_plan(
    payload: Mapping[str, Any],
    start_date: Optional[date] = None,
    rng: Optional[random.Random] = None,
    buffer_percent: float = BUFFER_PERCENT,
    min_subject_hours: int = MIN_SUBJECT_HOURS,
    max_session_hours: int = MAX_SESSION_HOURS,
) -> StudyPlan:
    """Validate a raw request and run allocation, placement and insights over it.

    Raises PlanValidationError before any computation if the request is malformed.
    """
    request = validate_plan_request(payload)
    subjects = request.to_subjects()
    availability = request.availability.to_availability()
    start_date = start_date or date.today()

    allocation = allocate(
        subjects,
        availability,
        buffer_percent=buffer_percent,
        min_subject_hours=min_subject_hours,
    )
    week = place_week(
        allocation.analyzed_subjects,
        availability,
        allocation.buffer_hours,
        start_date=start_date,
        rng=rng,
        max_session_hours=max_session_hours,
    )
    plan = StudyPlan(
        generated_at=datetime.now(timezone.utc).isoformat(),
        target_date=request.target,
        allocation=allocation,
        week=week,
        next_7_days_focus=next_7_days_focus(week, allocation.analyzed_subjects),
        progress_checkpoints=progress_checkpoints(allocation.analyzed_subjects, request.target, today=start_date),
        summary=build_summary(subjects, allocation, request.target, today=start_date),
        student=student_as_dict(request),
    )
    logger.info(
        "Generated plan for %d subjects: %d blocks over 7 days starting %s",
        len(subjects),
        sum(len(day.blocks) for day in week),
        start_date.isoformat(),
    )
    return plan


def build_plan_output(plan: StudyPlan) -> Dict[str, Any]:
    allocation = plan.allocation
    return {
        "metadata": {
            "generatedAt": plan.generated_at,
            "student": plan.student,
            "targetDate": plan.target_date.isoformat(),
            "version": PLAN_VERSION,
        },
        "week": [day_output(day) for day in plan.week],
        "subjectHours": allocation.subject_hours(),
        "subjectBreakdown": subject_breakdown(allocation),
        "next7DaysFocus": list(plan.next_7_days_focus),
        "progressCheckpoints": [checkpoint_output(cp) for cp in plan.progress_checkpoints],
        "summary": summary_output(plan.summary),
        "adaptiveFeatures": {
            "canReschedule": True,
            "confidenceAdjusted": True,
            "microTasksEnabled": True,
            "prerequisiteTracking": True,
        },
    }


def day_output(day: DayBlock) -> Dict[str, Any]:
    return {
        "day": day.day,
        "date": day.date.isoformat(),
        "blocks": [block_output(block) for block in day.blocks],
    }


def block_output(block: StudyBlock) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": block.block_id,
        "time": block.time,
        "subject": block.subject,
        "topic": block.topic,
        "type": block.block_type,
        "color": block.color,
        "rationale": block.rationale,
        "microTasks": list(block.micro_tasks),
    }
    if block.cognitive_load is not None:
        payload.update(
            {
                "cognitiveLoad": block.cognitive_load,
                "confidence": block.confidence,
                "isHighFocus": block.is_high_focus,
                "canReschedule": block.can_reschedule,
            }
        )
    return payload


def subject_breakdown(allocation: Allocation) -> List[Dict[str, Any]]:
    breakdown = []
    for s in allocation.analyzed_subjects:
        percentage = round_half_up(s.allocated_hours / allocation.available_hours * 100) if allocation.available_hours > 0 else 0
        breakdown.append(
            {
                "name": s.name,
                "credits": s.subject.credits,
                "allocatedHours": s.allocated_hours,
                "hoursPerWeek": s.allocated_hours,
                "percentage": percentage,
                "cognitiveLoad": s.cognitive_load,
                "color": s.color,
                "justification": s.justification,
                "strongTopics": list(s.subject.strong_topics),
                "weakTopics": list(s.subject.weak_topics),
                "currentConfidence": s.subject.confidence,
                "priority": s.priority_score,
                "missingPrerequisites": list(s.missing_prerequisites),
            }
        )
    return breakdown


def checkpoint_output(checkpoint: Checkpoint) -> Dict[str, Any]:
    return {
        "week": checkpoint.week,
        "date": checkpoint.date.isoformat(),
        "assessments": [
            {
                "subject": a.subject,
                "currentConfidence": a.current_confidence,
                "expectedConfidence": a.expected_confidence,
                "weakTopicsToCover": a.weak_topics_to_cover,
                "topicsToReview": list(a.topics_to_review),
            }
            for a in checkpoint.assessments
        ],
        "adaptationSuggestions": list(checkpoint.adaptation_suggestions),
    }


def summary_output(summary: Summary) -> Dict[str, Any]:
    return {
        "completionDate": summary.completion_date.isoformat(),
        "daysUntilTarget": summary.days_until_target,
        "weeksUntilTarget": summary.weeks_until_target,
        "estimatedTimeline": summary.estimated_timeline,
        "expectedConfidenceImprovement": summary.expected_confidence_improvement,
        "lastMinuteWorkloadReduction": summary.last_minute_workload_reduction,
        "rationale": summary.rationale,
    }


def progress_output(plan: StudyPlan, completed_block_ids: Iterable[str]) -> Dict[str, Any]:
    report = compute_progress(
        plan.week,
        plan.allocation.subject_hours(),
        completed_block_ids,
        subjects=plan.allocation.analyzed_subjects,
    )
    return {
        "completedBlocks": report.completed_blocks,
        "totalBlocks": report.total_blocks,
        "completionRate": round(report.completion_rate, 2),
        "completedHours": report.completed_hours,
        "totalHours": report.total_hours,
        "currentConfidence": dict(report.current_confidence),
    }
