from __future__ import annotations

import logging
import math
import random
from datetime import date
from typing import List, Optional, Sequence

from availability import PlanDay, build_week_frame, buffer_slots_for, slots_for
from models import (
    BUFFER,
    COLOR_MAP,
    HIGH,
    LEARNING,
    LOW,
    MEDIUM,
    PRACTICE,
    REVISION,
    AnalyzedSubject,
    Availability,
    DayBlock,
    StudyBlock,
)

logger = logging.getLogger(__name__)

MAX_SESSION_HOURS = 3
DAYS_PER_WEEK = 7
FALLBACK_TOPIC = "General study and concept reinforcement"
SLOT_OFFSETS = {HIGH: 0, MEDIUM: 1, LOW: 2}
BUFFER_RATIONALE = "Planned buffer for spillover tasks and unexpected delays"
BUFFER_TASKS = ["Review previous day's notes", "Catch up on missed topics", "Take a break"]


def place_week(
    subjects: Sequence[AnalyzedSubject],
    availability: Availability,
    buffer_hours: int,
    start_date: Optional[date] = None,
    rng: Optional[random.Random] = None,
    max_session_hours: int = MAX_SESSION_HOURS,
) -> List[DayBlock]:
    start_date = start_date or date.today()
    rng = rng or random.Random()
    week: List[DayBlock] = []

    for plan_day in build_week_frame(start_date, availability):
        blocks = place_day(subjects, plan_day, availability.preferred_time, buffer_hours, rng, max_session_hours)
        week.append(DayBlock(day=plan_day.name, date=plan_day.day, blocks=blocks))

    return week


def place_day(
    subjects: Sequence[AnalyzedSubject],
    plan_day: PlanDay,
    preferred_time: str,
    buffer_hours: int,
    rng: random.Random,
    max_session_hours: int = MAX_SESSION_HOURS,
) -> List[StudyBlock]:
    slots = slots_for(preferred_time)
    blocks: List[StudyBlock] = []
    slot_cursor = 0
    hours_used = 0.0

    for subject in order_candidates(subjects, rng):
        if hours_used >= plan_day.hours:
            break

        hours_per_day = math.ceil(subject.allocated_hours / DAYS_PER_WEEK)
        hours_today = min(hours_per_day, plan_day.hours - hours_used, max_session_hours)
        if hours_today <= 0:
            continue

        block_type = determine_block_type(subject, plan_day.index, plan_day.is_weekend)
        topics = select_topics_for_day(subject, plan_day.index, block_type)
        time_blocks = generate_time_blocks(slots, slot_cursor, hours_today, subject.cognitive_load)

        for position, time_range in enumerate(time_blocks):
            topic = topics[position] if position < len(topics) else topics[0]
            blocks.append(create_study_block(subject, topic, block_type, time_range, plan_day.index))
            slot_cursor += 1

        hours_used += hours_today

    remaining = plan_day.hours - hours_used
    if remaining > 0 and buffer_hours > 0:
        blocks.append(create_buffer_block(preferred_time, slot_cursor, plan_day.index))

    blocks.sort(key=lambda b: b.start_time)
    logger.debug("%s %s: %d blocks, %.1f of %.1f hours used", plan_day.name, plan_day.day, len(blocks), hours_used, plan_day.hours)
    return blocks


def order_candidates(subjects: Sequence[AnalyzedSubject], rng: random.Random) -> List[AnalyzedSubject]:
    """High-load subjects first; the rest in rng-shuffled order."""
    candidates = list(subjects)
    rng.shuffle(candidates)
    candidates.sort(key=lambda s: s.cognitive_load != HIGH)
    return candidates


def determine_block_type(subject: AnalyzedSubject, day_index: int, is_weekend: bool) -> str:
    if day_index < 2 and subject.subject.weak_topics and subject.subject.confidence <= 3:
        return LEARNING
    if 2 <= day_index < 5:
        return PRACTICE
    if is_weekend:
        return REVISION
    if subject.cognitive_load == HIGH:
        return LEARNING
    if subject.cognitive_load == MEDIUM:
        return PRACTICE
    return REVISION


def select_topics_for_day(subject: AnalyzedSubject, day_index: int, block_type: str) -> List[str]:
    weak = subject.subject.weak_topics
    strong = subject.subject.strong_topics
    topics: List[str] = []

    if block_type == LEARNING and weak:
        topics.append(weak[day_index % len(weak)])
    elif block_type == PRACTICE and weak:
        topics.append(f"Practice: {weak[(day_index + 1) % len(weak)]}")
    elif block_type == REVISION:
        if weak:
            topics.append(f"Review: {weak[0]}")
        if strong:
            topics.append(f"Reinforce: {strong[0]}")

    return topics or [FALLBACK_TOPIC]


def generate_time_blocks(slots: Sequence[str], start_index: int, hours: float, cognitive_load: str) -> List[str]:
    offset = SLOT_OFFSETS.get(cognitive_load, 0)
    # A fractional hour still takes a whole slot.
    return [slots[(start_index + i + offset) % len(slots)] for i in range(math.ceil(hours))]


def create_study_block(subject: AnalyzedSubject, topic: str, block_type: str, time_range: str, day_index: int) -> StudyBlock:
    color = COLOR_MAP.get(subject.cognitive_load, "Yellow")
    return StudyBlock(
        time=time_range,
        subject=subject.name,
        topic=topic,
        block_type=block_type,
        color=color,
        rationale=block_rationale(subject, topic, block_type, color),
        micro_tasks=micro_tasks(topic, block_type),
        block_id=block_id(subject.name, day_index, time_range),
        cognitive_load=subject.cognitive_load,
        confidence=subject.subject.confidence,
        is_high_focus=subject.cognitive_load == HIGH,
    )


def create_buffer_block(preferred_time: str, slot_cursor: int, day_index: int) -> StudyBlock:
    buffer_slots = buffer_slots_for(preferred_time)
    time_range = buffer_slots[slot_cursor % len(buffer_slots)]
    return StudyBlock(
        time=time_range,
        subject="Buffer",
        topic="",
        block_type=BUFFER,
        color="Yellow",
        rationale=BUFFER_RATIONALE,
        micro_tasks=list(BUFFER_TASKS),
        block_id=block_id("Buffer", day_index, time_range),
    )


def block_id(subject_name: str, day_index: int, time_range: str) -> str:
    return f"{subject_name}-{day_index}-{time_range.replace(':', '')}"


def block_rationale(subject: AnalyzedSubject, topic: str, block_type: str, color: str) -> str:
    reasons: List[str] = []
    if color == "Red":
        reasons.append("Weak topic")
    if subject.subject.confidence <= 2:
        reasons.append("low confidence")
    if subject.subject.credits >= 4:
        reasons.append("high credit")
    if block_type == LEARNING:
        reasons.append("new concept introduction")
    if reasons:
        return f"{', '.join(reasons)} - {block_type} session"
    return f"{block_type} session for {topic}"


def micro_tasks(topic: str, block_type: str) -> List[str]:
    if block_type == LEARNING:
        return [
            f"Read theory on {topic}",
            f"Watch video tutorial on {topic}",
            "Take notes on key concepts",
            "Solve 2-3 basic problems",
        ]
    if block_type == PRACTICE:
        return [
            f"Solve 5-7 problems on {topic}",
            "Review solution approaches",
            "Identify common patterns",
            "Attempt challenging problem",
        ]
    if block_type == REVISION:
        return [
            f"Review notes on {topic}",
            "Quick recap of formulas/concepts",
            "Solve 2-3 revision problems",
            "Create summary sheet",
        ]
    return ["Flexible study time", "Catch up on missed topics"]
