"""Completion tracking against the stable block ids of a generated week."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from allocation import round_half_up
from models import AnalyzedSubject, DayBlock, ProgressReport


def compute_progress(
    week: Sequence[DayBlock],
    subject_hours: Mapping[str, int],
    completed_block_ids: Iterable[str],
    subjects: Sequence[AnalyzedSubject] = (),
    confidence_updates: Optional[Mapping[str, int]] = None,
) -> ProgressReport:
    known_ids = {block.block_id for day in week for block in day.blocks}
    total_blocks = sum(len(day.blocks) for day in week)
    completed = {block_id for block_id in completed_block_ids if block_id in known_ids}

    total_hours = sum(subject_hours.values())
    completion_rate = len(completed) / total_blocks * 100 if total_blocks else 0.0
    completed_hours = round_half_up(len(completed) / total_blocks * total_hours) if total_blocks else 0

    confidence: Dict[str, int] = {s.name: s.subject.confidence for s in subjects}
    confidence.update(confidence_updates or {})

    return ProgressReport(
        total_blocks=total_blocks,
        completed_blocks=len(completed),
        completion_rate=completion_rate,
        completed_hours=completed_hours,
        total_hours=total_hours,
        current_confidence=confidence,
    )


def toggle_block_completion(completed_block_ids: Sequence[str], block_id: str, is_completed: bool) -> List[str]:
    if is_completed:
        if block_id in completed_block_ids:
            return list(completed_block_ids)
        return [*completed_block_ids, block_id]
    return [b for b in completed_block_ids if b != block_id]
