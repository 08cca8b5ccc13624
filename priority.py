from __future__ import annotations

import logging
from typing import Iterable

from models import HIGH, LOW, MEDIUM, Subject, SubjectAnalysis
from prerequisites import find_missing_prerequisites, required_prerequisites

logger = logging.getLogger(__name__)

WEAK_TOPIC_WEIGHT = 2.5
CREDIT_WEIGHT = 1.2
CONFIDENCE_WEIGHT = 2.0
PREREQUISITE_WEIGHT = 3.0


def classify_cognitive_load(confidence: int, weak_topic_count: int, missing_prerequisites: int) -> str:
    if confidence <= 2 or weak_topic_count >= 3 or missing_prerequisites > 0:
        return HIGH
    if confidence >= 4 and weak_topic_count == 0 and missing_prerequisites == 0:
        return LOW
    return MEDIUM


def compute_priority(subject: Subject, missing_prerequisites: int) -> float:
    return (
        WEAK_TOPIC_WEIGHT * len(subject.weak_topics)
        + CREDIT_WEIGHT * subject.credits
        + CONFIDENCE_WEIGHT * (6 - subject.confidence)
        + PREREQUISITE_WEIGHT * missing_prerequisites
    )


def provisional_analysis(subject: Subject) -> SubjectAnalysis:
    """Analysis of a subject on its own, before the rest of the request is known.

    Every required prerequisite counts as missing at this stage.
    """
    required = required_prerequisites(subject.name)
    return _build(subject, required)


def analyze(subject: Subject, all_subject_names: Iterable[str]) -> SubjectAnalysis:
    missing = find_missing_prerequisites(subject.name, all_subject_names)
    analysis = _build(subject, missing)
    logger.debug(
        "Analyzed %s: load=%s priority=%.2f missing=%d",
        subject.name,
        analysis.cognitive_load,
        analysis.priority_score,
        analysis.missing_prerequisite_count,
    )
    return analysis


def _build(subject: Subject, missing: tuple) -> SubjectAnalysis:
    return SubjectAnalysis(
        cognitive_load=classify_cognitive_load(subject.confidence, len(subject.weak_topics), len(missing)),
        priority_score=compute_priority(subject, len(missing)),
        missing_prerequisite_count=len(missing),
        missing_prerequisites=tuple(missing),
    )
