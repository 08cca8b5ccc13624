from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

logger = logging.getLogger(__name__)

# Keyed by exact subject name. Presence of a prerequisite in a request is a
# case-insensitive substring match in either direction, not a graph walk.
PREREQUISITE_MAP: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "Data Structures": ("Programming", "Algorithms", "Discrete Mathematics"),
        "Operating Systems": ("Computer Architecture", "Data Structures"),
        "Database Systems": ("Data Structures", "Discrete Mathematics"),
        "Machine Learning": ("Linear Algebra", "Statistics", "Programming", "Data Structures"),
        "Computer Networks": ("Operating Systems", "Data Structures"),
        "Algorithms": ("Data Structures", "Discrete Mathematics"),
        "Software Engineering": ("Programming", "Data Structures"),
        "Computer Architecture": ("Digital Logic", "Mathematics"),
        "Compiler Design": ("Data Structures", "Algorithms", "Theory of Computation"),
    }
)


def required_prerequisites(subject_name: str) -> Tuple[str, ...]:
    return PREREQUISITE_MAP.get(subject_name, ())


def is_covered(prerequisite: str, subject_names: Iterable[str]) -> bool:
    wanted = prerequisite.lower()
    for name in subject_names:
        lowered = name.lower()
        if wanted in lowered or lowered in wanted:
            return True
    return False


def find_missing_prerequisites(subject_name: str, subject_names: Iterable[str]) -> Tuple[str, ...]:
    names = list(subject_names)
    missing = tuple(p for p in required_prerequisites(subject_name) if not is_covered(p, names))
    if missing:
        logger.debug("%s is missing prerequisites: %s", subject_name, ", ".join(missing))
    return missing


def list_prerequisites() -> Dict[str, List[str]]:
    return {name: list(prereqs) for name, prereqs in PREREQUISITE_MAP.items()}
