from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Tuple

HIGH = "High"
MEDIUM = "Medium"
LOW = "Low"

LEARNING = "Learning"
PRACTICE = "Practice"
REVISION = "Revision"
BUFFER = "Buffer"

MORNING = "Morning"
AFTERNOON = "Afternoon"
NIGHT = "Night"
PREFERRED_TIMES = (MORNING, AFTERNOON, NIGHT)

COLOR_MAP = {HIGH: "Red", MEDIUM: "Yellow", LOW: "Green"}


@dataclass(frozen=True)
class Subject:
    name: str
    credits: float
    strong_topics: Tuple[str, ...] = ()
    weak_topics: Tuple[str, ...] = ()
    confidence: int = 3


@dataclass(frozen=True)
class Availability:
    weekday_hours: float
    weekend_hours: float
    preferred_time: str = MORNING


@dataclass(frozen=True)
class SubjectAnalysis:
    cognitive_load: str
    priority_score: float
    missing_prerequisite_count: int
    missing_prerequisites: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AnalyzedSubject:
    subject: Subject
    cognitive_load: str
    priority_score: float
    missing_prerequisite_count: int
    missing_prerequisites: Tuple[str, ...] = ()
    allocated_hours: int = 0
    justification: str = ""

    @property
    def name(self) -> str:
        return self.subject.name

    @property
    def color(self) -> str:
        return COLOR_MAP.get(self.cognitive_load, "Yellow")


@dataclass(frozen=True)
class Allocation:
    analyzed_subjects: List[AnalyzedSubject]
    total_weekly_hours: float
    buffer_hours: int
    available_hours: float
    preferred_time: str

    def subject_hours(self) -> Dict[str, int]:
        return {s.name: s.allocated_hours for s in self.analyzed_subjects}


@dataclass
class StudyBlock:
    time: str
    subject: str
    topic: str
    block_type: str
    color: str
    rationale: str
    micro_tasks: List[str]
    block_id: str
    cognitive_load: Optional[str] = None
    confidence: Optional[int] = None
    is_high_focus: bool = False
    can_reschedule: bool = True

    @property
    def start_time(self) -> str:
        return self.time.split("-")[0]


@dataclass
class DayBlock:
    day: str
    date: date
    blocks: List[StudyBlock] = field(default_factory=list)


@dataclass(frozen=True)
class Assessment:
    subject: str
    current_confidence: int
    expected_confidence: int
    weak_topics_to_cover: int
    topics_to_review: Tuple[str, ...]


@dataclass
class Checkpoint:
    week: int
    date: date
    assessments: List[Assessment]
    adaptation_suggestions: List[str]


@dataclass
class Summary:
    completion_date: date
    days_until_target: int
    weeks_until_target: int
    average_confidence_before: float
    average_confidence_after: float
    workload_reduction_pct: int
    estimated_timeline: str
    expected_confidence_improvement: str
    last_minute_workload_reduction: str
    rationale: str


@dataclass
class StudyPlan:
    generated_at: str
    target_date: date
    allocation: Allocation
    week: List[DayBlock]
    next_7_days_focus: List[str]
    progress_checkpoints: List[Checkpoint]
    summary: Summary
    student: Optional[Dict[str, str]] = None


@dataclass
class ProgressReport:
    total_blocks: int
    completed_blocks: int
    completion_rate: float
    completed_hours: int
    total_hours: int
    current_confidence: Dict[str, int]
