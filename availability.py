from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Tuple

from models import AFTERNOON, MORNING, NIGHT, Availability

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
WEEKEND_DAYS = {"Saturday", "Sunday"}

TIME_SLOTS: Dict[str, Tuple[str, ...]] = {
    MORNING: ("08:00-09:00", "09:00-10:00", "10:00-11:00", "11:00-12:00"),
    AFTERNOON: ("13:00-14:00", "14:00-15:00", "15:00-16:00", "16:00-17:00"),
    NIGHT: ("18:00-19:00", "19:00-20:00", "20:00-21:00", "21:00-22:00", "22:00-23:00"),
}

# Buffer time goes in the window opposite the preferred one.
BUFFER_WINDOW = {MORNING: NIGHT, AFTERNOON: MORNING, NIGHT: AFTERNOON}


@dataclass(frozen=True)
class PlanDay:
    index: int
    name: str
    day: date
    hours: float

    @property
    def is_weekend(self) -> bool:
        return self.name in WEEKEND_DAYS


def build_week_frame(start_date: date, availability: Availability) -> List[PlanDay]:
    """Seven consecutive dates labelled Monday..Sunday by position, day 0 on start_date."""
    frame: List[PlanDay] = []
    current = start_date
    for index, name in enumerate(DAY_NAMES):
        hours = availability.weekend_hours if name in WEEKEND_DAYS else availability.weekday_hours
        frame.append(PlanDay(index=index, name=name, day=current, hours=hours))
        current += timedelta(days=1)
    return frame


def slots_for(preferred_time: str) -> Tuple[str, ...]:
    return TIME_SLOTS[preferred_time]


def buffer_slots_for(preferred_time: str) -> Tuple[str, ...]:
    return TIME_SLOTS[BUFFER_WINDOW[preferred_time]]
