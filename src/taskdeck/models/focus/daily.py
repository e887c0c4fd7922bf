"""Daily statistics, day-change detection and the daily plan."""

from dataclasses import asdict, dataclass, field, fields
from datetime import date, timedelta

from pydantic import TypeAdapter


def load_known(cls, data: dict):
    """Validate *data* into dataclass *cls*, dropping keys it does not declare.

    Raises ``pydantic.ValidationError`` when a field has the wrong type.
    """
    names = {f.name for f in fields(cls)}
    return TypeAdapter(cls).validate_python({k: v for k, v in data.items() if k in names})


def previous_day(day: str) -> str:
    """``YYYY-MM-DD`` of the calendar day before *day*."""
    return (date.fromisoformat(day) - timedelta(days=1)).isoformat()


@dataclass
class DailyStats:
    """Today's counters and the activity streak."""

    completed_today: int = 0
    total_time_today: float = 0.0  # hours
    streak_days: int = 0
    last_active_date: str | None = None

    def roll_to(self, today: str) -> bool:
        """Move the counters onto *today*. Returns True if the day changed.

        The streak grows when the last active day was yesterday and restarts
        at 1 when at least one day was skipped.  With no previous active day
        the streak is left alone.
        """
        if self.last_active_date == today:
            return False

        yesterday = previous_day(today)
        if self.last_active_date == yesterday:
            self.streak_days += 1
        elif self.last_active_date and self.last_active_date < yesterday:
            self.streak_days = 1

        self.completed_today = 0
        self.total_time_today = 0.0
        self.last_active_date = today
        return True

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "DailyStats":
        return load_known(cls, data)


@dataclass
class DayChangeDetector:
    last_checked_date: str | None = None

    def check(self, today: str) -> bool:
        """Record *today*; True when it differs from a previously seen date."""
        changed = bool(self.last_checked_date) and self.last_checked_date != today
        self.last_checked_date = today
        return changed

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "DayChangeDetector":
        return load_known(cls, data)


@dataclass
class DailyPlanning:
    """Which tasks the user picked for today."""

    last_planning_date: str | None = None
    planned_tasks: list[dict[str, str]] = field(default_factory=list)
    has_daily_plan: bool = False

    def needs_planning(self, today: str) -> bool:
        return self.last_planning_date != today and not self.has_daily_plan

    def reset_for(self, today: str) -> None:
        self.has_daily_plan = False
        self.planned_tasks = []
        self.last_planning_date = today

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "DailyPlanning":
        return load_known(cls, data)
