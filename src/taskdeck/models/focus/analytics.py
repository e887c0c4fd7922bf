"""Per-day productivity rows and the summaries computed from them."""

from dataclasses import asdict, dataclass, field
from datetime import date, timedelta
from typing import Any

from .daily import load_known

NO_DATA = "No data yet"
INSIGHT_KEYS = ("most_productive_day", "avg_task_time", "focus_efficiency", "weekly_trend")

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_EMPTY_ROW: dict[str, Any] = {
    "time_logged": 0.0,
    "tasks_completed": 0,
    "focus_sessions": 0,
    "pomodoro_sessions": 0,
}


def weekly_trend(values: list[int]) -> str:
    """Compare the average of the second half of *values* with the first half."""
    half = len(values) // 2
    first, second = values[:half], values[half:]
    if not first:
        return "➡️ Steady"
    before = sum(first) / len(first)
    after = sum(second) / len(second)
    if after > before:
        return "📈 Improving"
    if after < before:
        return "📉 Declining"
    return "➡️ Steady"


def _totals(breakdown: list[dict[str, Any]], day_count: int) -> dict[str, Any]:
    total_tasks = sum(d["tasks"] for d in breakdown)
    total_time = sum(d["time"] for d in breakdown)
    return {
        "total_tasks": total_tasks,
        "total_time": round(total_time, 2),
        "total_focus_sessions": sum(d["focus_sessions"] for d in breakdown),
        "average_tasks_per_day": round(total_tasks / day_count, 1),
        "average_time_per_day": round(total_time / day_count, 1),
    }


@dataclass
class Analytics:
    """Per-day productivity rows keyed by ``YYYY-MM-DD``."""

    daily_productivity: dict[str, dict[str, int | float]] = field(default_factory=dict)
    incubation_activity: dict[str, int] = field(default_factory=dict)
    last_updated: str | None = None

    def row(self, day: str) -> dict[str, Any]:
        return self.daily_productivity.setdefault(day, dict(_EMPTY_ROW))

    def days(self, end: str, count: int) -> list[tuple[str, dict[str, Any]]]:
        """The *count* days ending at *end*, oldest first; missing days are zeros."""
        end_day = date.fromisoformat(end)
        result = []
        for offset in range(count - 1, -1, -1):
            day = (end_day - timedelta(days=offset)).isoformat()
            result.append((day, {**_EMPTY_ROW, **self.daily_productivity.get(day, {})}))
        return result

    def day_stats(self, day: date) -> dict[str, Any]:
        row = self.daily_productivity.get(day.isoformat(), {})
        return {
            "date": day.isoformat(),
            "day_name": _WEEKDAYS[day.weekday()],
            "tasks": row.get("tasks_completed", 0),
            "time": row.get("time_logged", 0.0),
            "focus_sessions": row.get("focus_sessions", 0),
        }

    def insights(self, end: str) -> dict[str, str]:
        """Headline figures for the 7 days ending at *end*.

        Only days that have a row count.  Without any, every figure reads
        ``NO_DATA``.
        """
        end_day = date.fromisoformat(end)
        active = []
        for offset in range(6, -1, -1):
            day = end_day - timedelta(days=offset)
            if day.isoformat() in self.daily_productivity:
                active.append(self.day_stats(day))
        if not active:
            return dict.fromkeys(INSIGHT_KEYS, NO_DATA)

        tasks = [d["tasks"] for d in active]
        best = active[tasks.index(max(tasks))]
        total_tasks = sum(tasks)
        total_time = sum(d["time"] for d in active)
        sessions = sum(d["focus_sessions"] for d in active)
        avg_time = total_time / total_tasks if total_tasks else 0.0
        efficiency = total_tasks / sessions if sessions else 0.0

        return {
            "most_productive_day": f"{best['day_name']} ({best['tasks']} tasks)",
            "avg_task_time": f"{avg_time:.1f}h per task",
            "focus_efficiency": f"{efficiency:.1f} tasks/session",
            "weekly_trend": weekly_trend(tasks),
        }

    def get_weekly_summary(self, end: str) -> dict[str, Any]:
        """Totals and a per-day breakdown for the 7 days ending at *end*."""
        end_day = date.fromisoformat(end)
        start_day = end_day - timedelta(days=6)
        breakdown = [self.day_stats(start_day + timedelta(days=i)) for i in range(7)]
        return {
            "start_date": start_day.isoformat(),
            "end_date": end_day.isoformat(),
            **_totals(breakdown, 7),
            "daily_breakdown": breakdown,
        }

    def get_monthly_summary(self, year: int, month: int) -> dict[str, Any]:
        """Totals for a calendar month with Sunday-to-Saturday week groups.

        Days before the month's first Sunday form the first, shorter week.
        """
        start = date(year, month, 1)
        next_month = date(year + month // 12, month % 12 + 1, 1)
        days_in_month = (next_month - start).days

        breakdown = []
        weeks: list[dict[str, Any]] = []
        current: list[dict[str, Any]] = []
        for i in range(days_in_month):
            day = start + timedelta(days=i)
            stats = self.day_stats(day)
            breakdown.append(stats)
            current.append(stats)
            if day.weekday() == 5 or i == days_in_month - 1:
                weeks.append(
                    {
                        "week_number": len(weeks) + 1,
                        "start_date": current[0]["date"],
                        "end_date": current[-1]["date"],
                        "total_tasks": sum(d["tasks"] for d in current),
                        "total_time": round(sum(d["time"] for d in current), 2),
                    }
                )
                current = []

        return {
            "period": f"{start:%B %Y}",
            **_totals(breakdown, days_in_month),
            "days_in_month": days_in_month,
            "weekly_breakdown": weeks,
        }

    def export_weekly(self, today: str, weeks: int = 4) -> list[dict[str, Any]]:
        """Weekly summaries for the last *weeks* Sunday-to-Saturday weeks, oldest first."""
        day = date.fromisoformat(today)
        saturday = day - timedelta(days=(day.weekday() + 1) % 7) + timedelta(days=6)
        return [
            self.get_weekly_summary((saturday - timedelta(weeks=i)).isoformat())
            for i in range(weeks - 1, -1, -1)
        ]

    def export_monthly(self, today: str, months: int = 6) -> list[dict[str, Any]]:
        """Monthly summaries for the last *months* calendar months, oldest first."""
        day = date.fromisoformat(today)
        current = day.year * 12 + day.month - 1
        result = []
        for i in range(months - 1, -1, -1):
            year, month = divmod(current - i, 12)
            result.append(self.get_monthly_summary(year, month + 1))
        return result

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Analytics":
        return load_known(cls, data)
