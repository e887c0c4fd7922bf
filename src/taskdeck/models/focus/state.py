"""Focus (stopwatch) session state."""

from dataclasses import asdict, dataclass, fields

from pydantic import TypeAdapter


@dataclass
class FocusSession:
    """A single pausable stopwatch session plus the per-day counters.

    ``is_active`` and ``is_paused`` are never both true.  ``current_time``
    only means something while the session is active or paused.
    """

    is_active: bool = False
    is_paused: bool = False
    start_time: int | None = None  # epoch ms of the current active interval
    current_time: int = 0  # seconds
    paused_time: int = 0  # seconds accumulated before the current interval
    total_focus_time: float = 0.0  # hours, all sessions ever
    sessions_today: int = 0
    last_session_date: str | None = None

    @property
    def is_running(self) -> bool:
        """True while the session is active or paused."""
        return self.is_active or self.is_paused

    def elapsed_since_start(self, now_ms: int) -> int:
        """Whole seconds of the current active interval."""
        if self.start_time is None:
            return 0
        return (now_ms - self.start_time) // 1000

    def reset(self) -> None:
        """Back to the zero state; cumulative counters are kept."""
        self.is_active = False
        self.is_paused = False
        self.start_time = None
        self.current_time = 0
        self.paused_time = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "FocusSession":
        """Create from dictionary, ignoring unknown keys.

        Raises ``pydantic.ValidationError`` when a field has the wrong type.
        """
        known = {f.name for f in fields(cls)}
        return TypeAdapter(cls).validate_python({k: v for k, v in data.items() if k in known})
