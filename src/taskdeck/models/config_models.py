"""Configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from taskdeck.models.focus.cycling import PomodoroSettings


class PomodoroConfig(BaseModel):
    """Pomodoro phase lengths (minutes)."""

    work_minutes: int = Field(default=25, ge=1)
    short_break_minutes: int = Field(default=5, ge=1)
    long_break_minutes: int = Field(default=15, ge=1)
    rounds_before_long_break: int = Field(default=4, ge=1)

    def to_settings(self) -> PomodoroSettings:
        return PomodoroSettings(
            work_duration=self.work_minutes * 60,
            short_break_duration=self.short_break_minutes * 60,
            long_break_duration=self.long_break_minutes * 60,
            rounds_before_long_break=self.rounds_before_long_break,
        )


class HistoryConfig(BaseModel):
    """Undo/redo configuration."""

    max_size: int = Field(default=50, ge=1)


class NotificationConfig(BaseModel):
    """Notification configuration."""

    enabled: bool = Field(default=True)
    sound: bool = Field(default=True)


class AppConfig(BaseModel):
    """Main configuration."""

    pomodoro: PomodoroConfig = Field(default_factory=PomodoroConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    store_path: str | None = Field(default=None, description="Override for the state file")
