"""Ports (interfaces) consumed by the engines.

The engines depend on Protocols instead of concrete implementations, so the
store, notifier and clock can be swapped (JSON file vs memory, console vs
silent, wall clock vs a test clock).
"""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol

RefreshCallback = Callable[[], None]


class KeyValueStore(Protocol):
    """String key-value store the state is persisted to."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class Notifier(Protocol):
    """Fire-and-forget user notification sink."""

    def notify(self, title: str, body: str, options: dict[str, Any] | None = None) -> bool: ...


class Clock(Protocol):
    """The only time source. ``now()`` returns epoch milliseconds."""

    def now(self) -> int: ...


class SystemClock:
    """Wall clock."""

    def now(self) -> int:
        return int(time.time() * 1000)


def to_datetime(ms: int) -> datetime:
    """Convert an epoch-millisecond timestamp to an aware local datetime."""
    return datetime.fromtimestamp(ms / 1000).astimezone()


def date_string(ms: int) -> str:
    """Local calendar date (``YYYY-MM-DD``) for an epoch-millisecond timestamp."""
    return to_datetime(ms).date().isoformat()


def noop_refresh() -> None:
    """Refresh callback used when nothing renders."""
