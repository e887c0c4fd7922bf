"""Linear undo/redo over the workspace graph.

Every entry is a whole-graph snapshot.  ``current_index`` points at the entry
that represents the visible state (-1 while the history is empty).  Recording
after an undo discards the redo branch; the oldest entry is evicted once the
history grows past ``max_history_size``.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from taskdeck.core.ports import Clock, SystemClock
from taskdeck.models.workspace import Workspace
from taskdeck.utils.logger import get_logger

logger = get_logger("history")

DEFAULT_MAX_HISTORY_SIZE = 50


@dataclass
class HistoryEntry:
    """One recorded state of the graph plus what produced it."""

    timestamp: int
    action: str
    data: dict[str, Any]
    projects: dict[str, Any] = field(default_factory=dict)
    goals: dict[str, Any] = field(default_factory=dict)
    archived_tasks: dict[str, Any] = field(default_factory=dict)
    archived_projects: dict[str, Any] = field(default_factory=dict)

    def graph(self) -> dict[str, Any]:
        """Deep copy of the captured collections."""
        return copy.deepcopy(
            {
                "projects": self.projects,
                "goals": self.goals,
                "archived_tasks": self.archived_tasks,
                "archived_projects": self.archived_projects,
            }
        )


class UndoRedoHistory:
    """Bounded snapshot history with a replay guard.

    Args:
        workspace: The live graph; restored in place on undo/redo.
        max_history_size: Entries kept before the oldest is dropped.
        clock: Timestamp source for entries.
        on_restore: Called after the graph was replaced (persist, re-render).
        on_message: Receives the transient "Undid: ..." / "Redid: ..." text.
    """

    def __init__(
        self,
        workspace: Workspace,
        max_history_size: int = DEFAULT_MAX_HISTORY_SIZE,
        clock: Clock | None = None,
        on_restore: Callable[[], None] | None = None,
        on_message: Callable[[str], None] | None = None,
    ):
        if max_history_size < 1:
            raise ValueError("max_history_size must be at least 1")
        self.workspace = workspace
        self.max_history_size = max_history_size
        self.clock = clock or SystemClock()
        self.on_restore = on_restore
        self.on_message = on_message

        self.history: list[HistoryEntry] = []
        self.current_index = -1
        self.is_performing_undo_redo = False

    def initialize(self) -> None:
        """Record the startup state as the first entry."""
        self.record_snapshot("Initial state", {"type": "initialization"})

    def record_snapshot(self, action: str, data: dict[str, Any] | None = None) -> HistoryEntry | None:
        """Capture the current graph after an edit.

        Ignored while an undo/redo is replaying, so the re-render it triggers
        is never mistaken for a new edit.
        """
        if self.is_performing_undo_redo:
            return None

        graph = self.workspace.snapshot()
        entry = HistoryEntry(
            timestamp=self.clock.now(),
            action=action,
            data=copy.deepcopy(data or {}),
            projects=graph["projects"],
            goals=graph["goals"],
            archived_tasks=graph["archived_tasks"],
            archived_projects=graph["archived_projects"],
        )

        del self.history[self.current_index + 1 :]
        self.history.append(entry)
        self.current_index = len(self.history) - 1

        if len(self.history) > self.max_history_size:
            self.history.pop(0)
            self.current_index -= 1

        logger.debug("Recorded '%s' (index %d of %d)", action, self.current_index, len(self.history))
        return entry

    def can_undo(self) -> bool:
        return self.current_index >= 0

    def can_redo(self) -> bool:
        return self.current_index < len(self.history) - 1

    def undo(self) -> HistoryEntry | None:
        """Step back one entry and restore it.

        Stepping back from index 0 leaves the index at -1 without touching
        the live graph: there is no earlier state to apply.
        """
        if not self.can_undo():
            return None

        self.is_performing_undo_redo = True
        try:
            self.current_index -= 1
            if self.current_index < 0:
                logger.debug("Undo reached the start of history; graph left as is")
                return None
            entry = self.history[self.current_index]
            self._restore(entry)
            self._message(f"Undid: {entry.action}")
            return entry
        finally:
            self.is_performing_undo_redo = False

    def redo(self) -> HistoryEntry | None:
        """Step forward one entry and restore it."""
        if not self.can_redo():
            return None

        self.is_performing_undo_redo = True
        try:
            self.current_index += 1
            entry = self.history[self.current_index]
            self._restore(entry)
            self._message(f"Redid: {entry.action}")
            return entry
        finally:
            self.is_performing_undo_redo = False

    def undo_label(self) -> str:
        if not self.can_undo():
            return "Nothing to undo"
        return f"Undo: {self.history[self.current_index].action}"

    def redo_label(self) -> str:
        if not self.can_redo():
            return "Nothing to redo"
        return f"Redo: {self.history[self.current_index + 1].action}"

    def _restore(self, entry: HistoryEntry) -> None:
        self.workspace.restore(entry.graph())
        logger.info("Restored '%s' (index %d)", entry.action, self.current_index)
        if self.on_restore is not None:
            self.on_restore()

    def _message(self, text: str) -> None:
        if self.on_message is not None:
            self.on_message(text)
