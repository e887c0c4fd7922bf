"""Tests for the snapshot-based undo/redo history."""

from __future__ import annotations

from datetime import datetime

import pytest

from taskdeck.models.workspace import Project, Workspace
from taskdeck.services.history_service import UndoRedoHistory

NOW = datetime(2024, 3, 12, 9, 0)


def _add_project(ws: Workspace, name: str) -> None:
    pid = ws.allocate_id("project")
    ws.projects[pid] = Project(id=pid, name=name, created_at=NOW, updated_at=NOW)


def _names(ws: Workspace) -> list[str]:
    return sorted(p.name for p in ws.projects.values())


@pytest.fixture()
def workspace():
    return Workspace()


@pytest.fixture()
def history(workspace, clock):
    return UndoRedoHistory(workspace, clock=clock)


class TestRecording:
    def test_first_record_is_index_zero(self, history):
        history.record_snapshot("A")

        assert history.current_index == 0
        assert len(history.history) == 1

    def test_snapshot_is_a_deep_copy(self, history, workspace):
        _add_project(workspace, "A")
        entry = history.record_snapshot("A")

        workspace.projects["project_1"].name = "mutated"

        assert entry.projects["project_1"]["name"] == "A"

    def test_metadata_and_timestamp(self, history, clock):
        entry = history.record_snapshot("Deleted task: x", {"type": "deleteTask"})

        assert entry.action == "Deleted task: x"
        assert entry.data == {"type": "deleteTask"}
        assert entry.timestamp == clock.now()

    def test_initialize_records_initial_state(self, history):
        history.initialize()

        assert history.history[0].action == "Initial state"
        assert history.history[0].data == {"type": "initialization"}

    def test_recording_is_ignored_during_replay(self, history):
        history.is_performing_undo_redo = True

        assert history.record_snapshot("during replay") is None
        assert history.history == []

    def test_rejects_non_positive_size(self, workspace):
        with pytest.raises(ValueError):
            UndoRedoHistory(workspace, max_history_size=0)


class TestUndoRedo:
    def test_abc_scenario(self, history, workspace):
        _add_project(workspace, "A")
        history.record_snapshot("A")
        _add_project(workspace, "B")
        history.record_snapshot("B")
        _add_project(workspace, "C")
        history.record_snapshot("C")

        history.undo()
        history.undo()

        assert history.current_index == 0
        assert _names(workspace) == ["A"]

        history.redo()

        assert history.current_index == 1
        assert _names(workspace) == ["A", "B"]

    def test_undo_past_first_entry_is_not_applied(self, history, workspace):
        _add_project(workspace, "A")
        history.record_snapshot("A")

        assert history.undo() is None
        assert history.current_index == -1
        assert _names(workspace) == ["A"]

        assert history.undo() is None
        assert history.current_index == -1

    def test_redo_after_full_undo(self, history, workspace):
        _add_project(workspace, "A")
        history.record_snapshot("A")
        history.undo()
        workspace.projects.clear()

        history.redo()

        assert history.current_index == 0
        assert _names(workspace) == ["A"]

    def test_new_record_discards_redo_branch(self, history, workspace):
        for name in ("A", "B", "C"):
            _add_project(workspace, name)
            history.record_snapshot(name)
        history.undo()

        history.record_snapshot("D")

        assert history.can_redo() is False
        assert history.redo() is None
        assert [e.action for e in history.history] == ["A", "B", "D"]

    def test_messages(self, workspace, clock):
        messages = []
        history = UndoRedoHistory(workspace, clock=clock, on_message=messages.append)
        history.record_snapshot("A")
        history.record_snapshot("B")

        history.undo()
        history.redo()

        assert messages == ["Undid: A", "Redid: B"]

    def test_restore_callback_runs_without_recording(self, workspace, clock):
        calls = []
        history = UndoRedoHistory(workspace, clock=clock)

        def on_restore():
            calls.append(history.is_performing_undo_redo)
            history.record_snapshot("re-render")

        history.on_restore = on_restore
        history.record_snapshot("A")
        history.record_snapshot("B")
        history.undo()

        assert calls == [True]
        assert len(history.history) == 2
        assert history.is_performing_undo_redo is False

    def test_labels(self, history):
        assert history.undo_label() == "Nothing to undo"
        assert history.redo_label() == "Nothing to redo"

        history.record_snapshot("A")
        history.record_snapshot("B")
        history.undo()

        assert history.undo_label() == "Undo: A"
        assert history.redo_label() == "Redo: B"


class TestEviction:
    def test_oldest_entry_dropped_at_cap(self, workspace, clock):
        history = UndoRedoHistory(workspace, max_history_size=3, clock=clock)
        for name in ("A", "B", "C", "D"):
            history.record_snapshot(name)

        assert [e.action for e in history.history] == ["B", "C", "D"]
        assert history.current_index == 2
        assert history.history[history.current_index].action == "D"

    def test_default_cap_is_fifty(self, history):
        for i in range(51):
            history.record_snapshot(f"edit {i}")

        assert len(history.history) == 50
        assert history.history[0].action == "edit 1"
        assert history.current_index == 49
