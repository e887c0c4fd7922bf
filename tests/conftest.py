"""Shared test fixtures and configuration.

Provides a fake clock, an in-memory store and a fully wired AppContext so
tests never touch the real filesystem or wait on real timers.
"""

from __future__ import annotations

from datetime import datetime
from unittest.mock import patch

import pytest

from taskdeck.adapters.notifier import NullNotifier
from taskdeck.adapters.store import MemoryStore
from taskdeck.context import AppContext
from taskdeck.core.scheduler import ManualScheduler
from taskdeck.models.config_models import AppConfig


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        start = start or datetime(2024, 3, 12, 9, 0, 0)
        self.ms = int(start.timestamp() * 1000)

    def now(self) -> int:
        return self.ms

    def advance(self, seconds: float = 0, *, ms: int = 0, days: int = 0) -> None:
        self.ms += int(seconds * 1000) + ms + days * 86_400_000


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def notifier():
    return NullNotifier()


@pytest.fixture()
def make_ctx(store, clock, scheduler, notifier):
    """Factory for started AppContexts sharing one store, clock and scheduler.

    Calling it twice simulates an application restart over the same store.
    """
    messages: list[str] = []

    def factory(config: AppConfig | None = None) -> AppContext:
        ctx = AppContext(
            store,
            config=config,
            clock=clock,
            scheduler=scheduler,
            notifier=notifier,
            on_message=messages.append,
        )
        ctx.messages = messages
        return ctx.start()

    return factory


@pytest.fixture()
def ctx(make_ctx):
    context = make_ctx()
    yield context
    context.close()


# ---------------------------------------------------------------------------
# Config isolation helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from taskdeck.services.config_service import ConfigService, get_config_service

    tmpdir = str(tmp_path)
    get_config_service.cache_clear()
    with patch("taskdeck.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("taskdeck.services.config_service.user_data_dir", return_value=tmpdir):
            svc = ConfigService()
            yield svc
    get_config_service.cache_clear()


@pytest.fixture()
def cli_config(tmp_config):
    """Point every CLI command at the temporary config and store."""
    with patch("taskdeck.commands.utils.get_config_service", return_value=tmp_config):
        with patch("taskdeck.commands.config.get_config_service", return_value=tmp_config):
            yield tmp_config
