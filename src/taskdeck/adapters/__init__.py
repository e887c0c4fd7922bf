"""Concrete implementations of the core ports."""

from .notifier import ConsoleNotifier, NullNotifier
from .store import JsonFileStore, MemoryStore

__all__ = ["ConsoleNotifier", "JsonFileStore", "MemoryStore", "NullNotifier"]
