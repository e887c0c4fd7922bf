"""Persistence of taskdeck state onto a key-value store."""

from .state_repository import StateRepository

__all__ = ["StateRepository"]
