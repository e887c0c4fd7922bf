"""Notification sinks."""

from __future__ import annotations

from typing import Any

from rich.console import Console

from taskdeck.utils.logger import get_logger
from taskdeck.utils.ui.console import get_console

logger = get_logger("notifier")


class ConsoleNotifier:
    """Prints notifications to the terminal and rings the bell."""

    def __init__(self, console: Console | None = None, sound: bool = True):
        self.console = console or get_console()
        self.sound = sound

    def notify(self, title: str, body: str, options: dict[str, Any] | None = None) -> bool:
        options = options or {}
        logger.info("Notification: %s - %s", title, body)
        self.console.print(f"\n[bold magenta]🔔 {title}[/bold magenta]  {body}")
        if self.sound and not options.get("silent", False):
            self.console.bell()
        return True


class NullNotifier:
    """Records notifications without showing them."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, dict[str, Any]]] = []

    def notify(self, title: str, body: str, options: dict[str, Any] | None = None) -> bool:
        self.sent.append((title, body, dict(options or {})))
        return False
