"""Key-value stores backing the persisted state."""

from __future__ import annotations

import json
import os
from json import JSONDecodeError
from pathlib import Path

from platformdirs import user_data_dir

from taskdeck.utils.logger import get_logger

logger = get_logger("store")


class MemoryStore:
    """In-process store; nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """All keys in one JSON document under the user data directory.

    Writes go to a temporary file that is then renamed over the original,
    so a crash mid-write leaves the previous document intact.
    """

    def __init__(self, path: Path | None = None):
        if path is None:
            path = Path(user_data_dir("taskdeck")) / "store.json"
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._data: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._data is None:
            try:
                with open(self.path, encoding="utf-8") as f:
                    raw = json.load(f)
                self._data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
            except FileNotFoundError:
                self._data = {}
            except (JSONDecodeError, AttributeError, OSError) as e:
                logger.warning("Ignoring unreadable store %s: %s", self.path, e)
                self._data = {}
        return self._data

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        tmp_path = self.path.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, self.path)
        self.path.chmod(0o600)
