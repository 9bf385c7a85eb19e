"""File-backed stand-in for a host that keeps the state blob between turns."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from questline.config import get_default_state_path


class StateFileStore:
    """Reads and writes one state blob as JSON on disk."""

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path is not None else get_default_state_path()

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def read(self) -> Any:
        """Return the stored blob, or None when nothing is stored.

        Content that is not valid JSON is returned verbatim so the state codec
        rejects it as corrupt instead of the store guessing at a repair.
        """
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return text

    def write(self, payload: Any) -> None:
        """Persist the blob; None clears the store."""
        if payload is None:
            self.clear()
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")

    def clear(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            return
