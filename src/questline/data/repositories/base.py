"""Base repository implementation for JSON definition data."""
from __future__ import annotations

from pathlib import Path
from typing import Generic, TypeVar

from questline.data.errors import DataValidationError
from questline.data.json_loader import load_json

T = TypeVar("T")


class RepositoryBase(Generic[T]):
    """Loads one JSON file and caches the object built from it."""

    def __init__(self, file_path: Path | str) -> None:
        self._file_path = Path(file_path)
        self._loaded: T | None = None

    @property
    def file_path(self) -> Path:
        return self._file_path

    def _load_raw(self) -> dict[str, object]:
        raw = load_json(self._file_path)
        if not isinstance(raw, dict):
            raise DataValidationError(f"Expected top-level object in {self._file_path}")
        return raw

    def _build(self, raw: dict[str, object]) -> T:
        """Convert a raw dict into a typed definition."""
        raise NotImplementedError

    def load(self) -> T:
        """Return the definition, reading the file on first use."""
        if self._loaded is None:
            raw = self._load_raw()
            self._loaded = self._build(raw)
        return self._loaded

    def reload(self) -> T:
        """Drop the cached definition and read the file again."""
        self._loaded = None
        return self.load()

    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise DataValidationError(f"{context} must be an object/dict.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        return value
