"""Helpers for resolving quest file locations."""
from __future__ import annotations

from pathlib import Path

DEFAULT_QUEST_FILENAME = "tavern.json"


def get_repo_root() -> Path:
    """Return the repository root."""
    return Path(__file__).resolve().parents[3]


def get_quests_path(base_path: Path | str | None = None) -> Path:
    """Return the directory holding bundled quest files."""
    if base_path is not None:
        return Path(base_path)
    return get_repo_root() / "data" / "quests"


def resolve_quest_file(quest_file: Path | str | None = None) -> Path:
    """Return the quest file to load.

    Relative names are looked up in the bundled quests directory unless they
    already point at an existing file.
    """
    if quest_file is None:
        return get_quests_path() / DEFAULT_QUEST_FILENAME
    candidate = Path(quest_file)
    if candidate.is_absolute() or candidate.exists():
        return candidate
    return get_quests_path() / candidate
