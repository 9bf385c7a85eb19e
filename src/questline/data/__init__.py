"""Data layer utilities for loading quest definitions."""

from .errors import DataLoadError, DataReferenceError, DataValidationError, QuestLoadFailure
from .paths import get_quests_path, get_repo_root, resolve_quest_file

__all__ = [
    "DataLoadError",
    "DataReferenceError",
    "DataValidationError",
    "QuestLoadFailure",
    "get_quests_path",
    "get_repo_root",
    "resolve_quest_file",
]
