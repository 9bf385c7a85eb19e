"""Exceptions raised while loading quest definitions."""


class QuestLoadFailure(Exception):
    """Base exception for the data layer; no quest can be played."""


class DataLoadError(QuestLoadFailure):
    """Raised when a quest file is missing or is not valid JSON."""


class DataValidationError(QuestLoadFailure):
    """Raised when quest JSON fails structural validation."""


class DataReferenceError(QuestLoadFailure):
    """Raised when a choice or the entry point references a missing station."""
