"""Repository exports."""

from .quest_repo import QuestRepository

__all__ = ["QuestRepository"]
