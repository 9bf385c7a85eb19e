"""Domain model exports."""

from .commands import Choose, Command, Help, Repeat, Restart, Stop, parse_option
from .instance import GameInstance
from .quest import Choice, Quest, Station, UnknownStation

__all__ = [
    "Choice",
    "Choose",
    "Command",
    "GameInstance",
    "Help",
    "Quest",
    "Repeat",
    "Restart",
    "Station",
    "Stop",
    "UnknownStation",
    "parse_option",
]
