"""Closed set of player commands produced by front-ends."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class Choose:
    """Pick a numbered option; ``None`` means the input was not understood."""

    option: int | None


@dataclass(frozen=True, slots=True)
class Restart:
    pass


@dataclass(frozen=True, slots=True)
class Help:
    pass


@dataclass(frozen=True, slots=True)
class Stop:
    pass


@dataclass(frozen=True, slots=True)
class Repeat:
    pass


Command = Union[Choose, Restart, Help, Stop, Repeat]


def parse_option(label: object) -> int | None:
    """Coerce a spoken or typed option label to a positive integer.

    Anything that is not a whole positive number yields None so the caller
    can re-prompt instead of failing the turn.
    """
    if label is None or isinstance(label, bool):
        return None
    if isinstance(label, int):
        return label if label > 0 else None
    if not isinstance(label, str):
        return None
    text = label.strip()
    if not text.isdecimal():
        return None
    value = int(text)
    return value if value > 0 else None
