"""Shared CLI rendering helpers."""
from __future__ import annotations

import textwrap
from typing import Iterable

DEFAULT_WIDTH = 78


def wrap_text(text: str, width: int = DEFAULT_WIDTH) -> list[str]:
    """Wrap text on word boundaries; each line is at most ``width`` characters."""
    if not text or width <= 0:
        return [text] if text else [""]
    return textwrap.wrap(
        text,
        width=width,
        break_long_words=False,
        break_on_hyphens=False,
    ) or [""]


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_prompt(text: str, width: int = DEFAULT_WIDTH) -> None:
    """Print a turn's prompt text wrapped for the console."""
    print()
    for line in wrap_text(text, width):
        print(line)


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        print(f"- {line}")
