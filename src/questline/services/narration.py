"""Turns visited stations into spoken or displayed text."""
from __future__ import annotations

from typing import List, Sequence

from questline.domain.quest import Quest, Station

CHOICES_HEADER = "These are your choices:"
CHOOSE_INSTRUCTION = "Say the number of your choice."
_SENTENCE_ENDINGS = (".", "!", "?", ":", "\"", "'", ")")


def _sentence(text: str) -> str:
    text = text.strip()
    if text and not text.endswith(_SENTENCE_ENDINGS):
        return f"{text}."
    return text


class NarrationComposer:
    """Renders a turn's stations as continuous prose ending in a prompt."""

    def __init__(self, quest: Quest) -> None:
        self._quest = quest

    def render(self, stations: Sequence[Station], include_intro: bool = False) -> str:
        """Render stations in visit order.

        Pass-through stations read their single label as a continuation, a
        decision point ends with the numbered options, and a terminal station
        adds nothing after its text.
        """
        parts: List[str] = []
        if include_intro:
            parts.append(self.render_intro())
        for station in stations:
            parts.append(self.render_station(station))
        return " ".join(part for part in parts if part)

    def render_intro(self) -> str:
        quest = self._quest
        heading = f"{quest.title}, by {quest.author}" if quest.author else quest.title
        return " ".join(part for part in (_sentence(heading), _sentence(quest.intro)) if part)

    def render_station(self, station: Station) -> str:
        parts = [_sentence(station.text)]
        if station.is_pass_through:
            parts.append(_sentence(station.choices[0].label))
        elif station.is_decision:
            parts.append(self.render_choices(station))
        return " ".join(part for part in parts if part)

    def render_current(self, station: Station) -> str:
        """Re-render a single decision point, e.g. for repeat or help."""
        return self.render_station(station)

    @staticmethod
    def render_choices(station: Station) -> str:
        options = " ".join(
            f"{number}: {_sentence(choice.label)}"
            for number, choice in enumerate(station.choices, start=1)
        )
        return f"{CHOICES_HEADER} {options} {CHOOSE_INSTRUCTION}"
