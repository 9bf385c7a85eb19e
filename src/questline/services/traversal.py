"""Per-turn traversal of the quest graph."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from questline.domain.instance import GameInstance
from questline.domain.quest import Quest, Station
from questline.services.errors import ChoiceNotPossible, TraversalLimitExceeded

logger = logging.getLogger(__name__)

DEFAULT_MAX_HOPS = 256


@dataclass(slots=True)
class AdvanceResult:
    """Outcome of one turn.

    ``instance`` is None once the quest has ended; the caller persists that as
    "no game in progress".
    """

    instance: GameInstance | None
    visited: List[Station] = field(default_factory=list)
    terminal: bool = False

    @property
    def station(self) -> Station:
        """The station the turn stopped on."""
        return self.visited[-1]


@dataclass(slots=True)
class CurrentView:
    station: Station
    terminal: bool


class TraversalEngine:
    """State machine that moves a game instance between decision points."""

    def __init__(self, quest: Quest, *, max_hops: int = DEFAULT_MAX_HOPS) -> None:
        if max_hops < 1:
            raise ValueError("max_hops must be at least 1.")
        self._quest = quest
        self._max_hops = max_hops

    @property
    def quest(self) -> Quest:
        return self._quest

    def start(self) -> GameInstance:
        """Create a fresh instance positioned at the entry station."""
        return GameInstance(current_station_id=self._quest.entry_station_id)

    def current(self, instance: GameInstance) -> CurrentView:
        """Return the present decision point without touching the instance."""
        station = self._quest.resolve(instance.current_station_id)
        return CurrentView(station=station, terminal=station.is_terminal)

    def advance(self, instance: GameInstance, choice: int | None = None) -> AdvanceResult:
        """Apply one turn and run pass-through stations to completion.

        A fresh instance enters the entry station and ignores ``choice``. Any
        other instance needs a 1-based option valid for its current station.
        The given instance is never modified; the result carries a new one.
        """
        if instance.is_fresh:
            target_id = self._quest.entry_station_id
            choice = None
        else:
            target_id = self._resolve_choice(instance, choice)

        working = instance.copy()
        working.pending_choice = choice
        working.commit()
        visited: List[Station] = []

        station = self._enter(working, target_id, visited)
        hops = 0
        while station.is_pass_through:
            hops += 1
            if hops > self._max_hops:
                raise TraversalLimitExceeded(
                    f"Passed through more than {self._max_hops} single-choice stations "
                    f"starting from '{target_id}'."
                )
            station = self._enter(working, station.choices[0].target_station_id, visited)
        working.pending_choice = None

        terminal = station.is_terminal
        logger.debug(
            "Advanced to '%s' via %d station(s)%s",
            station.id,
            len(visited),
            " (terminal)" if terminal else "",
        )
        return AdvanceResult(
            instance=None if terminal else working,
            visited=visited,
            terminal=terminal,
        )

    def _resolve_choice(self, instance: GameInstance, choice: int | None) -> str:
        station = self._quest.resolve(instance.current_station_id)
        if choice is None:
            raise ChoiceNotPossible(
                f"Station '{station.id}' is waiting for a choice.",
                option=None,
                choice_count=station.choice_count,
            )
        try:
            return station.choice_for_option(choice).target_station_id
        except IndexError as exc:
            raise ChoiceNotPossible(
                f"Option {choice} is not available at station '{station.id}' "
                f"({station.choice_count} choice(s)).",
                option=choice,
                choice_count=station.choice_count,
            ) from exc

    def _enter(self, instance: GameInstance, station_id: str, visited: List[Station]) -> Station:
        station = self._quest.resolve(station_id)
        instance.path.append(station.id)
        instance.current_station_id = station.id
        visited.append(station)
        return station
