"""Immutable quest graph used by the runtime."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, List, Mapping, Tuple


class UnknownStation(KeyError):
    """Raised when a station id does not resolve inside the quest."""

    def __init__(self, station_id: str) -> None:
        super().__init__(station_id)
        self.station_id = station_id

    def __str__(self) -> str:
        return f"Unknown station '{self.station_id}'."


@dataclass(frozen=True, slots=True)
class Choice:
    """Labeled edge pointing at another station by id."""

    label: str
    target_station_id: str


@dataclass(frozen=True, slots=True)
class Station:
    """Narrative node; choice order defines the spoken option numbers."""

    id: str
    text: str
    choices: Tuple[Choice, ...] = ()

    @property
    def choice_count(self) -> int:
        return len(self.choices)

    @property
    def is_terminal(self) -> bool:
        return not self.choices

    @property
    def is_pass_through(self) -> bool:
        return len(self.choices) == 1

    @property
    def is_decision(self) -> bool:
        return len(self.choices) >= 2

    def choice_for_option(self, option: int) -> Choice:
        """Return the choice for a 1-based option number."""
        if not 1 <= option <= len(self.choices):
            raise IndexError(f"Option {option} is invalid for station '{self.id}'.")
        return self.choices[option - 1]


@dataclass(frozen=True, slots=True)
class Quest:
    """Flat table of stations addressed by id plus title metadata."""

    title: str
    author: str
    intro: str
    entry_station_id: str
    stations: Mapping[str, Station] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "stations", MappingProxyType(dict(self.stations)))

    def resolve(self, station_id: str) -> Station:
        """Return a station by id."""
        try:
            return self.stations[station_id]
        except KeyError as exc:
            raise UnknownStation(station_id) from exc

    def entry(self) -> Station:
        return self.resolve(self.entry_station_id)

    def station_ids(self) -> List[str]:
        """Return all station ids sorted deterministically."""
        return sorted(self.stations.keys())

    def __contains__(self, station_id: object) -> bool:
        return station_id in self.stations

    def __iter__(self) -> Iterator[Station]:
        return (self.stations[key] for key in self.station_ids())

    def __len__(self) -> int:
        return len(self.stations)
