"""Per-player progress through a quest."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from questline.core.types import AttributeSet


@dataclass
class GameInstance:
    """Mutable progress record; stations are referenced by id only."""

    current_station_id: str
    path: List[str] = field(default_factory=list)
    state: AttributeSet = field(default_factory=dict)
    previous_state: AttributeSet = field(default_factory=dict)
    pending_choice: int | None = None

    @property
    def is_fresh(self) -> bool:
        """True until the first turn has been applied."""
        return not self.path

    def copy(self) -> "GameInstance":
        return GameInstance(
            current_station_id=self.current_station_id,
            path=list(self.path),
            state=dict(self.state),
            previous_state=dict(self.previous_state),
            pending_choice=self.pending_choice,
        )

    def commit(self) -> None:
        """Snapshot the attribute set before the turn's mutations are applied."""
        self.previous_state = dict(self.state)
