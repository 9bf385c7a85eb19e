"""Conversion of game instances to and from host-held state blobs."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping

from questline.core.types import AttributeSet, StatePayload
from questline.domain.instance import GameInstance
from questline.domain.quest import Quest
from questline.services.errors import CorruptState

_REQUIRED_KEYS = frozenset({"current_station_id", "path", "state", "previous_state"})


class GameStateCodec:
    """Maps a GameInstance to a flat, strictly validated payload and back.

    The payload holds exactly four fields: the current station id, the path
    of visited station ids and the current and previous attribute sets. Every
    station id is checked against the quest on decode so a blob written for a
    different quest layout is rejected instead of resumed.
    """

    def __init__(self, quest: Quest) -> None:
        self._quest = quest

    def encode(self, instance: GameInstance | None) -> StatePayload | None:
        """Return a JSON-serializable payload, or None when there is no instance."""
        if instance is None:
            return None
        return {
            "current_station_id": instance.current_station_id,
            "path": list(instance.path),
            "state": dict(instance.state),
            "previous_state": dict(instance.previous_state),
        }

    def decode(self, payload: Mapping[str, Any] | None) -> GameInstance | None:
        """Rehydrate a GameInstance; None means no game is in progress."""
        if payload is None:
            return None
        if not isinstance(payload, Mapping):
            raise CorruptState("State payload must be an object.")
        actual = set(payload.keys())
        if actual != _REQUIRED_KEYS:
            missing = _REQUIRED_KEYS - actual
            extra = actual - _REQUIRED_KEYS
            msg_parts: list[str] = []
            if missing:
                msg_parts.append(f"missing keys: {sorted(missing)}")
            if extra:
                msg_parts.append(f"unknown keys: {sorted(map(str, extra))}")
            raise CorruptState(f"state has schema issues ({'; '.join(msg_parts)}).")

        current_station_id = self._require_str(payload["current_station_id"], "state.current_station_id")
        self._validate_station(current_station_id, "state.current_station_id")
        path = self._coerce_path(payload["path"])
        if path and path[-1] != current_station_id:
            raise CorruptState(
                f"state.path ends at '{path[-1]}' but current station is '{current_station_id}'."
            )
        if not path and current_station_id != self._quest.entry_station_id:
            raise CorruptState(
                f"state.path is empty but current station '{current_station_id}' "
                f"is not the entry station '{self._quest.entry_station_id}'."
            )
        return GameInstance(
            current_station_id=current_station_id,
            path=path,
            state=self._coerce_attribute_set(payload["state"], "state.state"),
            previous_state=self._coerce_attribute_set(payload["previous_state"], "state.previous_state"),
        )

    def _coerce_path(self, value: Any) -> List[str]:
        if not isinstance(value, list):
            raise CorruptState("state.path must be a list.")
        path: List[str] = []
        for index, entry in enumerate(value):
            context = f"state.path[{index}]"
            station_id = self._require_str(entry, context)
            self._validate_station(station_id, context)
            path.append(station_id)
        return path

    def _coerce_attribute_set(self, value: Any, context: str) -> AttributeSet:
        mapping = self._require_dict(value, context)
        result: Dict[str, str] = {}
        for key, entry in mapping.items():
            if not isinstance(key, str):
                raise CorruptState(f"{context} keys must be strings.")
            if not isinstance(entry, str):
                raise CorruptState(f"{context}.{key} must be a string.")
            result[key] = entry
        return result

    def _validate_station(self, station_id: str, context: str) -> None:
        if station_id not in self._quest:
            raise CorruptState(
                f"{context} references station '{station_id}' missing from quest '{self._quest.title}'."
            )

    @staticmethod
    def _require_str(value: Any, context: str) -> str:
        if not isinstance(value, str):
            raise CorruptState(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_dict(value: Any, context: str) -> Dict[str, Any]:
        if not isinstance(value, Mapping):
            raise CorruptState(f"{context} must be an object.")
        return dict(value)
