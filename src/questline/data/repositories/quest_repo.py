"""Repository that loads a quest graph from JSON."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple

from questline.data.errors import DataReferenceError, DataValidationError
from questline.data.paths import resolve_quest_file
from questline.data.repositories.base import RepositoryBase
from questline.domain.quest import Choice, Quest, Station
from questline.services.quest_graph_validator import format_issue, validate_quest_graph

logger = logging.getLogger(__name__)

_ALLOWED_TOP_LEVEL_KEYS = {"title", "author", "intro", "entry", "stations"}
_ALLOWED_STATION_KEYS = {"id", "text", "choices"}
_ALLOWED_CHOICE_KEYS = {"label", "next"}


class QuestRepository(RepositoryBase[Quest]):
    """Loads a quest file, validates its structure and references.

    Stations are listed in order under ``stations``; each carries a unique
    ``id``, its ``text`` and an optional ordered ``choices`` list whose entries
    name their target with ``next``.
    """

    def __init__(self, quest_file: Path | str | None = None) -> None:
        super().__init__(resolve_quest_file(quest_file))

    def _build(self, raw: dict[str, object]) -> Quest:
        unknown = set(raw.keys()) - _ALLOWED_TOP_LEVEL_KEYS
        if unknown:
            raise DataValidationError(f"quest has unknown fields: {sorted(unknown)}.")
        title = self._require_str(raw.get("title"), "quest title")
        author = self._require_str(raw.get("author", ""), "quest author")
        intro = self._require_str(raw.get("intro", ""), "quest intro")
        entry_id = self._require_str(raw.get("entry"), "quest entry")
        station_pairs = self._parse_stations(raw.get("stations"))

        issues = validate_quest_graph(station_pairs, entry_id)
        errors = [issue for issue in issues if issue.severity == "ERROR"]
        for issue in issues:
            if issue.severity == "WARN":
                logger.warning("%s: %s", self.file_path.name, format_issue(issue))
        if errors:
            raise DataReferenceError(
                f"Quest graph in {self.file_path} is invalid:\n"
                + "\n".join(format_issue(issue) for issue in errors)
            )

        quest = Quest(
            title=title,
            author=author,
            intro=intro,
            entry_station_id=entry_id,
            stations=dict(station_pairs),
        )
        logger.info("Loaded quest '%s' with %d stations from %s", title, len(quest), self.file_path)
        return quest

    def _parse_stations(self, raw_stations: object) -> List[Tuple[str, Station]]:
        if not isinstance(raw_stations, list) or not raw_stations:
            raise DataValidationError("quest stations must be a non-empty list.")
        pairs: List[Tuple[str, Station]] = []
        for index, entry in enumerate(raw_stations):
            context = f"stations[{index}]"
            station_data = self._require_mapping(entry, context)
            unknown = set(station_data.keys()) - _ALLOWED_STATION_KEYS
            if unknown:
                raise DataValidationError(f"{context} has unknown fields: {sorted(unknown)}.")
            station_id = self._require_str(station_data.get("id"), f"{context} id")
            if not station_id:
                raise DataValidationError(f"{context} id must not be empty.")
            text = self._require_str(station_data.get("text"), f"station '{station_id}' text")
            choices = self._parse_choices(station_data.get("choices"), station_id)
            pairs.append((station_id, Station(id=station_id, text=text, choices=choices)))
        return pairs

    def _parse_choices(self, raw_choices: object, station_id: str) -> Tuple[Choice, ...]:
        if raw_choices is None:
            return ()
        if not isinstance(raw_choices, list):
            raise DataValidationError(f"station '{station_id}' choices must be a list if provided.")
        choices: List[Choice] = []
        for index, entry in enumerate(raw_choices):
            choice_ctx = f"station '{station_id}' choices[{index}]"
            choice_mapping = self._require_mapping(entry, choice_ctx)
            unknown = set(choice_mapping.keys()) - _ALLOWED_CHOICE_KEYS
            if unknown:
                raise DataValidationError(f"{choice_ctx} has unknown fields: {sorted(unknown)}.")
            label = self._require_str(choice_mapping.get("label"), f"{choice_ctx} label")
            target = self._require_str(choice_mapping.get("next"), f"{choice_ctx} next")
            choices.append(Choice(label=label, target_station_id=target))
        return tuple(choices)
