import logging
from pathlib import Path

import pytest

from questline.data.errors import (
    DataLoadError,
    DataReferenceError,
    DataValidationError,
    QuestLoadFailure,
)
from questline.data.repositories import QuestRepository
from tests.helpers.quests import BRANCHING_LINKS, quest_payload, write_quest


def test_bundled_quest_loads() -> None:
    quest = QuestRepository().load()

    assert quest.title
    assert quest.entry().is_pass_through
    assert quest.resolve("taproom").choice_count == 3


def test_loads_quest_from_file(tmp_path: Path) -> None:
    path = write_quest(tmp_path / "quest.json", quest_payload(BRANCHING_LINKS))
    quest = QuestRepository(path).load()

    assert quest.entry_station_id == "start"
    assert [choice.target_station_id for choice in quest.resolve("hub").choices] == [
        "left",
        "middle",
        "right",
    ]
    assert quest.resolve("left").is_terminal


def test_load_is_cached_until_reload(tmp_path: Path) -> None:
    path = write_quest(tmp_path / "quest.json", quest_payload({"start": []}))
    repo = QuestRepository(path)

    first = repo.load()
    write_quest(path, quest_payload({"start": ["end"], "end": []}))

    assert repo.load() is first
    assert len(repo.reload()) == 2


def test_missing_file_raises_load_error(tmp_path: Path) -> None:
    with pytest.raises(DataLoadError):
        QuestRepository(tmp_path / "absent.json").load()


def test_invalid_json_raises_load_error(tmp_path: Path) -> None:
    path = tmp_path / "quest.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(DataLoadError):
        QuestRepository(path).load()


def test_top_level_must_be_object(tmp_path: Path) -> None:
    path = write_quest(tmp_path / "quest.json", ["not", "a", "quest"])

    with pytest.raises(DataValidationError):
        QuestRepository(path).load()


@pytest.mark.parametrize(
    "mutate",
    [
        lambda payload: payload.pop("title"),
        lambda payload: payload.pop("entry"),
        lambda payload: payload.update(stations=[]),
        lambda payload: payload.update(stations={"start": {}}),
        lambda payload: payload.update(extra=True),
        lambda payload: payload["stations"][0].pop("text"),
        lambda payload: payload["stations"][0].update(id=""),
        lambda payload: payload["stations"][0].update(choices="left"),
        lambda payload: payload["stations"][0]["choices"][0].pop("next"),
        lambda payload: payload["stations"][0]["choices"][0].update(weight=0.5),
    ],
)
def test_structural_problems_raise_validation_error(tmp_path: Path, mutate) -> None:
    payload = quest_payload(BRANCHING_LINKS)
    mutate(payload)
    path = write_quest(tmp_path / "quest.json", payload)

    with pytest.raises(DataValidationError):
        QuestRepository(path).load()


def test_unresolvable_choice_target_raises_reference_error(tmp_path: Path) -> None:
    path = write_quest(tmp_path / "quest.json", quest_payload({"start": ["nowhere"]}))

    with pytest.raises(DataReferenceError, match="MISSING_STATION_REF"):
        QuestRepository(path).load()


def test_missing_entry_raises_reference_error(tmp_path: Path) -> None:
    path = write_quest(tmp_path / "quest.json", quest_payload({"start": []}, entry="gate"))

    with pytest.raises(DataReferenceError):
        QuestRepository(path).load()


def test_duplicate_station_ids_raise_reference_error(tmp_path: Path) -> None:
    payload = quest_payload({"start": []})
    payload["stations"].append({"id": "start", "text": "Again."})
    path = write_quest(tmp_path / "quest.json", payload)

    with pytest.raises(DataReferenceError, match="DUPLICATE_STATION_ID"):
        QuestRepository(path).load()


def test_all_loader_errors_are_quest_load_failures(tmp_path: Path) -> None:
    with pytest.raises(QuestLoadFailure):
        QuestRepository(tmp_path / "absent.json").load()


def test_unreachable_station_is_logged_not_fatal(tmp_path: Path, caplog) -> None:
    path = write_quest(tmp_path / "quest.json", quest_payload({"start": [], "island": []}))

    with caplog.at_level(logging.WARNING, logger="questline.data.repositories.quest_repo"):
        quest = QuestRepository(path).load()

    assert "island" in quest
    assert "UNREACHABLE_STATION" in caplog.text


def test_non_utf8_file_raises_load_error(tmp_path: Path) -> None:
    path = tmp_path / "quest.json"
    path.write_bytes(b'{"title": "\xff"}')

    with pytest.raises(DataLoadError, match="UTF-8"):
        QuestRepository(path).load()


def test_invalid_json_error_names_the_position(tmp_path: Path) -> None:
    path = tmp_path / "quest.json"
    path.write_text('{\n  "title": oops\n}', encoding="utf-8")

    with pytest.raises(DataLoadError, match="line 2"):
        QuestRepository(path).load()
