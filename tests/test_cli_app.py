from __future__ import annotations

import json
from pathlib import Path
from typing import Iterator

import pytest

from questline.data.repositories import QuestRepository
from questline.domain.commands import Choose, Help, Repeat, Restart, Stop
from questline.presentation.cli.app import command_from_text, main, run_console, run_validation
from questline.presentation.cli.state_store import StateFileStore
from questline.services.turn_service import GOODBYE_TEXT, STORY_ENDED_TEXT, TurnService
from tests.helpers.quests import BRANCHING_LINKS, build_quest, quest_payload, write_quest


def _scripted(lines: list[str]):
    remaining: Iterator[str] = iter(lines)

    def _input(_prompt: str) -> str:
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError from None

    return _input


def _service() -> TurnService:
    quest = build_quest(BRANCHING_LINKS)
    return TurnService(lambda: quest)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1", Choose(1)),
        ("  2 ", Choose(2)),
        ("left", Choose(None)),
        ("", Repeat()),
        ("HELP", Help()),
        ("start over", Restart()),
        ("quit", Stop()),
        ("n", Stop()),
        ("yes", Repeat()),
    ],
)
def test_command_from_text(raw: str, expected: object) -> None:
    assert command_from_text(raw) == expected


def test_console_plays_to_an_ending(tmp_path: Path, capsys) -> None:
    store = StateFileStore(tmp_path / "state.json")

    code = run_console(_service(), store, input_fn=_scripted(["1", "quit"]))

    output = " ".join(capsys.readouterr().out.split())
    assert code == 0
    assert "Once upon a time." in output
    assert STORY_ENDED_TEXT in output
    assert GOODBYE_TEXT in output
    assert not store.exists()


def test_console_saves_progress_between_runs(tmp_path: Path, capsys) -> None:
    store = StateFileStore(tmp_path / "state.json")

    run_console(_service(), store, input_fn=_scripted(["2", "stop"]))
    saved = store.read()
    run_console(_service(), store, input_fn=_scripted([]))

    output = " ".join(capsys.readouterr().out.split())
    assert saved["current_station_id"] == "fork"
    # the second session resumes at the fork instead of replaying the intro
    assert output.count("Once upon a time.") == 1
    assert store.read() == saved


def test_state_store_round_trip_and_clear(tmp_path: Path) -> None:
    store = StateFileStore(tmp_path / "nested" / "state.json")
    assert store.read() is None

    store.write({"current_station_id": "hub"})
    assert json.loads(store.path.read_text(encoding="utf-8")) == {"current_station_id": "hub"}
    assert store.read() == {"current_station_id": "hub"}

    store.write(None)
    assert not store.exists()
    store.clear()


def test_state_store_returns_unparseable_text_verbatim(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("{broken", encoding="utf-8")

    assert StateFileStore(path).read() == "{broken"


def test_console_recovers_from_corrupt_state_file(tmp_path: Path, capsys) -> None:
    path = tmp_path / "state.json"
    path.write_text("{broken", encoding="utf-8")

    run_console(_service(), StateFileStore(path), input_fn=_scripted(["quit"]))

    assert "restarted" in capsys.readouterr().out


def test_run_validation_reports_clean_quest(tmp_path: Path, capsys) -> None:
    path = write_quest(tmp_path / "quest.json", quest_payload(BRANCHING_LINKS))

    assert run_validation(QuestRepository(path)) == 0
    assert "No issues found." in capsys.readouterr().out


def test_run_validation_lists_warnings(tmp_path: Path, capsys) -> None:
    path = write_quest(tmp_path / "quest.json", quest_payload({"start": [], "island": []}))

    assert run_validation(QuestRepository(path)) == 0
    assert "UNREACHABLE_STATION" in capsys.readouterr().out


def test_run_validation_fails_on_broken_quest(tmp_path: Path, capsys) -> None:
    path = write_quest(tmp_path / "quest.json", quest_payload({"start": ["nowhere"]}))

    assert run_validation(QuestRepository(path)) == 1
    assert "MISSING_STATION_REF" in capsys.readouterr().out


def test_main_validates_bundled_quest(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("QUESTLINE_QUEST_FILE", raising=False)
    monkeypatch.delenv("QUESTLINE_DEBUG", raising=False)
    config = tmp_path / "settings.json"
    config.write_text("{}", encoding="utf-8")

    assert main(["--config", str(config), "--validate"]) == 0


def test_main_rejects_missing_config(tmp_path: Path, capsys) -> None:
    assert main(["--config", str(tmp_path / "absent.json"), "--validate"]) == 2
    assert "Configuration error" in capsys.readouterr().err
