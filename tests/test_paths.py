from pathlib import Path

from questline.data import paths


def test_get_quests_path_base_path(tmp_path: Path) -> None:
    assert paths.get_quests_path(tmp_path) == tmp_path


def test_get_quests_path_source_repo_exists() -> None:
    quests_path = paths.get_quests_path()
    assert quests_path.name == "quests"
    assert (quests_path / paths.DEFAULT_QUEST_FILENAME).exists()


def test_resolve_quest_file_prefers_existing_paths(tmp_path: Path) -> None:
    quest_file = tmp_path / "mine.json"
    quest_file.write_text("{}", encoding="utf-8")

    assert paths.resolve_quest_file(quest_file) == quest_file
    assert paths.resolve_quest_file() == paths.get_quests_path() / "tavern.json"
    assert paths.resolve_quest_file("other.json") == paths.get_quests_path() / "other.json"
