import json
from pathlib import Path

import pytest

from questline import config
from questline.config import ConfigError, Settings, load_settings
from questline.services.traversal import DEFAULT_MAX_HOPS


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path: Path) -> None:
    for name in (config.CONFIG_ENV_VAR, config.QUEST_FILE_ENV_VAR, config.DEBUG_ENV_VAR):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "get_user_config_dir", lambda: tmp_path / "user")


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_missing_user_settings_yield_defaults() -> None:
    assert load_settings() == Settings()


def test_explicit_settings_file_is_read(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "settings.json",
        {
            "quest_file": "tavern.json",
            "supported_application_ids": ["amzn1.ask.skill.a", "", 5],
            "max_auto_advance_hops": 16,
            "log_level": "warning",
        },
    )

    settings = load_settings(path)

    assert settings == Settings(
        quest_file="tavern.json",
        supported_application_ids=("amzn1.ask.skill.a",),
        max_auto_advance_hops=16,
        log_level="WARNING",
    )


@pytest.mark.parametrize("hops", [0, -3, "many", True, None])
def test_bad_hop_limits_fall_back_to_default(tmp_path: Path, hops: object) -> None:
    path = _write(tmp_path / "settings.json", {"max_auto_advance_hops": hops})

    assert load_settings(path).max_auto_advance_hops == DEFAULT_MAX_HOPS


def test_unknown_log_level_falls_back_to_info(tmp_path: Path) -> None:
    path = _write(tmp_path / "settings.json", {"log_level": "LOUD"})

    assert load_settings(path).log_level == "INFO"


def test_explicit_missing_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "absent.json")


def test_config_env_var_names_the_file(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv(config.CONFIG_ENV_VAR, str(tmp_path / "absent.json"))

    with pytest.raises(ConfigError):
        load_settings()

    path = _write(tmp_path / "env.json", {"max_auto_advance_hops": 8})
    monkeypatch.setenv(config.CONFIG_ENV_VAR, str(path))
    assert load_settings().max_auto_advance_hops == 8


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_unusable_settings_file_is_an_error(tmp_path: Path, content: str) -> None:
    path = tmp_path / "settings.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_settings(path)


def test_env_overrides_quest_file_and_debug(monkeypatch, tmp_path: Path) -> None:
    path = _write(tmp_path / "settings.json", {"quest_file": "a.json", "log_level": "ERROR"})
    monkeypatch.setenv(config.QUEST_FILE_ENV_VAR, "b.json")
    monkeypatch.setenv(config.DEBUG_ENV_VAR, "1")

    settings = load_settings(path)

    assert settings.quest_file == "b.json"
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(("value", "expected"), [("1", True), ("true", False), ("0", False)])
def test_debug_enabled_only_for_one(monkeypatch, value: str, expected: bool) -> None:
    monkeypatch.setenv(config.DEBUG_ENV_VAR, value)

    assert config.debug_enabled() is expected


def test_default_paths_live_in_user_dir(tmp_path: Path) -> None:
    assert config.get_default_config_path() == tmp_path / "user" / "settings.json"
    assert config.get_default_state_path() == tmp_path / "user" / "state.json"
