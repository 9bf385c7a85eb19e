"""Settings loading for the console player and the speech handler."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Tuple

from questline.core.types import LogLevel
from questline.services.traversal import DEFAULT_MAX_HOPS

CONFIG_ENV_VAR = "QUESTLINE_CONFIG"
QUEST_FILE_ENV_VAR = "QUESTLINE_QUEST_FILE"
DEBUG_ENV_VAR = "QUESTLINE_DEBUG"

_DEFAULT_LOG_LEVEL: LogLevel = "INFO"
_LOG_LEVELS: Tuple[LogLevel, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")


class ConfigError(Exception):
    """Raised when an explicitly requested settings file cannot be used."""


@dataclass(frozen=True, slots=True)
class Settings:
    quest_file: str | None = None
    supported_application_ids: Tuple[str, ...] = field(default_factory=tuple)
    max_auto_advance_hops: int = DEFAULT_MAX_HOPS
    log_level: LogLevel = _DEFAULT_LOG_LEVEL


def debug_enabled() -> bool:
    """Return True only when QUESTLINE_DEBUG is explicitly set to '1'."""
    return os.getenv(DEBUG_ENV_VAR) == "1"


def get_user_config_dir() -> Path:
    """Return the per-user config directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "questline"
        return Path.home() / "questline"
    return Path.home() / ".config" / "questline"


def get_default_config_path() -> Path:
    return get_user_config_dir() / "settings.json"


def get_default_state_path() -> Path:
    """Return where the console player keeps its state blob between turns."""
    return get_user_config_dir() / "state.json"


def load_settings(path: Path | str | None = None) -> Settings:
    """Load settings from ``path``, ``$QUESTLINE_CONFIG`` or the per-user file.

    A missing per-user file yields defaults. A file named explicitly (argument
    or environment) must exist and hold a JSON object.
    """
    explicit = path if path is not None else os.environ.get(CONFIG_ENV_VAR)
    config_path = Path(explicit) if explicit else get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        if explicit:
            raise ConfigError(f"Settings file not found: {config_path}") from exc
        raw = {}
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Unable to read settings file {config_path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Settings file {config_path} must hold a JSON object.")
    return _apply_env_overrides(_normalize(raw))


def _normalize(raw: Mapping[str, object]) -> Settings:
    quest_file = raw.get("quest_file")
    app_ids = raw.get("supported_application_ids")
    hops = raw.get("max_auto_advance_hops")
    level = raw.get("log_level")
    return Settings(
        quest_file=quest_file if isinstance(quest_file, str) and quest_file else None,
        supported_application_ids=_normalize_app_ids(app_ids),
        max_auto_advance_hops=_normalize_hops(hops),
        log_level=_normalize_log_level(level),
    )


def _normalize_hops(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return DEFAULT_MAX_HOPS
    return value


def _normalize_app_ids(value: object) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(entry for entry in value if isinstance(entry, str) and entry)


def _normalize_log_level(value: object) -> LogLevel:
    if isinstance(value, str) and value.upper() in _LOG_LEVELS:
        return value.upper()  # type: ignore[return-value]
    return _DEFAULT_LOG_LEVEL


def _apply_env_overrides(settings: Settings) -> Settings:
    quest_file = os.environ.get(QUEST_FILE_ENV_VAR) or settings.quest_file
    log_level: LogLevel = "DEBUG" if debug_enabled() else settings.log_level
    return Settings(
        quest_file=quest_file,
        supported_application_ids=settings.supported_application_ids,
        max_auto_advance_hops=settings.max_auto_advance_hops,
        log_level=log_level,
    )
