"""Reading quest files from disk."""
from __future__ import annotations

import json
from pathlib import Path

from .errors import DataLoadError


def load_json(path: Path) -> object:
    """Return the parsed contents of a UTF-8 quest file.

    The caller checks the shape (a top-level object with ``title``, ``entry``
    and a ``stations`` list); this only guarantees the file exists and holds
    JSON. Every failure surfaces as DataLoadError naming the file.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(f"Quest file not found: {path}") from exc
    except UnicodeDecodeError as exc:
        raise DataLoadError(f"Quest file {path} is not valid UTF-8: {exc.reason}") from exc
    except OSError as exc:
        raise DataLoadError(f"Unable to read quest file {path}: {exc.strerror or exc}") from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(
            f"Invalid JSON in quest file {path} at line {exc.lineno}, column {exc.colno}: {exc.msg}"
        ) from exc
