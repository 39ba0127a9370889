"""Reads one definitions file (loot blueprints, affixes, rarity tables, enemies)."""
from __future__ import annotations

import json
from pathlib import Path

from .errors import DataLoadError, DataValidationError


def load_definition_file(path: Path) -> dict[str, object]:
    """Return the top-level object of ``path``.

    Missing, unreadable and malformed files raise DataLoadError; a file whose
    root is not a JSON object raises DataValidationError.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(f"Missing definitions file {path.name} in {path.parent}") from exc
    except OSError as exc:
        raise DataLoadError(f"Could not read definitions file {path}: {exc}") from exc

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"{path.name} is not valid JSON (line {exc.lineno}): {exc.msg}") from exc
    if not isinstance(raw, dict):
        raise DataValidationError(f"{path.name} must hold a JSON object, got {type(raw).__name__}")
    return raw
