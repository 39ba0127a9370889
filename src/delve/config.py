"""Engine tunables and their per-user JSON persistence."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from delve.domain.rarity import ITEM_RARITIES

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EngineConfig:
    """Timings and balance knobs; durations are in seconds."""

    counter_attack_delay: float = 0.5
    heat_decay_interval: float = 15.0
    heat_decay_step: int = 1
    potion_heal: int = 50
    potion_cooldown: float = 3.0
    potion_cost: int = 75
    boss_drop_count: int = 3
    mimic_second_drop_chance: float = 0.5
    notify_min_rarity: str = "epic"


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "Delve"
        return Path.home() / "Delve"
    return Path.home() / ".config" / "delve"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def _coerce(name: str, value: object, default: object) -> object:
    if name == "notify_min_rarity":
        return value if value in ITEM_RARITIES else default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if value < 0:
        return default
    if isinstance(default, int):
        return int(value)
    return float(value)


def config_from_mapping(raw: dict[str, object]) -> EngineConfig:
    """Build a config from loose JSON; unknown keys are ignored, bad values defaulted."""
    defaults = EngineConfig()
    values = {}
    for config_field in fields(EngineConfig):
        default = getattr(defaults, config_field.name)
        if config_field.name in raw:
            values[config_field.name] = _coerce(config_field.name, raw[config_field.name], default)
        else:
            values[config_field.name] = default
    if values["heat_decay_interval"] <= 0:
        values["heat_decay_interval"] = defaults.heat_decay_interval
    values["boss_drop_count"] = max(1, values["boss_drop_count"])
    values["mimic_second_drop_chance"] = min(1.0, values["mimic_second_drop_chance"])
    return EngineConfig(**values)


def load_config(path: Path | None = None) -> EngineConfig:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return EngineConfig()
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", config_path, exc)
        return EngineConfig()
    if not isinstance(raw, dict):
        return EngineConfig()
    return config_from_mapping(raw)


def save_config(config: EngineConfig, path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(asdict(config), indent=2, sort_keys=True), encoding="utf-8")
