#!/usr/bin/env python3
"""
Application Settings
====================
Reads conlang/configs/app.yaml.

Two ways in:

- get_setting("cli.default_count", 100) for loose keys with a fallback
- generation_defaults() for the `generation` section, which every
  language build depends on and which is checked once when first read
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

CONFIG_DIR = Path(__file__).resolve().parent / "configs"
APP_CONFIG_PATH = CONFIG_DIR / "app.yaml"

GENERATION_KEYS = (
    'default_distribution',
    'exclusion_window',
    'reset_on_boundary',
    'boundary_characters',
)


@lru_cache(maxsize=1)
def load_app_config() -> Dict[str, Any]:
    if not APP_CONFIG_PATH.exists():
        raise FileNotFoundError(f"Missing app config: {APP_CONFIG_PATH}")
    with open(APP_CONFIG_PATH, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{APP_CONFIG_PATH.name} must be a mapping")
    return data


def get_setting(path: str, default: Any = None) -> Any:
    """Get a nested setting by dotted path ("batch.workers")."""
    current: Any = load_app_config()
    for part in path.split('.'):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


@dataclass(frozen=True)
class GenerationDefaults:
    """The `generation` section of app.yaml."""
    default_distribution: Dict[str, Any]
    exclusion_window: int
    reset_on_boundary: bool
    boundary_characters: str

    @classmethod
    def from_config(cls, data: Mapping[str, Any]) -> 'GenerationDefaults':
        section = data.get('generation')
        if not isinstance(section, Mapping):
            raise ValueError("generation must be set in app.yaml")

        missing = [k for k in GENERATION_KEYS if section.get(k) is None]
        if missing:
            raise ValueError(
                "app.yaml is missing " + ', '.join(f"generation.{k}" for k in missing)
            )

        dist = section['default_distribution']
        if not isinstance(dist, Mapping):
            raise ValueError(f"generation.default_distribution must be a mapping, got {dist!r}")
        window = section['exclusion_window']
        if isinstance(window, bool) or not isinstance(window, int) or window < 0:
            raise ValueError(f"generation.exclusion_window must be an integer >= 0, got {window!r}")
        reset = section['reset_on_boundary']
        if not isinstance(reset, bool):
            raise ValueError(f"generation.reset_on_boundary must be true or false, got {reset!r}")

        return cls(
            default_distribution=dict(dist),
            exclusion_window=window,
            reset_on_boundary=reset,
            boundary_characters=str(section['boundary_characters']),
        )


@lru_cache(maxsize=1)
def generation_defaults() -> GenerationDefaults:
    """Checked generation defaults from app.yaml."""
    return GenerationDefaults.from_config(load_app_config())


__all__ = [
    "load_app_config",
    "get_setting",
    "generation_defaults",
    "GenerationDefaults",
    "CONFIG_DIR",
    "APP_CONFIG_PATH",
]
