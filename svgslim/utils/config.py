"""Load and merge engine configuration."""
import copy
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml

DEFAULTS_PATH = Path(__file__).parent.parent / "config" / "defaults.yaml"


@lru_cache(maxsize=1)
def _load_defaults() -> dict:
    with open(DEFAULTS_PATH, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(config: Optional[dict] = None, config_path: Optional[str] = None) -> dict:
    """
    Build the engine configuration.

    Packaged defaults are loaded once and never mutated. A YAML file and then
    a dict are deep-merged on top; later sources win key by key.
    """
    base_config = copy.deepcopy(_load_defaults())

    if config_path:
        with open(config_path, encoding="utf-8") as f:
            file_config = yaml.safe_load(f) or {}
        base_config = deep_merge(base_config, file_config)

    if config:
        base_config = deep_merge(base_config, config)

    return base_config


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts. Override takes precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result
