#!/usr/bin/env python3
"""
Packaged Settings
=================
Reads randkit/configs/app.yaml, which holds the Markov cache location and
generation limits plus the letter sets used by the password and username
generators.

The file is parsed once per path. Every section randkit reads is checked up
front, so a broken install fails with one clear message instead of a
KeyError deep inside a generator.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

APP_CONFIG_PATH = Path(__file__).resolve().parent / "configs" / "app.yaml"

# Keys each section must define
REQUIRED_KEYS = {
    "markov": ("cache_dir", "cache_hash_length", "max_attempts", "defaults"),
    "password": ("symbols",),
    "username": ("vowels", "consonants"),
}


@lru_cache(maxsize=None)
def load_app_config(path: Path = APP_CONFIG_PATH) -> dict:
    """
    Parse and check an app.yaml file.

    Raises:
        ConfigError: The file is unreadable, not YAML, or lacks a section
            or key listed in REQUIRED_KEYS
    """
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read settings {path}: {e.strerror or e}") from None
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from None

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")

    for section, keys in REQUIRED_KEYS.items():
        values = data.get(section)
        if not isinstance(values, dict):
            raise ConfigError(f"{path}: missing section '{section}'")
        missing = [key for key in keys if key not in values]
        if missing:
            raise ConfigError(f"{path}: '{section}' is missing {', '.join(missing)}")

    if not isinstance(data["markov"]["defaults"], dict):
        raise ConfigError(f"{path}: 'markov.defaults' must be a mapping")
    return data


def get_setting(path: str, default: Any = None, source: Path = APP_CONFIG_PATH) -> Any:
    """Look up a dotted key such as "markov.defaults.order"."""
    current: Any = load_app_config(source)
    for part in path.split('.'):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def expand_cache_dir(value) -> Path:
    """
    Turn a configured cache directory into an absolute path.

    Expands ``~`` and environment variables; relative paths are taken from
    the current working directory.
    """
    if not value:
        raise ConfigError("markov.cache_dir must not be empty")
    expanded = os.path.expandvars(os.path.expanduser(str(value)))
    return Path(expanded).absolute()
