#!/usr/bin/env python3
"""
Configuration Management
========================
Combines app.yaml settings with environment overrides.

Environment variables:
    RANDKIT_CACHE_DIR   Directory for compiled Markov models
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .settings import expand_cache_dir, get_setting


# =============================================================================
# Markov Defaults
# =============================================================================

DEFAULT_MIN_LENGTH = 2
DEFAULT_MAX_LENGTH = 10
DEFAULT_ORDER = 3
DEFAULT_PRIOR = 0.0
DEFAULT_MAX_ATTEMPTS = 1000
DEFAULT_CACHE_HASH_LENGTH = 16


# =============================================================================
# Application Configuration
# =============================================================================

@dataclass
class Config:
    """Application configuration"""
    cache_dir: Path
    cache_hash_length: int = DEFAULT_CACHE_HASH_LENGTH
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    min_length: int = DEFAULT_MIN_LENGTH
    max_length: int = DEFAULT_MAX_LENGTH
    order: int = DEFAULT_ORDER
    prior: float = DEFAULT_PRIOR
    password_symbols: str = ''
    vowels: str = 'aeiouy'
    consonants: str = 'bcdfghjklmnpqrstvwxz'


def get_config(environ: Optional[dict] = None) -> Config:
    """
    Get configuration from app.yaml and the environment.

    Raises:
        ConfigError: app.yaml is missing or lacks a required key
    """
    env = os.environ if environ is None else environ

    markov = get_setting("markov")
    defaults = markov["defaults"]

    cache_dir = env.get('RANDKIT_CACHE_DIR') or markov["cache_dir"]

    return Config(
        cache_dir=expand_cache_dir(cache_dir),
        cache_hash_length=markov["cache_hash_length"],
        max_attempts=markov["max_attempts"],
        min_length=defaults.get("min", DEFAULT_MIN_LENGTH),
        max_length=defaults.get("max", DEFAULT_MAX_LENGTH),
        order=defaults.get("order", DEFAULT_ORDER),
        prior=float(defaults.get("prior", DEFAULT_PRIOR)),
        password_symbols=get_setting("password.symbols", ''),
        vowels=get_setting("username.vowels", 'aeiouy'),
        consonants=get_setting("username.consonants", 'bcdfghjklmnpqrstvwxz'),
    )


# Singleton config
_config = None

def config() -> Config:
    """Get the singleton config instance."""
    global _config
    if _config is None:
        _config = get_config()
    return _config
