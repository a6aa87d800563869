#!/usr/bin/env python3
"""
Pronounceable Usernames
=======================
Two model-free strategies:

- simple:  alternate vowels and consonants, starting with either
- complex: concatenate random syllables, open (CV) or closed (CVC)

Simple usernames are always pronounceable but look machine-made; syllabic
ones read more naturally.
"""

from typing import List

from ..config import config
from .entropy import get_random


def _letters():
    cfg = config()
    return cfg.vowels, cfg.consonants


def _finish(chars: List[str], capitalize: bool) -> str:
    if capitalize and chars:
        chars[0] = chars[0].upper()
    return ''.join(chars)


def generate_simple_username(length: int, capitalize: bool = False, rng=None) -> str:
    """
    Generate a username by alternating random vowels and consonants.

    A coin flip decides whether the first letter is a vowel.
    """
    if length <= 0:
        return ''

    rng = rng or get_random()
    vowels, consonants = _letters()

    use_vowel = rng.random() < 0.5
    chars = []
    for _ in range(length):
        chars.append(rng.choice(vowels if use_vowel else consonants))
        use_vowel = not use_vowel

    return _finish(chars, capitalize)


def generate_complex_username(length: int, capitalize: bool = False, rng=None) -> str:
    """
    Generate a username from `length` random syllables.

    Each syllable is open (consonant + vowel) or closed
    (consonant + vowel + consonant) with equal probability, so the result
    has between 2 * length and 3 * length letters.
    """
    if length <= 0:
        return ''

    rng = rng or get_random()
    vowels, consonants = _letters()

    chars = []
    for _ in range(length):
        chars.append(rng.choice(consonants))
        chars.append(rng.choice(vowels))
        if rng.random() < 0.5:
            chars.append(rng.choice(consonants))

    return _finish(chars, capitalize)
