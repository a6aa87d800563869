#!/usr/bin/env python3
"""
Secrets and Tokens
==================
Stateless generators for raw bytes, encoded strings, passwords,
passphrases and numbers. Everything draws from the shared SecureRandom
unless a random source is passed in.
"""

import base64
import string
from typing import Sequence

from ..config import config
from ..errors import EmptyCorpusError, InvalidRangeError
from .entropy import get_random, random_bytes


def generate_bytes(length: int, rng=None) -> bytes:
    """Raw random bytes."""
    return random_bytes(length, rng=rng)


def generate_hex(length: int, uppercase: bool = False, rng=None) -> str:
    """`length` random bytes as a hexadecimal string (2 digits per byte)."""
    text = generate_bytes(length, rng=rng).hex()
    return text.upper() if uppercase else text


def generate_base64(length: int, url_safe: bool = False, rng=None) -> str:
    """`length` random bytes as padded Base64."""
    data = generate_bytes(length, rng=rng)
    encoded = base64.urlsafe_b64encode(data) if url_safe else base64.b64encode(data)
    return encoded.decode('ascii')


def password_alphabet(digits: bool = True, symbols: bool = True) -> str:
    """Characters a password may contain."""
    alphabet = string.ascii_letters
    if digits:
        alphabet += string.digits
    if symbols:
        alphabet += config().password_symbols or string.punctuation
    return alphabet


def generate_password(length: int, digits: bool = True, symbols: bool = True, rng=None) -> str:
    """Password of `length` characters drawn uniformly from the alphabet."""
    rng = rng or get_random()
    alphabet = password_alphabet(digits=digits, symbols=symbols)
    return ''.join(rng.choice(alphabet) for _ in range(length))


def generate_passphrase(words: Sequence[str], length: int, separator: str = ' ', rng=None) -> str:
    """
    Join `length` words chosen uniformly (with replacement) from a wordlist.

    Raises:
        EmptyCorpusError: If the wordlist is empty
    """
    if not words:
        raise EmptyCorpusError("Wordlist is empty")
    rng = rng or get_random()
    return separator.join(rng.choice(words) for _ in range(length))


def generate_digits(length: int, rng=None) -> str:
    """String of `length` random decimal digits (leading zeros allowed)."""
    rng = rng or get_random()
    return ''.join(rng.choice(string.digits) for _ in range(length))


def generate_number(minimum: int, maximum: int, rng=None) -> int:
    """
    Random integer in [minimum, maximum].

    Raises:
        InvalidRangeError: If minimum > maximum
    """
    if minimum > maximum:
        raise InvalidRangeError(
            f"Minimum ({minimum}) is greater than maximum ({maximum})"
        )
    rng = rng or get_random()
    return rng.randint(minimum, maximum)
