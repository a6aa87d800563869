#!/usr/bin/env python3
"""
Entropy Source
==============
Cryptographically secure randomness for every generator in randkit.

Uses the operating system's CSPRNG:
- os.urandom() for raw bytes
- secrets.SystemRandom() for floats, integers and selections

Generators accept any object exposing the same methods (``random.Random``
works), so tests can inject a seeded source.
"""

import os
import secrets
from typing import Any, List, Sequence, Tuple


class SecureRandom:
    """
    Random source backed by the system entropy pool.

    SystemRandom ignores seeding, so two instances never share a stream.
    """

    def __init__(self):
        self._rng = secrets.SystemRandom()

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self._rng.random()

    def randint(self, a: int, b: int) -> int:
        """Return random integer N such that a <= N <= b."""
        return self._rng.randint(a, b)

    def choice(self, seq: Sequence) -> Any:
        """Return a random element from non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from empty sequence")
        return self._rng.choice(seq)

    def randbytes(self, n: int) -> bytes:
        """Return n random bytes."""
        return os.urandom(n)


def weighted_choice(items: List[Tuple[Any, float]], rng=None) -> Any:
    """
    Choose from items with weights.

    Walks the cumulative weights in the order given, so callers control
    how ties are broken by ordering ``items``.

    Args:
        items: List of (item, weight) tuples, weights >= 0
        rng: Random source exposing ``random()``

    Returns:
        Randomly selected item based on weights
    """
    if not items:
        raise IndexError("Cannot choose from empty sequence")

    rng = rng or _secure_random
    total = sum(w for _, w in items)
    r = rng.random() * total

    cumulative = 0.0
    for item, weight in items:
        cumulative += weight
        if r < cumulative:
            return item

    # Float rounding can leave r == total; the last positive weight wins
    for item, weight in reversed(items):
        if weight > 0:
            return item
    return items[-1][0]


def random_bytes(n: int, rng=None) -> bytes:
    """Draw n bytes from rng (or the OS entropy pool)."""
    rng = rng or _secure_random
    if hasattr(rng, 'randbytes'):
        return rng.randbytes(n)
    return bytes(rng.randint(0, 255) for _ in range(n))


# Global instance
_secure_random = SecureRandom()


def get_random() -> SecureRandom:
    """Get the shared secure random source."""
    return _secure_random
