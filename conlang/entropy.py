#!/usr/bin/env python3
"""
Random Sources
==============
The generator never owns a random number generator; callers pass one in.
This module builds the two kinds callers need:

- a seeded ``random.Random`` for reproducible runs and tests
- ``secrets.SystemRandom`` (OS entropy pool) when no seed is given

Anything exposing ``random() -> float in [0, 1)`` works as a source.
"""

import random
import secrets
from typing import List, Optional, Protocol


class RandomSource(Protocol):
    def random(self) -> float: ...


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Seeded generator when a seed is given, OS entropy otherwise."""
    if seed is None:
        return secrets.SystemRandom()
    return random.Random(seed)


def derive_seeds(rng: random.Random, count: int) -> List[int]:
    """
    Draw `count` 64-bit child seeds from one parent stream.

    Deriving every child seed up front keeps per-item results independent
    of the order in which items are later processed.
    """
    return [rng.getrandbits(64) for _ in range(count)]


__all__ = [
    'RandomSource',
    'make_rng',
    'derive_seeds',
]
