from __future__ import annotations

import random
from typing import MutableSequence, Optional, TypeVar

T = TypeVar("T")


def coin_flip(rng: Optional[random.Random] = None) -> int:
    """Return 0 or 1 with equal probability."""
    rng = rng or random
    return rng.randrange(2)


def shuffle(sequence: MutableSequence[T], rng: Optional[random.Random] = None) -> MutableSequence[T]:
    """
    Fisher-Yates shuffle, in place.

    Returns the same sequence so calls can be chained at construction time.
    """
    rng = rng or random
    for i in range(len(sequence) - 1, 0, -1):
        j = rng.randrange(i + 1)
        sequence[i], sequence[j] = sequence[j], sequence[i]
    return sequence
