from __future__ import annotations

import random
from collections import Counter

from utils.randomization import coin_flip, shuffle


def test_shuffle_is_in_place_permutation():
    seq = list(range(20))
    result = shuffle(seq, random.Random(3))
    assert result is seq
    assert sorted(seq) == list(range(20))


def test_shuffle_handles_empty_and_single():
    assert shuffle([], random.Random(1)) == []
    assert shuffle(["only"], random.Random(1)) == ["only"]


def test_shuffle_positions_are_roughly_uniform():
    rng = random.Random(1234)
    runs = 6000
    first_position = Counter()
    last_position = Counter()
    for _ in range(runs):
        seq = shuffle(["a", "b", "c"], rng)
        first_position[seq[0]] += 1
        last_position[seq[-1]] += 1
    for counts in (first_position, last_position):
        for letter in "abc":
            assert abs(counts[letter] / runs - 1 / 3) < 0.03


def test_coin_flip_returns_both_faces():
    rng = random.Random(9)
    flips = [coin_flip(rng) for _ in range(200)]
    assert set(flips) == {0, 1}
