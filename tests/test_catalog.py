from __future__ import annotations

import random
from collections import Counter

import pytest

from constants import ITEM_PAIRS, NUMBER_OF_TRIALS, TRIAL_TYPES, Noun
from tasks.catalog import TrialType, build_catalog


def test_default_catalog_covers_all_trials():
    catalog = build_catalog(NUMBER_OF_TRIALS, rng=random.Random(5))
    assert len(catalog.items) >= NUMBER_OF_TRIALS
    assert len(catalog.trial_types) >= NUMBER_OF_TRIALS
    assert len(catalog) == NUMBER_OF_TRIALS


def test_catalog_is_a_shuffle_of_the_static_lists():
    catalog = build_catalog(NUMBER_OF_TRIALS, rng=random.Random(5))
    assert Counter(catalog.items) == Counter(tuple(pair) for pair in ITEM_PAIRS)
    assert Counter((t.connective, t.display_condition) for t in catalog.trial_types) == Counter(TRIAL_TYPES)


def test_trial_types_are_balanced():
    counts = Counter(TRIAL_TYPES)
    assert len(counts) == 9
    assert set(counts.values()) == {4}


def test_trial_type_splits_sides():
    assert TrialType("noun", "or/noun").sides == ("or", "noun")


def test_short_item_catalog_fails_fast():
    with pytest.raises(ValueError, match="items cannot cover"):
        build_catalog(3, item_pairs=ITEM_PAIRS[:2])


def test_short_trial_type_catalog_fails_fast():
    with pytest.raises(ValueError, match="trial types cannot cover"):
        build_catalog(3, trial_types=TRIAL_TYPES[:2])


@pytest.mark.parametrize(
    "bad",
    [("but", "and/or"), ("and", "and/maybe"), ("and", "and"), ("or", "and/or/noun")],
)
def test_unknown_conditions_are_rejected(bad):
    with pytest.raises(ValueError, match=r"\[CATALOG\]"):
        build_catalog(1, trial_types=[bad])


def test_empty_noun_is_rejected():
    with pytest.raises(ValueError, match="empty noun"):
        build_catalog(1, item_pairs=[(Noun("apple", ""), Noun("pear", "pears"))])
