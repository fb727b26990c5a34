from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from constants import CONNECTIVES, ITEM_PAIRS, SENTENCE_TEMPLATES, TRIAL_TYPES, Noun
from utils.randomization import shuffle


@dataclass(frozen=True)
class TrialType:
    connective: str
    display_condition: str

    @property
    def sides(self) -> Tuple[str, str]:
        left, right = self.display_condition.split("/")
        return left, right


@dataclass
class Catalog:
    items: List[Tuple[Noun, Noun]]
    trial_types: List[TrialType]

    def __len__(self) -> int:
        return min(len(self.items), len(self.trial_types))


def _validate_trial_type(index: int, raw: Sequence[str]) -> TrialType:
    if len(raw) != 2:
        raise ValueError(f"[CATALOG] Trial type #{index} must be (connective, display), got {raw!r}")
    connective, display = raw
    if connective not in CONNECTIVES or connective not in SENTENCE_TEMPLATES:
        raise ValueError(f"[CATALOG] Trial type #{index} has unknown connective {connective!r}")
    sides = str(display).split("/")
    if len(sides) != 2 or any(side not in CONNECTIVES for side in sides):
        raise ValueError(f"[CATALOG] Trial type #{index} has unknown display condition {display!r}")
    return TrialType(connective, display)


def _validate_item(index: int, raw: Sequence[Noun]) -> Tuple[Noun, Noun]:
    if len(raw) != 2 or not all(isinstance(noun, Noun) for noun in raw):
        raise ValueError(f"[CATALOG] Item #{index} must be a pair of nouns, got {raw!r}")
    for noun in raw:
        if not noun.singular or not noun.plural:
            raise ValueError(f"[CATALOG] Item #{index} has an empty noun entry: {noun!r}")
    return raw[0], raw[1]


def build_catalog(
    number: int,
    rng: Optional[random.Random] = None,
    item_pairs: Sequence[Sequence[Noun]] = ITEM_PAIRS,
    trial_types: Sequence[Sequence[str]] = TRIAL_TYPES,
) -> Catalog:
    """
    Validate and shuffle both catalogs for one session.

    The two shuffles are independent; both catalogs must cover `number`
    trials because the engine indexes them with the same counter.
    """
    items = [_validate_item(i, pair) for i, pair in enumerate(item_pairs)]
    types = [_validate_trial_type(i, raw) for i, raw in enumerate(trial_types)]
    if len(items) < number:
        raise ValueError(f"[CATALOG] {len(items)} items cannot cover {number} trials")
    if len(types) < number:
        raise ValueError(f"[CATALOG] {len(types)} trial types cannot cover {number} trials")
    return Catalog(items=list(shuffle(items, rng)), trial_types=list(shuffle(types, rng)))
