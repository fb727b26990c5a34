from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Tuple

from constants import (
    BLANK_IMAGE,
    NEXT_TRIAL_DELAY,
    NUMBER_OF_TRIALS,
    RESPONSE_DISPLAY_DELAY,
    SENTENCE_TEMPLATES,
    SIDES,
    image_path,
)
from tasks.catalog import Catalog, build_catalog
from utils.dev_log import dev_log
from utils.randomization import shuffle

Page = Tuple[str, str]


@dataclass(frozen=True)
class TrialRecord:
    subject_id: str
    trial_number: int
    item1: str
    item2: str
    word_type: str
    display_type: str
    side: str
    response: str


@dataclass(frozen=True)
class Trial:
    index: int
    item1: str
    item2: str
    label1: str
    label2: str
    word_type: str
    display_type: str
    left_condition: str
    right_condition: str
    left_book: List[Page]
    right_book: List[Page]
    sentence: str

    def condition_for(self, side: str) -> str:
        return self.left_condition if side == "left" else self.right_condition


class Surface(Protocol):
    """What the engine needs from whatever is drawing the experiment."""

    def show_panel(self, name: str) -> None: ...

    def set_flipbook_pages(self, side: str, pages: List[Page]) -> None: ...

    def set_sentence(self, text: str) -> None: ...

    def tag_regions(self, left_condition: str, right_condition: str) -> None: ...

    def mark_selected(self, side: str) -> None: ...

    def clear_stage(self) -> None: ...

    def on_response(self, callback: Callable[[str], bool]) -> None: ...


def build_flipbook(
    condition: str, pic1: str, pic2: str, blank: str = BLANK_IMAGE, rng: Optional[random.Random] = None
) -> List[Page]:
    """Four pages for one side; page order shuffled, composition fixed by `condition`."""
    if condition == "and":
        pages = [(pic1, pic2), (pic1, pic2), (pic2, pic1), (pic2, pic1)]
    elif condition == "or":
        pages = [(pic1, blank), (pic1, blank), (pic2, blank), (pic2, blank)]
    elif condition == "noun":
        pages = [(pic1, blank)] * 4
    else:
        raise ValueError(f"[TRIAL] Unknown display condition {condition!r}")
    return list(shuffle(pages, rng))


def render_sentence(connective: str, label1: str, label2: str) -> str:
    try:
        template = SENTENCE_TEMPLATES[connective]
    except KeyError:
        raise ValueError(f"[TRIAL] Unknown connective {connective!r}") from None
    return template.format(label1=label1, label2=label2)


class SessionContext:
    """Per-session state: who is playing, the shuffled catalogs, and progress."""

    def __init__(self, number: int = NUMBER_OF_TRIALS, rng: Optional[random.Random] = None) -> None:
        self.number = number
        self.rng = rng
        self.subject_id: Optional[str] = None
        self.catalog: Optional[Catalog] = None
        self.counter = 0

    def init(self, subject_id: str) -> None:
        if self.subject_id is not None:
            raise RuntimeError("[SESSION] Session already initialized; call reset() first.")
        self.catalog = build_catalog(self.number, rng=self.rng)
        self.subject_id = subject_id
        self.counter = 0

    def reset(self) -> None:
        self.subject_id = None
        self.catalog = None
        self.counter = 0

    @property
    def finished(self) -> bool:
        return self.counter >= self.number


class TrialEngine:
    def __init__(
        self,
        session: SessionContext,
        surface: Surface,
        submit: Callable[[TrialRecord], object],
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.session = session
        self.surface = surface
        self.submit = submit
        self.sleep = sleep
        self.current: Optional[Trial] = None
        self.response_locked = True
        self.last_record: Optional[TrialRecord] = None
        surface.on_response(self.respond)

    def build_trial(self, index: int) -> Trial:
        catalog = self.session.catalog
        if catalog is None:
            raise RuntimeError("[TRIAL] Session has no catalog; call SessionContext.init() first.")
        rng = self.session.rng
        first, second = shuffle(list(catalog.items[index]), rng)
        trial_type = catalog.trial_types[index]
        left_condition, right_condition = trial_type.sides

        pic1 = image_path(first.singular)
        pic2 = image_path(second.singular)
        return Trial(
            index=index,
            item1=first.singular,
            item2=second.singular,
            label1=first.plural,
            label2=second.plural,
            word_type=trial_type.connective,
            display_type=trial_type.display_condition,
            left_condition=left_condition,
            right_condition=right_condition,
            left_book=build_flipbook(left_condition, pic1, pic2, rng=rng),
            right_book=build_flipbook(right_condition, pic1, pic2, rng=rng),
            sentence=render_sentence(trial_type.connective, first.plural, second.plural),
        )

    def run_trial(self, index: int) -> Trial:
        trial = self.build_trial(index)
        self.current = trial
        self.surface.tag_regions(trial.left_condition, trial.right_condition)
        self.surface.set_flipbook_pages("left", trial.left_book)
        self.surface.set_flipbook_pages("right", trial.right_book)
        self.surface.set_sentence(trial.sentence)
        self.surface.show_panel("stage")
        self.response_locked = False
        dev_log(
            "TRIAL",
            f"#{index + 1} items={trial.item1}/{trial.item2} word={trial.word_type} display={trial.display_type}",
        )
        return trial

    def begin(self) -> Trial:
        return self.run_trial(self.session.counter)

    def respond(self, side: str) -> bool:
        """Accept the first response of a trial; every later one is ignored."""
        if self.response_locked or self.current is None:
            return False
        if side not in SIDES:
            raise ValueError(f"[TRIAL] Unknown side {side!r}")
        self.response_locked = True

        trial = self.current
        self.surface.mark_selected(side)
        record = TrialRecord(
            subject_id=self.session.subject_id or "",
            trial_number=self.session.counter + 1,
            item1=trial.item1,
            item2=trial.item2,
            word_type=trial.word_type,
            display_type=trial.display_type,
            side=side,
            response=trial.condition_for(side),
        )
        self.last_record = record
        self.submit(record)
        self.session.counter += 1
        return True

    def clear_stage(self) -> None:
        self.surface.set_sentence("")
        self.surface.clear_stage()
        self.current = None

    def advance(self) -> Optional[Trial]:
        """Start the next trial, or show the end panel when the session is complete."""
        if self.session.finished:
            self.surface.show_panel("finished")
            return None
        return self.run_trial(self.session.counter)

    def complete_response(self) -> Optional[Trial]:
        self.sleep(RESPONSE_DISPLAY_DELAY)
        self.clear_stage()
        self.sleep(NEXT_TRIAL_DELAY)
        return self.advance()
