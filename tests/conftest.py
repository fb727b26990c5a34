from __future__ import annotations

import random
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from constants import PANELS, SIDES
from utils.slides import SlideController


class IdentityRandom(random.Random):
    """Random whose randrange always picks the top value, so shuffle is a no-op."""

    def randrange(self, start, stop=None, step=1):
        if stop is None:
            return start - 1
        return stop - 1


class FakeSurface:
    """Headless rendering surface that records what the engine asked for."""

    def __init__(self) -> None:
        self.slides = SlideController(PANELS, initial="instructions")
        self.pages: Dict[str, List[Tuple[str, str]]] = {side: [] for side in SIDES}
        self.sentence = ""
        self.tags: Dict[str, str] = {}
        self.selected: Optional[str] = None
        self.cleared = 0
        self.panel_history: List[str] = []
        self.callback: Optional[Callable[[str], bool]] = None

    def show_panel(self, name: str) -> None:
        self.slides.show_slide(name)
        self.panel_history.append(name)

    def set_flipbook_pages(self, side, pages) -> None:
        self.pages[side] = list(pages)

    def set_sentence(self, text: str) -> None:
        self.sentence = text

    def tag_regions(self, left_condition: str, right_condition: str) -> None:
        self.tags = {"left": left_condition, "right": right_condition}

    def mark_selected(self, side: str) -> None:
        self.selected = side

    def clear_stage(self) -> None:
        self.selected = None
        self.cleared += 1

    def on_response(self, callback) -> None:
        self.callback = callback

    def tap(self, side: str) -> bool:
        return self.callback(side)


class FakeTransport:
    def __init__(self, fail: bool = False) -> None:
        self.sent: List[str] = []
        self.fail = fail

    def send(self, line: str) -> None:
        if self.fail:
            raise ConnectionError("collector unreachable")
        self.sent.append(line)


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()
