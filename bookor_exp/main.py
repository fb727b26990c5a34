#!/usr/bin/env python3
from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import pandas as pd
import streamlit as st

from constants import (
    CLEARED_DOT_IMAGE,
    DOT_MANIFEST,
    IMAGE_MANIFEST,
    NEXT_TRIAL_DELAY,
    PANELS,
    RESPONSE_DISPLAY_DELAY,
    RESULT_COLUMNS,
    SIDES,
    TRAINING_EXIT_DELAY,
    TRAINING_GRID_COLUMNS,
    TRAINING_GRID_ROWS,
)
from persistence import ResponseSubmitter, build_transport
from tasks.trial_engine import SessionContext, TrialEngine
from tasks.training_game import TrainingGame, grid_cell
from utils.dev_log import dev_log
from utils.persistence import get_cfg
from utils.preload import preload_images
from utils.session_guard import get_once
from utils.slides import SlideController
from utils.ui_helpers import render_asset, render_flipbook, sanitize_key, sentence_html
from utils.validation import validate_subject_id

BASE_DIR = Path(__file__).resolve().parent

# --------------------------------------------------------------------------------------
# Streamlit page config & global styling
# --------------------------------------------------------------------------------------

st.set_page_config(
    page_title="Books game",
    layout="wide",
    initial_sidebar_state="collapsed",
)

COMPACT_CSS = """
 <style>
   #MainMenu, header, footer, [data-testid="stToolbar"] { display: none !important; }
   [data-testid="stSidebar"], section[data-testid="stSidebar"] { display: none !important; }
   .main .block-container { padding-top: 1rem !important; }
   .stButton > button { font-size: 1.3rem; min-height: 3.2rem; }
   .book-missing {
     display: flex; align-items: center; justify-content: center;
     min-height: 90px; border-radius: 12px;
     background: #f1f3f8; color: #333; font-weight: 600;
   }
 </style>
"""

STAGE_CSS = """
<style>
  html, body, .stApp, [data-testid="stAppViewContainer"] { background-color: black !important; }
  .sentence-text { color: white; font-size: 2rem; text-align: center; margin: 0.5rem 0 1rem; }
  [class*="st-key-book_"] { background: white; border-radius: 12px; }
  [class*="st-key-book_"][class*="_selected"] { outline: 6px solid red; }
</style>
"""

st.markdown(COMPACT_CSS, unsafe_allow_html=True)

INSTRUCTIONS_MD = """
### Welcome to the books game!

In this game the child will see two stacks of picture books and hear a sentence
like *"I have books about apples and pears."* They tap the books that go with
the sentence. There are no right or wrong answers.

Enter the subject ID below to begin. Use `debug` to try the game without
sending any data.
"""


# --------------------------------------------------------------------------------------
# Rendering surface backed by session state
# --------------------------------------------------------------------------------------


class StreamlitSurface:
    """Holds what the stage should show; the render functions below draw it."""

    def __init__(self, slides: SlideController) -> None:
        self.slides = slides
        self.pages: Dict[str, List[Tuple[str, str]]] = {side: [] for side in SIDES}
        self.sentence = ""
        self.region_tags: Dict[str, str] = {side: "" for side in SIDES}
        self.regions_visible = False
        self.selected: Optional[str] = None
        self._callback: Optional[Callable[[str], bool]] = None

    def show_panel(self, name: str) -> None:
        self.slides.show_slide(name)

    def set_flipbook_pages(self, side: str, pages: List[Tuple[str, str]]) -> None:
        self.pages[side] = list(pages)

    def set_sentence(self, text: str) -> None:
        self.sentence = text

    def tag_regions(self, left_condition: str, right_condition: str) -> None:
        self.region_tags = {"left": left_condition, "right": right_condition}
        self.regions_visible = True

    def mark_selected(self, side: str) -> None:
        self.selected = side

    def clear_stage(self) -> None:
        self.selected = None
        self.regions_visible = False

    def on_response(self, callback: Callable[[str], bool]) -> None:
        self._callback = callback

    def activate(self, side: str) -> bool:
        if self._callback is None:
            return False
        return self._callback(side)


# --------------------------------------------------------------------------------------
# Session bootstrap
# --------------------------------------------------------------------------------------


def _surface_debug_line(line: str) -> None:
    st.session_state.debug_lines.append(line)
    st.session_state.debug_flash = line


def ensure_session_state() -> None:
    ss = st.session_state
    if "cfg" not in ss:
        ss.cfg = get_cfg()
    if "slides" not in ss:
        ss.slides = SlideController(PANELS, initial="instructions")
    if "surface" not in ss:
        ss.surface = StreamlitSurface(ss.slides)
    if "session" not in ss:
        ss.session = SessionContext(number=ss.cfg["number"])
    if "debug_lines" not in ss:
        ss.debug_lines = []
    if "debug_flash" not in ss:
        ss.debug_flash = None
    if "submitter" not in ss:
        ss.submitter = ResponseSubmitter(build_transport(ss.cfg), debug_sink=_surface_debug_line)
    if "engine" not in ss:
        ss.engine = TrialEngine(ss.session, ss.surface, ss.submitter)
    if "training" not in ss:
        ss.training = TrainingGame()
    if "training_done" not in ss:
        ss.training_done = False


def show_slide(name: str) -> None:
    st.session_state.surface.show_panel(name)
    st.rerun()


def restart_session() -> None:
    for key in ("slides", "surface", "session", "engine", "training", "training_done", "debug_lines", "debug_flash"):
        st.session_state.pop(key, None)
    st.rerun()


# --------------------------------------------------------------------------------------
# Rendering helpers for each panel
# --------------------------------------------------------------------------------------


def render_instructions() -> None:
    st.title("Books game")
    st.markdown(INSTRUCTIONS_MD)
    subject_id = st.text_input("Subject ID", key="subject_id_input")

    start_slot = st.empty()
    start_slot.button("Please wait...", disabled=True, use_container_width=True, key="start_wait")
    get_once("assets", preload_images, IMAGE_MANIFEST + DOT_MANIFEST, BASE_DIR)
    if not start_slot.button("Start", use_container_width=True, key="start_ready"):
        return
    if not validate_subject_id(subject_id):
        st.warning("Please enter a subject ID")
        return
    try:
        st.session_state.session.init(subject_id.strip())
    except ValueError as exc:
        st.error(f"The trial catalog could not be built: {exc}")
        return
    dev_log("SESSION", f"subject={st.session_state.session.subject_id}")
    show_slide("startGame")


def render_start_game() -> None:
    ss = st.session_state
    if not ss.training_done:
        st.title("Let's play a game!")
        st.markdown("Tap every dot on the screen until they are all gone.")
        if st.button("Play the dot game", use_container_width=True):
            ss.training.start()
            show_slide("training")
        return

    st.title("Great job!")
    st.markdown("Now let's look at some books.")
    if st.button("Start the books game", use_container_width=True):
        ss.engine.begin()
        st.rerun()


def render_training() -> None:
    ss = st.session_state
    game: TrainingGame = ss.training
    assets = get_once("assets", preload_images, IMAGE_MANIFEST + DOT_MANIFEST, BASE_DIR)

    if game.done:
        time.sleep(TRAINING_EXIT_DELAY)
        ss.training_done = True
        ss.slides.hide_then("startGame")
        st.rerun()

    st.caption(f"Dots left: {game.remaining}")
    cells = {grid_cell(marker): marker for marker in game.markers}
    for row in range(TRAINING_GRID_ROWS):
        cols = st.columns(TRAINING_GRID_COLUMNS)
        for col in range(TRAINING_GRID_COLUMNS):
            marker = cells.get((row, col))
            if marker is None:
                continue
            with cols[col]:
                render_asset(CLEARED_DOT_IMAGE if marker.cleared else marker.image, assets, fallback="")
                if st.button(
                    "✕" if marker.cleared else "●",
                    key=sanitize_key(f"training_{marker.id}"),
                    disabled=marker.cleared,
                    use_container_width=True,
                ):
                    game.clear(marker.id)
                    st.rerun()


def render_stage() -> None:
    ss = st.session_state
    surface: StreamlitSurface = ss.surface
    engine: TrialEngine = ss.engine
    assets = get_once("assets", preload_images, IMAGE_MANIFEST + DOT_MANIFEST, BASE_DIR)

    st.markdown(STAGE_CSS, unsafe_allow_html=True)
    st.markdown(sentence_html(surface.sentence), unsafe_allow_html=True)

    if surface.regions_visible:
        left, right = st.columns(2, gap="large")
        for side, column in zip(SIDES, (left, right)):
            with column:
                render_flipbook(side, surface.pages[side], assets, selected=surface.selected == side)
                if st.button(
                    "These books",
                    key=f"choose_{side}_{ss.session.counter}",
                    disabled=surface.selected is not None,
                    use_container_width=True,
                ):
                    surface.activate(side)
                    st.rerun()

    if surface.selected is not None:
        if ss.debug_flash:
            st.code(ss.debug_flash, language="text")
            ss.debug_flash = None
        time.sleep(RESPONSE_DISPLAY_DELAY)
        engine.clear_stage()
        st.rerun()
    elif engine.current is None:
        time.sleep(NEXT_TRIAL_DELAY)
        engine.advance()
        st.rerun()


def render_between_panels() -> None:
    """Nothing is visible; pause on the empty frame, then show the queued panel."""
    time.sleep(TRAINING_EXIT_DELAY)
    if st.session_state.slides.show_pending() is None:
        st.session_state.slides.show_slide("instructions")
    st.rerun()


def render_finished() -> None:
    ss = st.session_state
    st.title("All done!")
    st.markdown("Thank you for playing the books game.")
    if ss.debug_lines:
        st.subheader("Debug results")
        rows = [line.rstrip("\n").split(",") for line in ss.debug_lines]
        st.dataframe(pd.DataFrame(rows, columns=RESULT_COLUMNS), use_container_width=True)
    if st.button("Start over", use_container_width=True):
        restart_session()


# --------------------------------------------------------------------------------------
# App entrypoint
# --------------------------------------------------------------------------------------

try:
    ensure_session_state()
except (RuntimeError, ValueError) as exc:
    st.error(f"The experiment is not configured correctly: {exc}")
    st.stop()

phase = st.session_state.slides.current
if phase == "instructions":
    render_instructions()
elif phase == "startGame":
    render_start_game()
elif phase == "training":
    render_training()
elif phase == "stage":
    render_stage()
elif phase is None:
    render_between_panels()
else:
    render_finished()
