# Shared UI helpers for flip-books and stage chrome.
from __future__ import annotations

import hashlib
import html
import re
from typing import Dict, List, Optional, Tuple

import streamlit as st

from constants import BLANK_IMAGE

_KEY_SANITIZER = re.compile(r"[^0-9a-zA-Z_]+")


def sanitize_key(raw: str) -> str:
    cleaned = _KEY_SANITIZER.sub("_", raw).strip("_")
    if not cleaned:
        cleaned = "widget"
    if cleaned[0].isdigit():
        cleaned = f"_{cleaned}"
    if len(cleaned) > 100:
        digest = hashlib.sha1(raw.encode("utf-8")).hexdigest()[:8]
        cleaned = f"{cleaned[:91]}_{digest}"
    return cleaned


def render_asset(path: str, assets: Dict[str, bytes], *, fallback: Optional[str] = None) -> None:
    """Show a preloaded image, or a text stand-in when the file was not found."""
    data = assets.get(path)
    if data is not None:
        st.image(data, use_container_width=True)
        return
    if path == BLANK_IMAGE:
        st.markdown("&nbsp;", unsafe_allow_html=True)
        return
    label = fallback if fallback is not None else path.rsplit("/", 1)[-1].rsplit(".", 1)[0]
    st.markdown(
        f"<div class='book-missing'>{html.escape(label.replace('_', ' '))}</div>",
        unsafe_allow_html=True,
    )


def render_flipbook(
    side: str,
    pages: List[Tuple[str, str]],
    assets: Dict[str, bytes],
    *,
    selected: bool = False,
) -> None:
    """
    Render one side's four pages, top to bottom.

    Page n fills slots `{side}{n}a` and `{side}{n}b` of the stage layout.
    """
    state = "selected" if selected else "open"
    with st.container(border=True, key=f"book_{side}_{state}"):
        for image_a, image_b in pages:
            cols = st.columns(2)
            with cols[0]:
                render_asset(image_a, assets)
            with cols[1]:
                render_asset(image_b, assets)


def sentence_html(text: str) -> str:
    return f"<p id='sentenceText' class='sentence-text'>{html.escape(text) if text else '&nbsp;'}</p>"
