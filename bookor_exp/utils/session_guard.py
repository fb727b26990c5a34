from __future__ import annotations

from typing import Any, Callable, MutableMapping, Optional

import streamlit as st


def _cache_key(name: str) -> str:
    return f"once_payload_{name}"


def get_once(
    name: str,
    build_fn: Callable[..., Any],
    *args: Any,
    state: Optional[MutableMapping[str, Any]] = None,
    **kwargs: Any,
) -> Any:
    """
    Build a value exactly once per session under `name`.
    Subsequent calls in the same session rerun only return the cached value.
    """
    state = st.session_state if state is None else state
    cache_key = _cache_key(name)
    if cache_key not in state:
        state[cache_key] = build_fn(*args, **kwargs)
    return state[cache_key]


def forget(name: str, state: Optional[MutableMapping[str, Any]] = None) -> None:
    state = st.session_state if state is None else state
    state.pop(_cache_key(name), None)
