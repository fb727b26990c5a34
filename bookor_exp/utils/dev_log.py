from __future__ import annotations

import os


def _is_dev_mode() -> bool:
    """
    Dev-only logging for session QA.
    Enable by setting env `BOOKOR_DEV=1`.
    """
    return str(os.getenv("BOOKOR_DEV", "")).strip().lower() in {"1", "true", "yes", "y", "on"}


def dev_log(tag: str, message: str) -> None:
    if _is_dev_mode():
        print(f"[{tag}] {message}")
