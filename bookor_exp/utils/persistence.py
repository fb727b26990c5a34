from __future__ import annotations

import json
import os
from typing import Any, Dict, Mapping, Optional

import streamlit as st

from constants import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT_SEC, NUMBER_OF_TRIALS

TRANSPORTS = {"http", "sheets"}


def _secrets_dict() -> Dict[str, Any]:
    if hasattr(st, "secrets"):
        try:
            return st.secrets.to_dict()
        except (AttributeError, FileNotFoundError):
            pass
    return {}


def _truthy(value: Any) -> bool:
    return str(value or "").strip().lower() in {"1", "true", "yes", "y", "on"}


def get_cfg(
    secrets: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Return normalized experiment configuration with graceful fallbacks."""
    secrets = _secrets_dict() if secrets is None else dict(secrets)
    env = os.environ if env is None else env

    submission = secrets.get("submission", {}) or {}
    experiment = secrets.get("experiment", {}) or {}
    sheets = secrets.get("sheets", {}) or {}
    gsa = dict(secrets.get("gcp_service_account", {}) or {})

    if not gsa and env.get("GOOGLE_APPLICATION_CREDENTIALS_JSON"):
        try:
            gsa = json.loads(env["GOOGLE_APPLICATION_CREDENTIALS_JSON"])
        except json.JSONDecodeError:
            raise RuntimeError("Invalid JSON in GOOGLE_APPLICATION_CREDENTIALS_JSON.")

    transport = str(
        submission.get("transport") or env.get("BOOKOR_TRANSPORT") or "http"
    ).strip().lower()
    if transport not in TRANSPORTS:
        raise ValueError(
            f"[CONFIG] Unknown submission transport {transport!r}; expected one of {sorted(TRANSPORTS)}."
        )

    try:
        timeout = float(submission.get("timeout") or env.get("BOOKOR_TIMEOUT") or DEFAULT_TIMEOUT_SEC)
        number = int(experiment.get("number") or env.get("BOOKOR_TRIALS") or NUMBER_OF_TRIALS)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"[CONFIG] Invalid numeric setting: {exc}") from exc
    if number < 1:
        raise ValueError(f"[CONFIG] Trial count must be positive, got {number}.")

    return {
        "endpoint": submission.get("endpoint") or env.get("BOOKOR_ENDPOINT") or DEFAULT_ENDPOINT,
        "transport": transport,
        "timeout": timeout,
        "number": number,
        "spreadsheet_id": sheets.get("spreadsheet_id") or sheets.get("sheet_id") or env.get("GOOGLE_SHEET_ID"),
        "spreadsheet_url": sheets.get("spreadsheet_url") or sheets.get("url") or env.get("GOOGLE_SHEET_URL"),
        "worksheet_name": sheets.get("worksheet_name") or sheets.get("worksheet") or "responses",
        "service_account": gsa,
        "dry_run": _truthy(env.get("DRY_RUN", "false")),
    }