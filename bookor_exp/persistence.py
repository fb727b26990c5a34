# ASCII-safe result lines and the transports that carry them off the page.
from __future__ import annotations

import unicodedata
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

import requests

from constants import DEBUG_SUBJECT_ID, RESULT_COLUMNS, RESULT_FIELD_NAME
from tasks.trial_engine import TrialRecord
from utils.dev_log import dev_log


def normalize_for_storage(value: Any) -> str:
    """Coerce a field into an ASCII-safe string that cannot break the CSV line."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    trimmed = str(value).strip()
    if not trimmed:
        return ""
    cleaned = trimmed.replace(",", "; ").replace("\n", " ").replace("\r", " ").replace("\t", " ")
    cleaned = " ".join(cleaned.split())
    try:
        cleaned.encode("ascii")
        return cleaned
    except UnicodeEncodeError:
        translit = (
            unicodedata.normalize("NFKD", cleaned)
            .encode("ascii", "ignore")
            .decode("ascii")
        )
        if translit:
            return translit
        return cleaned.encode("unicode_escape").decode("ascii")


def build_sheet_row(record: TrialRecord) -> List[str]:
    """Return list aligned with RESULT_COLUMNS."""
    return [
        normalize_for_storage(value)
        for value in (
            record.subject_id,
            record.trial_number,
            record.item1,
            record.item2,
            record.word_type,
            record.display_type,
            record.side,
            record.response,
        )
    ]


def build_result_line(record: TrialRecord) -> str:
    return ",".join(build_sheet_row(record)) + "\n"


class HttpTransport:
    """POST the line as a single form field to the collector script."""

    def __init__(self, endpoint: str, timeout: float, field: str = RESULT_FIELD_NAME) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self.field = field

    def send(self, line: str) -> None:
        requests.post(self.endpoint, data={self.field: line}, timeout=self.timeout)


class SheetTransport:
    """Append each line as one row of the configured Google worksheet."""

    def __init__(self, cfg: Dict[str, Any]) -> None:
        from utils.google_sheet import sheets_ready

        if not sheets_ready(cfg):
            raise RuntimeError("Google Sheets credentials not configured.")
        self.cfg = cfg
        self._ws = None

    def send(self, line: str) -> None:
        from utils.google_sheet import append_row, open_worksheet

        if self._ws is None:
            self._ws = open_worksheet(self.cfg, header=RESULT_COLUMNS)
        append_row(self._ws, line.rstrip("\n").split(","))


class DryRunTransport:
    def send(self, line: str) -> None:
        dev_log("SUBMIT", f"dry run, not sent: {line.rstrip()}")


def build_transport(cfg: Dict[str, Any]):
    if cfg.get("dry_run"):
        return DryRunTransport()
    if cfg.get("transport") == "sheets":
        return SheetTransport(cfg)
    return HttpTransport(cfg["endpoint"], timeout=cfg["timeout"])


def _log_failure(future: Future) -> None:
    exc = future.exception()
    if exc is not None:
        dev_log("SUBMIT", f"send failed: {exc!r}")


class ResponseSubmitter:
    """
    Fire-and-forget delivery of trial records.

    Records from the debug subject go to `debug_sink` synchronously and never
    reach the transport. Everything else is sent on a background worker; the
    returned future is only useful to tests.
    """

    def __init__(
        self,
        transport,
        debug_sink: Callable[[str], None],
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> None:
        self.transport = transport
        self.debug_sink = debug_sink
        self.executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="bookor-submit")

    def submit(self, record: TrialRecord) -> Optional[Future]:
        line = build_result_line(record)
        if record.subject_id == DEBUG_SUBJECT_ID:
            self.debug_sink(line)
            return None
        future = self.executor.submit(self.transport.send, line)
        future.add_done_callback(_log_failure)
        return future

    def __call__(self, record: TrialRecord) -> Optional[Future]:
        return self.submit(record)
