from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from conftest import FakeTransport
from constants import DEFAULT_ENDPOINT, NUMBER_OF_TRIALS, RESULT_COLUMNS
from persistence import (
    DryRunTransport,
    HttpTransport,
    ResponseSubmitter,
    SheetTransport,
    build_result_line,
    build_sheet_row,
    build_transport,
    normalize_for_storage,
)
from tasks.trial_engine import TrialRecord
import utils.persistence as cfg_module
from utils.persistence import get_cfg


def _record(subject_id="S01"):
    return TrialRecord(
        subject_id=subject_id,
        trial_number=3,
        item1="apple",
        item2="pear",
        word_type="and",
        display_type="and/noun",
        side="left",
        response="and",
    )


# ────────────────────────────────────────────────────────────────────────────
# Result lines
# ────────────────────────────────────────────────────────────────────────────


def test_result_line_matches_collector_format():
    assert build_result_line(_record()) == "S01,3,apple,pear,and,and/noun,left,and\n"


def test_sheet_row_lines_up_with_header():
    assert len(build_sheet_row(_record())) == len(RESULT_COLUMNS)


def test_subject_id_cannot_break_the_line():
    line = build_result_line(_record("kid, 7\nB"))
    assert line.count(",") == 7
    assert line.startswith("kid; 7 B,")


@pytest.mark.parametrize(
    "raw, expected",
    [(None, ""), (True, "1"), (4, "4"), ("  ", ""), ("Zoë", "Zoe"), ("a\tb", "a b")],
)
def test_normalize_for_storage(raw, expected):
    assert normalize_for_storage(raw) == expected


# ────────────────────────────────────────────────────────────────────────────
# Submitter
# ────────────────────────────────────────────────────────────────────────────


def test_debug_records_stay_local():
    transport = FakeTransport()
    shown = []
    submitter = ResponseSubmitter(transport, debug_sink=shown.append)
    assert submitter.submit(_record("debug")) is None
    assert shown == ["debug,3,apple,pear,and,and/noun,left,and\n"]
    assert transport.sent == []


def test_records_are_sent_in_the_background():
    transport = FakeTransport()
    with ThreadPoolExecutor(max_workers=1) as pool:
        submitter = ResponseSubmitter(transport, debug_sink=pytest.fail, executor=pool)
        future = submitter(_record())
        future.result(timeout=5)
    assert transport.sent == ["S01,3,apple,pear,and,and/noun,left,and\n"]


def test_send_failure_does_not_reach_the_caller():
    transport = FakeTransport(fail=True)
    with ThreadPoolExecutor(max_workers=1) as pool:
        submitter = ResponseSubmitter(transport, debug_sink=pytest.fail, executor=pool)
        future = submitter.submit(_record())
        assert isinstance(future.exception(timeout=5), ConnectionError)


def test_http_transport_posts_form_field():
    transport = HttpTransport("http://collector.test/save.php", timeout=2.5)
    with patch("persistence.requests.post") as post:
        transport.send("S01,1,a,b,and,and/or,left,and\n")
    post.assert_called_once_with(
        "http://collector.test/save.php",
        data={"postresult_string": "S01,1,a,b,and,and/or,left,and\n"},
        timeout=2.5,
    )


# ────────────────────────────────────────────────────────────────────────────
# Configuration
# ────────────────────────────────────────────────────────────────────────────


def test_cfg_defaults():
    cfg = get_cfg(secrets={}, env={})
    assert cfg["endpoint"] == DEFAULT_ENDPOINT
    assert cfg["transport"] == "http"
    assert cfg["number"] == NUMBER_OF_TRIALS
    assert cfg["worksheet_name"] == "responses"
    assert cfg["dry_run"] is False


def test_cfg_secrets_win_over_env():
    cfg = get_cfg(
        secrets={"submission": {"endpoint": "https://lab.test/collect", "timeout": 3}},
        env={"BOOKOR_ENDPOINT": "https://env.test", "BOOKOR_TRIALS": "12", "DRY_RUN": "true"},
    )
    assert cfg["endpoint"] == "https://lab.test/collect"
    assert cfg["timeout"] == 3.0
    assert cfg["number"] == 12
    assert cfg["dry_run"] is True


@pytest.mark.parametrize(
    "env",
    [{"BOOKOR_TRANSPORT": "carrier-pigeon"}, {"BOOKOR_TRIALS": "many"}, {"BOOKOR_TRIALS": "0"}],
)
def test_cfg_rejects_bad_values(env):
    with pytest.raises(ValueError, match=r"\[CONFIG\]"):
        get_cfg(secrets={}, env=env)


def test_cfg_rejects_bad_credentials_json():
    with pytest.raises(RuntimeError, match="GOOGLE_APPLICATION_CREDENTIALS_JSON"):
        get_cfg(secrets={}, env={"GOOGLE_APPLICATION_CREDENTIALS_JSON": "{not json"})


def test_build_transport_picks_by_config():
    assert isinstance(build_transport(get_cfg(secrets={}, env={"DRY_RUN": "1"})), DryRunTransport)
    http = build_transport(get_cfg(secrets={}, env={"BOOKOR_TIMEOUT": "4"}))
    assert isinstance(http, HttpTransport) and http.timeout == 4.0


def test_sheet_transport_needs_credentials():
    with pytest.raises(RuntimeError, match="not configured"):
        build_transport(get_cfg(secrets={}, env={"BOOKOR_TRANSPORT": "sheets"}))


def test_sheet_transport_appends_split_fields():
    cfg = get_cfg(
        secrets={
            "submission": {"transport": "sheets"},
            "sheets": {"spreadsheet_id": "sheet-123"},
            "gcp_service_account": {"client_email": "x@y"},
        },
        env={},
    )
    transport = build_transport(cfg)
    assert isinstance(transport, SheetTransport)
    with patch("utils.google_sheet.open_worksheet") as open_ws, patch("utils.google_sheet.append_row") as append:
        transport.send("S01,1,a,b,and,and/or,left,and\n")
        transport.send("S01,2,c,d,or,or/noun,right,noun\n")
    open_ws.assert_called_once_with(cfg, header=RESULT_COLUMNS)
    append.assert_any_call(open_ws.return_value, ["S01", "1", "a", "b", "and", "and/or", "left", "and"])
    assert append.call_count == 2


class _Secrets:
    def __init__(self, exc):
        self.exc = exc

    def to_dict(self):
        raise self.exc


def test_missing_secrets_file_falls_back_to_defaults():
    with patch.object(cfg_module.st, "secrets", _Secrets(FileNotFoundError("no secrets.toml"))):
        cfg = get_cfg(env={})
    assert cfg["endpoint"] == DEFAULT_ENDPOINT


def test_broken_secrets_file_is_not_hidden():
    with patch.object(cfg_module.st, "secrets", _Secrets(ValueError("bad toml"))):
        with pytest.raises(ValueError, match="bad toml"):
            get_cfg(env={})
