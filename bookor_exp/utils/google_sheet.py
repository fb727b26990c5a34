from __future__ import annotations

from typing import Any, Dict, List, Optional

import gspread
from google.oauth2.service_account import Credentials
from gspread.utils import rowcol_to_a1

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]


def sheets_ready(cfg: Dict[str, Any]) -> bool:
    """Return True when a sheet identifier and service-account credentials are configured."""
    has_sheet = bool(cfg.get("spreadsheet_id") or cfg.get("spreadsheet_url"))
    return has_sheet and bool(cfg.get("service_account"))


def _client(cfg: Dict[str, Any]) -> gspread.Client:
    info = dict(cfg.get("service_account") or {})
    if not info:
        raise RuntimeError(
            "No Google credentials. On Streamlit Cloud, set `gcp_service_account` in Secrets. "
            "For local dev, set env GOOGLE_APPLICATION_CREDENTIALS_JSON with the full JSON."
        )
    pk = info.get("private_key")
    if isinstance(pk, str) and "\\n" in pk and "BEGIN PRIVATE KEY" in pk:
        info["private_key"] = pk.replace("\\n", "\n")
    creds = Credentials.from_service_account_info(info, scopes=SCOPES)
    return gspread.authorize(creds)


def get_google_sheet(cfg: Dict[str, Any]):
    client = _client(cfg)
    if cfg.get("spreadsheet_id"):
        return client.open_by_key(cfg["spreadsheet_id"])
    if cfg.get("spreadsheet_url"):
        return client.open_by_url(cfg["spreadsheet_url"])
    raise RuntimeError("Missing Google Sheet identifier. Set secrets [sheets] spreadsheet_id or spreadsheet_url.")


def open_worksheet(cfg: Dict[str, Any], header: Optional[List[Any]] = None):
    """Open (or create) the configured worksheet and make sure its first row is `header`."""
    sh = get_google_sheet(cfg)
    worksheet = cfg.get("worksheet_name") or "responses"
    cols = len(header) if header else 1
    try:
        ws = sh.worksheet(worksheet)
    except gspread.exceptions.WorksheetNotFound:
        ws = sh.add_worksheet(title=worksheet, rows=2, cols=cols)
    if header:
        if ws.col_count < cols:
            ws.resize(rows=ws.row_count, cols=cols)
        existing_header = ws.row_values(1)
        normalized_existing = existing_header + [""] * (cols - len(existing_header))
        if normalized_existing[:cols] != list(header):
            ws.update(f"A1:{rowcol_to_a1(1, cols)}", [list(header)])
    return ws


def append_row(ws, row: List[Any]) -> None:
    ws.append_row(row, value_input_option="RAW", insert_data_option="INSERT_ROWS")
