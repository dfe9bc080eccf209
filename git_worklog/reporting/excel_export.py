"""Two-sheet workbook output for scan results.

Sheets:
- "Commits": one row per commit record
- "Daily Summary": one row per day
"""

from __future__ import annotations

import io
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, List, Optional, Tuple, Union

import pandas as pd
from openpyxl.utils import get_column_letter

from git_worklog.scanning.models import ScanResult


XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
WORKBOOK_NAME = "git-work.xlsx"
RUN_FOLDER_FORMAT = "%Y%m%d_%H%M%S"

COMMITS_SHEET = "Commits"
SUMMARY_SHEET = "Daily Summary"

# (header, record attribute, column width)
COMMIT_COLUMNS: List[Tuple[str, str, int]] = [
    ("Date", "date", 12),
    ("Project", "project", 24),
    ("Path", "path", 40),
    ("Author", "author_name", 20),
    ("Email", "author_email", 30),
    ("Hash", "hash", 12),
    ("Message", "message", 60),
    ("Label", "label", 24),
]

SUMMARY_COLUMNS: List[Tuple[str, str, int]] = [
    ("Date", "date", 12),
    ("Summary", "message", 60),
    ("Commits", "commits", 10),
]


def _frame(items, columns: List[Tuple[str, str, int]]) -> pd.DataFrame:
    rows = [{header: getattr(item, attr) for header, attr, _ in columns} for item in items]
    return pd.DataFrame(rows, columns=[header for header, _, _ in columns])


def commits_frame(result: ScanResult) -> pd.DataFrame:
    return _frame(result.rows, COMMIT_COLUMNS)


def summary_frame(result: ScanResult) -> pd.DataFrame:
    return _frame(result.summaries, SUMMARY_COLUMNS)


def _write_sheet(writer: pd.ExcelWriter, sheet_name: str, df: pd.DataFrame, columns) -> None:
    df.to_excel(writer, sheet_name=sheet_name, index=False)
    ws = writer.sheets[sheet_name]
    for idx, (_, _, width) in enumerate(columns, 1):
        ws.column_dimensions[get_column_letter(idx)].width = width


def write_workbook(result: ScanResult, target: Union[str, Path, BinaryIO]) -> None:
    """Write both sheets; empty results still get header rows."""
    with pd.ExcelWriter(target, engine="openpyxl") as writer:
        _write_sheet(writer, COMMITS_SHEET, commits_frame(result), COMMIT_COLUMNS)
        _write_sheet(writer, SUMMARY_SHEET, summary_frame(result), SUMMARY_COLUMNS)


def workbook_bytes(result: ScanResult) -> bytes:
    buffer = io.BytesIO()
    write_workbook(result, buffer)
    return buffer.getvalue()


def timestamped_workbook_path(base_dir: Union[str, Path], *, now: Optional[datetime] = None) -> Path:
    """Create `<base_dir>/<YYYYMMDD_HHMMSS>/` and return the workbook path in it."""
    folder = Path(base_dir).expanduser() / (now or datetime.now()).strftime(RUN_FOLDER_FORMAT)
    folder.mkdir(parents=True, exist_ok=True)
    return folder.resolve() / WORKBOOK_NAME
