"""Scan pipeline: request validation, discovery, collection and aggregation.

Both the CLI and the HTTP service go through `parse_scan_request` and
`run_scan`, so they accept the same inputs and return the same shapes.
"""

from __future__ import annotations

import re
import threading
from datetime import date, datetime
from typing import Any, Mapping, Optional

from git_worklog.config import load_settings
from git_worklog.reporting.daily_summary import build_daily_summaries
from git_worklog.scanning.collector import collect_commits
from git_worklog.scanning.discovery import expand_to_git_repos
from git_worklog.scanning.git_log import GitCliLogSource, GitLogSource
from git_worklog.scanning.models import ScanRequest, ScanResult


MISSING_FIELDS_MESSAGE = "paths[], startDate, endDate are required"
INVALID_DATES_MESSAGE = "Invalid dates"

_DATE_PREFIX = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:[T ].*)?$")


class ScanRequestError(ValueError):
    pass


def parse_day(value: Any) -> Optional[date]:
    """Parse `YYYY-MM-DD` (or an ISO timestamp, keeping its date part)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    m = _DATE_PREFIX.match(value.strip())
    if not m:
        return None
    try:
        return datetime.strptime(m.group(1), "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_scan_request(payload: Mapping[str, Any]) -> ScanRequest:
    """Validate a raw request body into a ScanRequest.

    Raises:
        ScanRequestError: `paths` is not a list, or a date is missing/invalid
    """
    if not isinstance(payload, Mapping):
        raise ScanRequestError(MISSING_FIELDS_MESSAGE)

    paths = payload.get("paths")
    start_raw = payload.get("startDate")
    end_raw = payload.get("endDate")
    if not isinstance(paths, (list, tuple)) or not start_raw or not end_raw:
        raise ScanRequestError(MISSING_FIELDS_MESSAGE)

    start_date = parse_day(start_raw)
    end_date = parse_day(end_raw)
    if start_date is None or end_date is None:
        raise ScanRequestError(INVALID_DATES_MESSAGE)

    author = payload.get("author")
    author = author.strip() if isinstance(author, str) else ""

    return ScanRequest(
        paths=tuple(p for p in paths if isinstance(p, str)),
        start_date=start_date,
        end_date=end_date,
        author=author or None,
        scan_subdirs=bool(payload.get("scanSubdirs", False)),
    )


def run_scan(
    request: ScanRequest,
    *,
    log_source: Optional[GitLogSource] = None,
    max_depth: Optional[int] = None,
    max_workers: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> ScanResult:
    settings = load_settings()
    if max_depth is None:
        max_depth = settings.max_depth
    if max_workers is None:
        max_workers = settings.scan_workers
    if log_source is None:
        log_source = GitCliLogSource(timeout=settings.git_timeout_seconds)

    repos = expand_to_git_repos(request.paths, request.scan_subdirs, max_depth)
    rows = collect_commits(
        repos,
        request.start_date,
        request.end_date,
        request.author,
        log_source=log_source,
        max_workers=max_workers,
        cancel_event=cancel_event,
    )
    return ScanResult(rows=rows, summaries=build_daily_summaries(rows), scanned_repos=repos)
