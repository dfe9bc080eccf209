from __future__ import annotations

import os
import sys
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date, datetime, time
from typing import Dict, List, Optional, Sequence

from git_worklog.config import verbose_enabled
from git_worklog.scanning.git_log import GitCliLogSource, GitLogSource
from git_worklog.scanning.labels import label_from_message
from git_worklog.scanning.models import CommitRecord, LogEntry


END_OF_DAY = time(23, 59, 59)


def day_bounds(since_day: date, until_day: date) -> tuple[datetime, datetime]:
    """Inclusive local-time window: since 00:00:00 through until 23:59:59."""
    return datetime.combine(since_day, time.min), datetime.combine(until_day, END_OF_DAY)


def local_day(timestamp: datetime) -> str:
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone()
    return timestamp.strftime("%Y-%m-%d")


def to_commit_record(entry: LogEntry, repo_path: str) -> CommitRecord:
    return CommitRecord(
        date=local_day(entry.timestamp),
        project=os.path.basename(repo_path.rstrip("/\\")) or repo_path,
        path=repo_path,
        author_name=entry.author_name,
        author_email=entry.author_email,
        hash=entry.hash,
        message=entry.message,
        label=label_from_message(entry.message),
    )


def sort_records(records: List[CommitRecord]) -> List[CommitRecord]:
    """Newest day first, then project name; ties keep their log order."""
    ordered = sorted(records, key=lambda r: r.project)
    ordered.sort(key=lambda r: r.date, reverse=True)
    return ordered


def _collect_repo(
    source: GitLogSource,
    repo_path: str,
    since: datetime,
    until: datetime,
    author: Optional[str],
) -> List[CommitRecord]:
    try:
        if not source.has_commits(repo_path):
            if verbose_enabled():
                print(f"  Skipping {repo_path}: no commits yet")
            return []
        entries = source.list_commits(repo_path, since, until, author)
    except Exception as e:
        print(f"Warning: git log failed for {repo_path}: {e}", file=sys.stderr)
        return []

    return [to_commit_record(entry, repo_path) for entry in entries]


def collect_commits(
    repo_paths: Sequence[str],
    since_day: date,
    until_day: date,
    author: Optional[str] = None,
    *,
    log_source: Optional[GitLogSource] = None,
    max_workers: int = 1,
    cancel_event: Optional[threading.Event] = None,
) -> List[CommitRecord]:
    """Collect labeled commit records from every repository.

    Args:
        repo_paths: Repository roots, in the order they should be queried
        since_day: First calendar day (inclusive)
        until_day: Last calendar day (inclusive, through 23:59:59)
        author: Case-insensitive substring of author name/email, or None
        log_source: History backend (defaults to the git CLI)
        max_workers: Repositories queried concurrently; 1 runs inline
        cancel_event: When set, no further repositories are queried

    Returns:
        Records sorted by date descending, then project ascending. A
        repository that fails to answer is reported and left out.
    """
    source = log_source or GitCliLogSource()
    since, until = day_bounds(since_day, until_day)
    author = (author or "").strip() or None
    repo_paths = list(repo_paths)

    per_repo: Dict[int, List[CommitRecord]] = {}

    if max_workers <= 1 or len(repo_paths) <= 1:
        for idx, repo_path in enumerate(repo_paths):
            if cancel_event is not None and cancel_event.is_set():
                break
            per_repo[idx] = _collect_repo(source, repo_path, since, until, author)
    else:
        workers = min(max_workers, len(repo_paths))
        with ThreadPoolExecutor(max_workers=workers) as ex:
            futs = {
                ex.submit(_collect_repo, source, repo_path, since, until, author): idx
                for idx, repo_path in enumerate(repo_paths)
            }
            for fut in as_completed(futs):
                if cancel_event is not None and cancel_event.is_set():
                    for pending in futs:
                        pending.cancel()
                    break
                per_repo[futs[fut]] = fut.result()

    records: List[CommitRecord] = []
    for idx in sorted(per_repo):
        records.extend(per_repo[idx])

    if verbose_enabled():
        print(f"Collected {len(records)} commits from {len(per_repo)}/{len(repo_paths)} repositories")

    return sort_records(records)
