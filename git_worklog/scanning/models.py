from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ScanRequest:
    """Validated scan parameters.

    `start_date <= end_date` is left to the caller; an inverted range simply
    yields no commits.
    """

    paths: Tuple[str, ...]
    start_date: date
    end_date: date
    author: Optional[str] = None
    scan_subdirs: bool = False


@dataclass(frozen=True)
class LogEntry:
    """One commit as reported by a git log source; `timestamp` is the committer date."""

    hash: str
    author_name: str
    author_email: str
    timestamp: datetime
    message: str


@dataclass(frozen=True)
class CommitRecord:
    date: str
    project: str
    path: str
    author_name: str
    author_email: str
    hash: str
    message: str
    label: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class DailySummary:
    date: str
    message: str
    commits: int

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class ScanResult:
    rows: List[CommitRecord] = field(default_factory=list)
    summaries: List[DailySummary] = field(default_factory=list)
    scanned_repos: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "rows": [row.to_dict() for row in self.rows],
            "summaries": [summary.to_dict() for summary in self.summaries],
            "scannedRepos": list(self.scanned_repos),
        }
