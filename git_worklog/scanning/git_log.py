from __future__ import annotations

import abc
import shutil
import subprocess
import sys
import time
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from git_worklog.config import verbose_enabled
from git_worklog.scanning.models import LogEntry


GIT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# hash, author name, author email, strict ISO committer date, subject
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_PRETTY_FORMAT = "--pretty=format:%H%x1f%an%x1f%ae%x1f%cI%x1f%s%x1e"


class GitNotFound(RuntimeError):
    pass


class GitLogError(RuntimeError):
    pass


class GitLogSource(abc.ABC):
    """Answers "which commits in repository R match this range and author"."""

    @abc.abstractmethod
    def has_commits(self, repo_path: str) -> bool:
        """True when at least one commit is reachable from any ref."""

    @abc.abstractmethod
    def list_commits(
        self,
        repo_path: str,
        since: datetime,
        until: datetime,
        author: Optional[str] = None,
    ) -> List[LogEntry]:
        """Commits from all refs committed within `since..until` (local time, inclusive).

        `LogEntry.timestamp` is the committer date, the same date the range
        is checked against.

        `author` is a case-insensitive substring of the author name or email.
        """


def ensure_git_available() -> str:
    git = shutil.which("git")
    if not git:
        raise GitNotFound("git not found in PATH. Install git to scan local repositories.")
    return git


def run_git(args: List[str], *, cwd: str, timeout: Optional[float] = None) -> str:
    git = ensure_git_available()
    cmd = [git] + args

    verbose = verbose_enabled()
    if verbose:
        print(f"[git] -> {' '.join(cmd)} (cwd={cwd})")
        start = time.perf_counter()

    try:
        proc = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        raise GitLogError(
            f"Timed out after {timeout}s running: {' '.join(cmd)}. "
            "Tip: raise GIT_WORKLOG_GIT_TIMEOUT_SECONDS."
        )
    except OSError as e:
        raise GitLogError(f"Could not run git in {cwd}: {e}")

    if verbose:
        elapsed = time.perf_counter() - start
        print(f"[git] <- exit={proc.returncode} ({elapsed:.2f}s)")
    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()
        raise GitLogError(stderr or f"git exited with code {proc.returncode}")
    return proc.stdout or ""


def parse_log_output(output: str) -> List[LogEntry]:
    entries: List[LogEntry] = []
    for record in output.split(_RECORD_SEP):
        record = record.strip("\r\n")
        if not record.strip():
            continue
        parts = record.split(_FIELD_SEP)
        if len(parts) < 5:
            continue
        commit_hash, author_name, author_email, date_str = (p.strip() for p in parts[:4])
        # Subjects cannot contain the unit separator, but stay tolerant.
        message = _FIELD_SEP.join(parts[4:]).strip()
        try:
            timestamp = datetime.fromisoformat(date_str.replace("Z", "+00:00"))
        except ValueError:
            print(f"Warning: unparseable commit date {date_str!r} for {commit_hash}", file=sys.stderr)
            continue
        entries.append(
            LogEntry(
                hash=commit_hash,
                author_name=author_name,
                author_email=author_email,
                timestamp=timestamp,
                message=message,
            )
        )
    return entries


class GitCliLogSource(GitLogSource):
    """Reads history by running the `git` binary, one call at a time per repo."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def has_commits(self, repo_path: str) -> bool:
        # An unborn repository answers with empty output; anything else that
        # goes wrong is raised so the caller can report the repository.
        out = run_git(["rev-list", "--all", "--max-count=1"], cwd=repo_path, timeout=self.timeout)
        return bool(out.strip())

    def list_commits(
        self,
        repo_path: str,
        since: datetime,
        until: datetime,
        author: Optional[str] = None,
    ) -> List[LogEntry]:
        args = [
            "log",
            "--all",
            "--fixed-strings",
            "--regexp-ignore-case",
            f"--since={since.strftime(GIT_DATE_FORMAT)}",
            f"--until={until.strftime(GIT_DATE_FORMAT)}",
            _PRETTY_FORMAT,
        ]
        if author and author.strip():
            args.append(f"--author={author.strip()}")
        return parse_log_output(run_git(args, cwd=repo_path, timeout=self.timeout))


class InMemoryLogSource(GitLogSource):
    """Serves fixed log entries per repository path; used by tests.

    Paths listed in `failing` raise GitLogError from `list_commits`.
    """

    def __init__(self, commits: Optional[Dict[str, Iterable[LogEntry]]] = None, failing: Iterable[str] = ()):
        self.commits: Dict[str, List[LogEntry]] = {k: list(v) for k, v in (commits or {}).items()}
        self.failing = set(failing)
        self.calls: List[str] = []

    def has_commits(self, repo_path: str) -> bool:
        return repo_path in self.failing or bool(self.commits.get(repo_path))

    def list_commits(
        self,
        repo_path: str,
        since: datetime,
        until: datetime,
        author: Optional[str] = None,
    ) -> List[LogEntry]:
        self.calls.append(repo_path)
        if repo_path in self.failing:
            raise GitLogError(f"fatal: not a git repository: {repo_path}")

        needle = (author or "").strip().lower()
        out: List[LogEntry] = []
        for entry in self.commits.get(repo_path, []):
            local = entry.timestamp.astimezone() if entry.timestamp.tzinfo else entry.timestamp
            local = local.replace(tzinfo=None)
            if local < since or local > until:
                continue
            if needle and needle not in f"{entry.author_name} <{entry.author_email}>".lower():
                continue
            out.append(entry)
        return out
