"""Repository discovery, commit collection and commit labeling."""

from .collector import collect_commits
from .discovery import discover_repositories, expand_to_git_repos
from .git_log import GitCliLogSource, GitLogError, GitLogSource, GitNotFound, InMemoryLogSource
from .labels import label_from_message
from .models import CommitRecord, DailySummary, LogEntry, ScanRequest, ScanResult
from .paths import normalize_input_path

__all__ = [
    'collect_commits',
    'discover_repositories',
    'expand_to_git_repos',
    'GitCliLogSource',
    'GitLogError',
    'GitLogSource',
    'GitNotFound',
    'InMemoryLogSource',
    'label_from_message',
    'CommitRecord',
    'DailySummary',
    'LogEntry',
    'ScanRequest',
    'ScanResult',
    'normalize_input_path',
]
