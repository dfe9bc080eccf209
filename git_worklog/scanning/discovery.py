from __future__ import annotations

import os
from typing import Iterable, List

from git_worklog.config import DEFAULT_MAX_DEPTH, verbose_enabled
from git_worklog.scanning.paths import normalize_input_path


# Never descended into, whatever they contain. Matched case-insensitively.
SKIP_DIRS = (
    ".git",
    "node_modules",
    ".next",
    "dist",
    "build",
    "out",
    "vendor",
    ".cache",
)

_SKIP_DIRS_LOWER = frozenset(name.lower() for name in SKIP_DIRS)


def is_skipped_dir(name: str) -> bool:
    return (name or "").lower() in _SKIP_DIRS_LOWER


def is_git_repo_dir(path: str) -> bool:
    """True when `path` has git metadata at its top level.

    `.git` may be a directory or a gitfile (worktrees, submodules).
    """
    return os.path.exists(os.path.join(path, ".git"))


def _canonical(path: str) -> str:
    return os.path.realpath(os.path.abspath(path))


def _walk(directory: str, depth: int, max_depth: int, force_traverse: bool) -> List[str]:
    """Return repositories at or below `directory`.

    A repository found here ends the descent unless `force_traverse` is set,
    which only the scan root gets.
    """
    if depth > max_depth:
        return []

    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except (PermissionError, OSError):
        return []

    found: List[str] = []
    if any(e.name == ".git" for e in entries):
        found.append(directory)
        if not force_traverse:
            return found

    for entry in entries:
        try:
            if not entry.is_dir(follow_symlinks=False):
                continue
        except OSError:
            continue
        if is_skipped_dir(entry.name):
            continue
        found.extend(_walk(entry.path, depth + 1, max_depth, False))

    return found


def discover_repositories(root: str, scan_subdirs: bool, max_depth: int = DEFAULT_MAX_DEPTH) -> List[str]:
    """Find repositories for a single (already normalized) root path.

    Missing roots yield an empty list. The root is reported when it is a
    repository itself; with `scan_subdirs` it is also searched, up to
    `max_depth` levels below it.
    """
    if not root or not os.path.exists(root):
        return []

    root = _canonical(root)
    found: List[str] = []
    if is_git_repo_dir(root):
        found.append(root)

    if scan_subdirs and os.path.isdir(root):
        found.extend(_walk(root, 0, max_depth, True))

    return _dedupe(found)


def expand_to_git_repos(paths: Iterable[str], scan_subdirs: bool, max_depth: int = DEFAULT_MAX_DEPTH) -> List[str]:
    """Normalize raw input paths and merge their repositories.

    The result is deduplicated by canonical path and keeps discovery order.
    """
    verbose = verbose_enabled()
    merged: List[str] = []
    for raw in paths:
        path = normalize_input_path(raw)
        if not path:
            continue
        repos = discover_repositories(path, scan_subdirs, max_depth)
        if verbose:
            print(f"[scan] {path}: {len(repos)} repositories")
        merged.extend(repos)
    return _dedupe(merged)


def _dedupe(paths: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(paths))
