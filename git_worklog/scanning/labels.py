"""Heuristic work-category labels for commit messages.

Rules are tried in order against the cleaned, lower-cased message and the
first match wins, so a message mentioning both a fix and a feature is a fix.
Keywords match anywhere in the text ("prefix" counts as "fix").
"""

from __future__ import annotations

import re
from typing import Optional, Pattern, Tuple


DEFAULT_LABEL = "Misc work"
FALLBACK_WORDS = 6

LABEL_RULES: Tuple[Tuple[Pattern[str], str], ...] = (
    (re.compile(r"refactor|cleanup|restructure|reorganize|tidy"), "Refactor code"),
    (re.compile(r"fix|hotfix|bug|issue|repair"), "Fix bugs"),
    (re.compile(r"feat|feature|add|implement|introduce"), "Add/implement features"),
    (re.compile(r"docs|readme|documentation|comment"), "Update docs/comments"),
    (re.compile(r"test|spec|unit|e2e|jest|mocha|pytest"), "Add/update tests"),
    (re.compile(r"chore|deps|dependency|bump|upgrade|update"), "Maintain dependencies"),
    (re.compile(r"style|lint|prettier|black|flake8|format"), "Code style & lint"),
    (re.compile(r"merge|rebase"), "Merge/rebase branches"),
)

# Issue keys are upper case by definition, so they are removed before lowering.
_ISSUE_KEY = re.compile(r"\b[A-Z]{2,}-\d+\b")
_HASH_REF = re.compile(r"#[0-9a-f]{6,}")
_BARE_HASH = re.compile(r"\b(?=[0-9a-f]*\d)[0-9a-f]{6,}\b")
_BRACKETS = re.compile(r"[\[\](){}]")
_WHITESPACE = re.compile(r"\s+")


def clean_message(message: Optional[str]) -> str:
    text = _ISSUE_KEY.sub("", message or "")
    text = text.lower()
    text = _HASH_REF.sub("", text)
    text = _BARE_HASH.sub("", text)
    text = _BRACKETS.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def label_from_message(message: Optional[str]) -> str:
    cleaned = clean_message(message)

    for pattern, label in LABEL_RULES:
        if pattern.search(cleaned):
            return label

    words = " ".join(cleaned.split(" ")[:FALLBACK_WORDS])
    if not words:
        return DEFAULT_LABEL
    return words[0].upper() + words[1:]
