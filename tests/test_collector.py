#!/usr/bin/env python3

import io
import threading
import unittest
from contextlib import redirect_stderr
from datetime import date, datetime

import git_helpers  # noqa: F401

from git_worklog.scanning.collector import collect_commits, day_bounds, local_day, sort_records
from git_worklog.scanning.git_log import InMemoryLogSource
from git_worklog.scanning.models import LogEntry


def _entry(message: str, when: datetime, *, sha: str = "", name: str = "Test User", email: str = "test@example.com") -> LogEntry:
    return LogEntry(
        hash=sha or "0" * 40,
        author_name=name,
        author_email=email,
        timestamp=when,
        message=message,
    )


JAN_1 = date(2024, 1, 1)
JAN_10 = date(2024, 1, 10)


class TestCollectCommits(unittest.TestCase):
    def setUp(self):
        self.source = InMemoryLogSource(
            {
                "/code/beta": [
                    _entry("update readme", datetime(2024, 1, 5, 18, 0), sha="b1"),
                    _entry("bump deps", datetime(2024, 1, 3, 9, 0), sha="b2"),
                ],
                "/code/alpha": [
                    _entry("fix login crash", datetime(2024, 1, 5, 16, 0), sha="a1"),
                    _entry("add feature flags", datetime(2024, 1, 5, 11, 0), sha="a2"),
                    _entry("fix typo in parser", datetime(2024, 1, 5, 9, 30), sha="a3"),
                ],
            }
        )

    def test_order_is_date_desc_then_project(self):
        rows = collect_commits(["/code/beta", "/code/alpha"], JAN_1, JAN_10, log_source=self.source)
        self.assertEqual(
            [(r.date, r.project, r.hash) for r in rows],
            [
                ("2024-01-05", "alpha", "a1"),
                ("2024-01-05", "alpha", "a2"),
                ("2024-01-05", "alpha", "a3"),
                ("2024-01-05", "beta", "b1"),
                ("2024-01-03", "beta", "b2"),
            ],
        )

    def test_records_carry_repo_and_label(self):
        rows = collect_commits(["/code/alpha"], JAN_1, JAN_10, log_source=self.source)
        first = rows[0]
        self.assertEqual(first.path, "/code/alpha")
        self.assertEqual(first.project, "alpha")
        self.assertEqual(first.label, "Fix bugs")
        self.assertEqual(first.author_email, "test@example.com")
        self.assertEqual(first.message, "fix login crash")

    def test_failing_repository_is_skipped(self):
        source = InMemoryLogSource(
            {"/code/ok": [_entry("fix it", datetime(2024, 1, 2, 12, 0))]},
            failing=["/code/broken"],
        )
        err = io.StringIO()
        with redirect_stderr(err):
            rows = collect_commits(["/code/broken", "/code/ok"], JAN_1, JAN_10, log_source=source)
        self.assertEqual([r.project for r in rows], ["ok"])
        self.assertIn("/code/broken", err.getvalue())

    def test_repository_without_commits_is_not_queried(self):
        source = InMemoryLogSource({"/code/empty": [], "/code/ok": [_entry("x", datetime(2024, 1, 2))]})
        rows = collect_commits(["/code/empty", "/code/ok"], JAN_1, JAN_10, log_source=source)
        self.assertEqual(len(rows), 1)
        self.assertEqual(source.calls, ["/code/ok"])

    def test_end_day_is_inclusive(self):
        source = InMemoryLogSource(
            {
                "/code/app": [
                    _entry("day after", datetime(2024, 1, 11, 0, 0, 0), sha="late"),
                    _entry("last second", datetime(2024, 1, 10, 23, 59, 59), sha="edge"),
                    _entry("first second", datetime(2024, 1, 1, 0, 0, 0), sha="start"),
                    _entry("day before", datetime(2023, 12, 31, 23, 59, 59), sha="early"),
                ]
            }
        )
        rows = collect_commits(["/code/app"], JAN_1, JAN_10, log_source=source)
        self.assertEqual([r.hash for r in rows], ["edge", "start"])

    def test_author_filter_is_case_insensitive_substring(self):
        source = InMemoryLogSource(
            {
                "/code/app": [
                    _entry("one", datetime(2024, 1, 2), sha="1", name="Alice Smith", email="alice@corp.test"),
                    _entry("two", datetime(2024, 1, 2), sha="2", name="Bob", email="bob@corp.test"),
                    _entry("three", datetime(2024, 1, 2), sha="3", name="bob", email="ALICE@home.test"),
                ]
            }
        )
        rows = collect_commits(["/code/app"], JAN_1, JAN_10, "  alice ", log_source=source)
        self.assertEqual([r.hash for r in rows], ["1", "3"])

    def test_parallel_matches_sequential(self):
        repos = [f"/code/r{i}" for i in range(8)]
        source = InMemoryLogSource(
            {
                repo: [_entry(f"fix {repo} {d}", datetime(2024, 1, d, 10, 0), sha=f"{repo}-{d}") for d in (2, 4, 6)]
                for repo in repos
            },
            failing=["/code/r3"],
        )
        with redirect_stderr(io.StringIO()):
            sequential = collect_commits(repos, JAN_1, JAN_10, log_source=source, max_workers=1)
            parallel = collect_commits(repos, JAN_1, JAN_10, log_source=source, max_workers=4)
        self.assertEqual(parallel, sequential)
        self.assertEqual(len(parallel), 21)

    def test_cancelled_collection_queries_nothing(self):
        cancel = threading.Event()
        cancel.set()
        rows = collect_commits(["/code/alpha", "/code/beta"], JAN_1, JAN_10, log_source=self.source, cancel_event=cancel)
        self.assertEqual(rows, [])
        self.assertEqual(self.source.calls, [])


class TestHelpers(unittest.TestCase):
    def test_day_bounds(self):
        since, until = day_bounds(JAN_1, JAN_10)
        self.assertEqual(since, datetime(2024, 1, 1, 0, 0, 0))
        self.assertEqual(until, datetime(2024, 1, 10, 23, 59, 59))

    def test_local_day_of_aware_timestamp(self):
        aware = datetime(2024, 1, 5, 12, 0).astimezone()
        self.assertEqual(local_day(aware), "2024-01-05")
        self.assertEqual(local_day(datetime(2024, 1, 5, 23, 59, 59)), "2024-01-05")

    def test_sort_records_is_stable(self):
        rows = collect_commits(
            ["/code/x"],
            JAN_1,
            JAN_10,
            log_source=InMemoryLogSource(
                {"/code/x": [_entry("b", datetime(2024, 1, 2, 9), sha="2"), _entry("a", datetime(2024, 1, 2, 8), sha="1")]}
            ),
        )
        self.assertEqual([r.hash for r in sort_records(rows)], ["2", "1"])


if __name__ == "__main__":
    unittest.main()
