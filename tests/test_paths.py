#!/usr/bin/env python3

import unittest

import git_helpers  # noqa: F401  (puts the repo root on sys.path)

from git_worklog.scanning.paths import normalize_input_path


class TestNormalizeInputPath(unittest.TestCase):
    def test_strips_whitespace_and_quotes(self):
        self.assertEqual(normalize_input_path('  "/home/me/code"  '), "/home/me/code")
        self.assertEqual(normalize_input_path("'/srv/repo'"), "/srv/repo")
        self.assertEqual(normalize_input_path(' " /srv/repo " '), "/srv/repo")

    def test_collapses_posix_separators(self):
        self.assertEqual(
            normalize_input_path("/home//me///code/", sep="/", altsep=None),
            "/home/me/code/",
        )

    def test_backslash_is_a_plain_character_on_posix(self):
        self.assertEqual(normalize_input_path("a\\\\b", sep="/", altsep=None), "a\\\\b")

    def test_windows_separators(self):
        self.assertEqual(
            normalize_input_path('"C:\\\\Users\\\\me//code"', sep="\\", altsep="/"),
            "C:\\Users\\me\\code",
        )

    def test_windows_unc_prefix_is_kept(self):
        self.assertEqual(
            normalize_input_path("\\\\server\\\\share\\repo", sep="\\", altsep="/"),
            "\\\\server\\share\\repo",
        )

    def test_never_raises(self):
        self.assertEqual(normalize_input_path(None), "")
        self.assertEqual(normalize_input_path(42), "")
        self.assertEqual(normalize_input_path("   "), "")
        self.assertEqual(normalize_input_path('""'), "")


if __name__ == "__main__":
    unittest.main()
