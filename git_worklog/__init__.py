"""Local git work log: scan repositories and summarize daily work.

Package layout:
- git_worklog.scanning: repository discovery, commit collection and labeling
- git_worklog.reporting: daily summaries and spreadsheet output
- git_worklog.service: HTTP API around the scan pipeline
"""

__all__ = [
    "scanning",
    "reporting",
    "service",
]
