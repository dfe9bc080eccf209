from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List

from git_worklog.scanning.models import CommitRecord, DailySummary


TOP_LABELS = 3
EMPTY_DAY_MESSAGE = "General work"


def summarize_day(labels: Iterable[str]) -> str:
    """Render the top labels of one day, e.g. "Fix bugs (x2); Refactor code".

    Ranked by count, ties broken by first appearance.
    """
    counts = Counter(labels)
    if not counts:
        return EMPTY_DAY_MESSAGE

    # Counter keeps first-seen order and sorted() is stable.
    ranked = sorted(counts.items(), key=lambda item: -item[1])[:TOP_LABELS]
    parts = [label if n == 1 else f"{label} (x{n})" for label, n in ranked]
    return "; ".join(parts)


def build_daily_summaries(records: Iterable[CommitRecord]) -> List[DailySummary]:
    by_day: Dict[str, List[CommitRecord]] = {}
    for record in records:
        by_day.setdefault(record.date, []).append(record)

    summaries: List[DailySummary] = []
    for day in sorted(by_day, reverse=True):
        items = by_day[day]
        summaries.append(
            DailySummary(
                date=day,
                message=summarize_day(r.label for r in items),
                commits=len(items),
            )
        )
    return summaries
