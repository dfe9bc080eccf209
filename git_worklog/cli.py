#!/usr/bin/env python3
"""
Git Work Log

Scans local git repositories for commits in a date range, labels each commit
by the kind of work it describes and summarizes the work per day.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import List, Optional

import pandas as pd
from dotenv import load_dotenv

from git_worklog.config import load_settings
from git_worklog.reporting.excel_export import (
    WORKBOOK_NAME,
    commits_frame,
    summary_frame,
    timestamped_workbook_path,
    write_workbook,
)
from git_worklog.scanning.pipeline import ScanRequestError, parse_scan_request, run_scan


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='git-worklog',
        description='Summarize the work recorded in local git repositories, day by day.'
    )
    parser.add_argument('paths', nargs='+', help='Repository or folder paths to scan')
    parser.add_argument('--start-date', required=True, help='First day to include (YYYY-MM-DD)')
    parser.add_argument('--end-date', required=True, help='Last day to include (YYYY-MM-DD, whole day)')
    parser.add_argument('--author', default=None, help='Only commits whose author name/email contains this text')
    parser.add_argument('--scan-subdirs', action='store_true', help='Also look for repositories inside the given folders')
    parser.add_argument('--max-depth', type=int, default=None, help='Folder depth for --scan-subdirs (default: 3)')
    parser.add_argument('--workers', type=int, default=None, help='Repositories scanned in parallel (default: CPU count)')
    parser.add_argument('--format', choices=['table', 'json'], default='table', help='Console output format (default: table)')
    parser.add_argument(
        '--xlsx',
        nargs='?',
        const='',
        default=None,
        help=f'Also write a workbook; without a file name writes <output-dir>/<timestamp>/{WORKBOOK_NAME}',
    )
    parser.add_argument('--output-dir', default=None, help='Base directory for timestamped workbooks (default: data_reports)')
    parser.add_argument('--verbose', action='store_true', help='Print git commands and skipped repositories')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        os.environ['GIT_WORKLOG_VERBOSE'] = '1'

    settings = load_settings()

    try:
        request = parse_scan_request({
            'paths': args.paths,
            'startDate': args.start_date,
            'endDate': args.end_date,
            'author': args.author,
            'scanSubdirs': args.scan_subdirs,
        })
    except ScanRequestError as e:
        parser.error(str(e))

    result = run_scan(
        request,
        max_depth=args.max_depth if args.max_depth is not None else settings.max_depth,
        max_workers=args.workers if args.workers else settings.scan_workers,
    )

    if args.format == 'json':
        print(json.dumps(result.to_dict(), indent=2))
    else:
        _print_tables(result)

    if args.xlsx is not None:
        output = args.xlsx or str(timestamped_workbook_path(args.output_dir or settings.reports_dir))
        write_workbook(result, output)
        print(f"Workbook saved to: {output}", file=sys.stderr if args.format == 'json' else sys.stdout)


def _print_tables(result) -> None:
    print("=" * 60)
    print(f"Scanned repositories: {len(result.scanned_repos)}")
    for repo in result.scanned_repos:
        print(f"  {repo}")
    print(f"Commits: {len(result.rows)}")
    print("=" * 60)

    if not result.rows:
        print("No commits found.")
        return

    with pd.option_context('display.max_colwidth', 60, 'display.width', 200):
        print()
        print("Daily Summary")
        print(summary_frame(result).to_string(index=False))
        print()
        print("Commits")
        print(commits_frame(result).drop(columns=['Path', 'Email']).to_string(index=False))


if __name__ == '__main__':
    main()
