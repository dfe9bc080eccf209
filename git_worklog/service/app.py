"""
HTTP API for the scan pipeline.

Endpoints:
- POST /api/scan: commit rows, daily summaries and scanned repositories as JSON
- POST /api/export: the same data as an .xlsx workbook
- GET /health
"""

from __future__ import annotations

import asyncio
import sys
import threading
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response

from git_worklog.reporting.excel_export import WORKBOOK_NAME, XLSX_CONTENT_TYPE, workbook_bytes
from git_worklog.scanning.models import ScanResult
from git_worklog.scanning.pipeline import MISSING_FIELDS_MESSAGE, ScanRequestError, parse_scan_request, run_scan


DISCONNECT_POLL_SECONDS = 0.5

app = FastAPI(
    title="Git Work Log",
    description="Scan local git repositories and summarize daily work",
    version="0.1.0",
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _read_payload(request: Request) -> Dict[str, Any]:
    try:
        payload = await request.json()
    except Exception:
        raise ScanRequestError(MISSING_FIELDS_MESSAGE)
    if not isinstance(payload, dict):
        raise ScanRequestError(MISSING_FIELDS_MESSAGE)
    return payload


async def _scan(request: Request) -> ScanResult:
    """Run the blocking scan in a worker thread.

    If the client goes away mid-scan, repositories not yet queried are
    abandoned; nothing is kept.
    """
    scan_request = parse_scan_request(await _read_payload(request))
    cancel = threading.Event()
    task = asyncio.ensure_future(run_in_threadpool(run_scan, scan_request, cancel_event=cancel))
    while True:
        done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
        if done:
            return task.result()
        if not cancel.is_set() and await request.is_disconnected():
            cancel.set()


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/api/scan")
async def scan(request: Request):
    try:
        result = await _scan(request)
    except ScanRequestError as e:
        return _error(400, str(e))
    except Exception as e:
        print(f"Error: scan failed: {e}", file=sys.stderr)
        return _error(500, "Internal error")
    return result.to_dict()


@app.post("/api/export")
async def export(request: Request):
    try:
        result = await _scan(request)
        content = await run_in_threadpool(workbook_bytes, result)
    except ScanRequestError as e:
        return _error(400, str(e))
    except Exception as e:
        print(f"Error: export failed: {e}", file=sys.stderr)
        return _error(500, "Internal error")
    return Response(
        content=content,
        media_type=XLSX_CONTENT_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{WORKBOOK_NAME}"'},
    )
