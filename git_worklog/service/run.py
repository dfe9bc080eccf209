#!/usr/bin/env python3
"""Start the Git Work Log HTTP service."""

import uvicorn
from dotenv import load_dotenv

from git_worklog.config import load_settings


def main():
    load_dotenv()
    settings = load_settings()

    print(f"Listening on http://{settings.host}:{settings.port}")
    uvicorn.run(
        "git_worklog.service.app:app",
        host=settings.host,
        port=settings.port,
        log_level="info" if settings.verbose else "warning",
    )


if __name__ == "__main__":
    main()
