"""CLI entrypoint for API service."""

from __future__ import annotations

import logging
import os

import uvicorn

from journal_tracker.api.app import build_app
from journal_tracker.shared.config import load_config
from journal_tracker.tracker.service import build_service

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = build_app(build_service(load_config()))


def main() -> None:
    """
    Run the FastAPI application with Uvicorn.

    Returns:
        None.
    """
    uvicorn.run(
        "journal_tracker.api.main:app",
        host=os.environ.get("API_HOST", "127.0.0.1"),
        port=int(os.environ.get("API_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
