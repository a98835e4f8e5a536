"""Scheduled catalog refresh loop."""

from __future__ import annotations

import asyncio
import logging

from journal_tracker.shared.errors import PersistenceError
from journal_tracker.tracker.service import RefreshOutcome, TrackerService

logger = logging.getLogger(__name__)


async def run_periodic_refresh(
    service: TrackerService,
    interval_seconds: float,
    stop_event: asyncio.Event | None = None,
    run_immediately: bool = True,
) -> list[RefreshOutcome]:
    """
    Run refresh passes at a fixed interval until stopped.

    A pass that fails to persist is logged and the loop keeps its schedule.

    Args:
        service: Tracker service.
        interval_seconds: Delay between passes.
        stop_event: Event that ends the loop when set.
        run_immediately: Run the first pass before the first delay.

    Returns:
        Outcomes of the passes that ran.
    """
    if interval_seconds <= 0:
        raise ValueError("Refresh interval must be positive")
    stop = stop_event or asyncio.Event()
    outcomes: list[RefreshOutcome] = []
    first = True
    while not stop.is_set():
        if not first or run_immediately:
            try:
                outcome = await service.refresh()
            except PersistenceError as exc:
                logger.error("Scheduled refresh failed: %s", exc)
            else:
                outcomes.append(outcome)
                logger.info("Scheduled refresh finished: %s", outcome.status)
        first = False
        try:
            await asyncio.wait_for(stop.wait(), timeout=interval_seconds)
        except TimeoutError:
            continue
    return outcomes
