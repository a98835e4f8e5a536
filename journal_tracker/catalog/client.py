"""Third Iron public catalog client."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

import httpx

from journal_tracker.shared.constants import (
    DEFAULT_LIBRARY_ID,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT_SECONDS,
    RETRY_STATUSES,
    THIRDIRON_PUBLIC_URL,
)
from journal_tracker.shared.converters import chunked

logger = logging.getLogger(__name__)


class CatalogClient:
    """
    Client for ISSN lookups against the Third Iron public API.

    Args:
        api_key: Public API access token.
        library_id: Library ID for requests.
        timeout: HTTP request timeout in seconds.
        retries: Number of retries for transient errors.
        backoff_seconds: Base delay between retries.
        client: Optional preconfigured HTTP client.
    """

    def __init__(
        self,
        api_key: str,
        library_id: str = DEFAULT_LIBRARY_ID,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        retries: int = DEFAULT_RETRIES,
        backoff_seconds: float = 1.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the API client.

        Args:
            api_key: Public API access token.
            library_id: Library ID for requests.
            timeout: HTTP request timeout in seconds.
            retries: Number of retries for transient errors.
            backoff_seconds: Base delay between retries.
            client: Optional preconfigured HTTP client.
        """
        if not api_key:
            raise ValueError("Catalog API key is required")
        self.api_key = api_key
        self.library_id = library_id
        self.timeout = timeout
        self.retries = max(0, retries)
        self.backoff_seconds = backoff_seconds
        self._client = client or httpx.AsyncClient(timeout=self.timeout)

    async def _get_json(self, url: str, params: dict[str, Any]) -> dict[str, Any] | None:
        """
        Perform a GET request and parse JSON.

        Args:
            url: Request URL.
            params: Query parameters without the access token.

        Returns:
            Parsed JSON dictionary or None when the request fails.
        """
        query = {**params, "access_token": self.api_key}
        for attempt in range(self.retries + 1):
            try:
                response = await self._client.get(url, params=query)
            except httpx.RequestError as exc:
                if attempt < self.retries:
                    await asyncio.sleep(self.backoff_seconds * (1 + attempt))
                    continue
                logger.warning("Catalog request to %s failed: %s", url, exc)
                return None

            if response.status_code == 200:
                try:
                    payload = response.json()
                except ValueError:
                    logger.warning("Catalog response from %s is not JSON", url)
                    return None
                return payload if isinstance(payload, dict) else None

            if response.status_code in RETRY_STATUSES and attempt < self.retries:
                await asyncio.sleep(self.backoff_seconds * (1 + attempt))
                continue

            logger.warning("Catalog request returned %s", response.status_code)
            return None

        return None

    async def search_by_issns(self, issns: Sequence[str]) -> list[dict[str, Any]] | None:
        """
        Look up one batch of ISSNs in the library catalog.

        Args:
            issns: ISSNs to search for.

        Returns:
            Journal payloads, or None when the request fails.
        """
        batch = [issn for issn in issns if issn]
        if not batch:
            return []
        url = f"{THIRDIRON_PUBLIC_URL}/libraries/{self.library_id}/search"
        data = await self._get_json(url, {"issns": ",".join(batch)})
        if data is None:
            return None
        items = data.get("data")
        if not isinstance(items, list):
            return None
        return [item for item in items if isinstance(item, dict)]

    async def fetch_batched(
        self, issns: Sequence[str], batch_size: int
    ) -> list[dict[str, Any]]:
        """
        Look up ISSNs in sequential batches, skipping failed batches.

        Args:
            issns: ISSNs to search for.
            batch_size: Maximum ISSNs per request.

        Returns:
            Journal payloads from every successful batch.
        """
        results: list[dict[str, Any]] = []
        failed = 0
        for batch in chunked(list(issns), batch_size):
            items = await self.search_by_issns(batch)
            if items is None:
                failed += 1
                logger.error("Catalog batch [%s] failed", ",".join(batch))
                continue
            results.extend(items)
        if failed:
            logger.warning("%d catalog batch(es) failed", failed)
        return results

    async def aclose(self) -> None:
        """
        Close the underlying HTTP client.

        Returns:
            None.
        """
        await self._client.aclose()
