"""GitHub contents API backend."""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Sequence
from typing import Any

import httpx

from journal_tracker.reconcile.models import JournalRecord
from journal_tracker.shared.config import GitHubSettings
from journal_tracker.shared.constants import DEFAULT_TIMEOUT_SECONDS, GITHUB_API_URL
from journal_tracker.shared.errors import PersistenceError, StaleRevisionError
from journal_tracker.shared.state import utc_now_iso
from journal_tracker.storage.base import (
    StoreSnapshot,
    WriteResult,
    decode_records,
    encode_records,
)

logger = logging.getLogger(__name__)


class GitHubContentsStore:
    """
    Store the master list as a JSON file committed to a GitHub repository.

    Every write must carry the blob SHA of the snapshot it was derived from,
    so a commit made by someone else between read and write is rejected.
    A write without a SHA only succeeds while the file does not exist yet.

    Args:
        settings: Repository, path, branch, and token.
        timeout: HTTP request timeout in seconds.
        client: Optional preconfigured HTTP client.
    """

    name = "github"

    def __init__(
        self,
        settings: GitHubSettings,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.Client | None = None,
    ) -> None:
        if not (settings.token and settings.owner and settings.repo):
            raise ValueError("GitHub backend requires token, owner and repo")
        self.settings = settings
        self.client = client or httpx.Client(timeout=timeout)

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.settings.token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _repo_url(self, suffix: str) -> str:
        return (
            f"{GITHUB_API_URL}/repos/{self.settings.owner}/{self.settings.repo}/"
            f"{suffix}"
        )

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return self.client.request(method, url, headers=self._headers(), **kwargs)
        except httpx.RequestError as exc:
            raise PersistenceError(f"GitHub request failed: {exc}") from exc

    def _fetch_file(self) -> tuple[bytes, str | None]:
        """
        Fetch raw file bytes and blob SHA.

        Returns:
            File bytes and SHA, or empty bytes and None when the file is missing.
        """
        response = self._request(
            "GET",
            self._repo_url(f"contents/{self.settings.path}"),
            params={"ref": self.settings.branch},
        )
        if response.status_code == 404:
            return b"", None
        if response.status_code != 200:
            raise PersistenceError(
                f"GitHub read failed with status {response.status_code}"
            )
        data = response.json()
        sha = data.get("sha")
        content = data.get("content") or ""
        if data.get("encoding") == "base64" and content:
            return base64.b64decode(content), sha
        if not sha or not data.get("size"):
            return b"", sha

        # Files above 1 MB come back without inline content.
        blob = self._request("GET", self._repo_url(f"git/blobs/{sha}"))
        if blob.status_code != 200:
            raise PersistenceError(
                f"GitHub blob read failed with status {blob.status_code}"
            )
        return base64.b64decode(blob.json().get("content") or ""), sha

    def read_snapshot(self) -> StoreSnapshot:
        """
        Load every stored record together with the file revision.

        Returns:
            Snapshot whose revision is None when the file does not exist yet.

        Raises:
            PersistenceError: The request fails or the file is not valid JSON.
        """
        raw, sha = self._fetch_file()
        if not raw:
            return StoreSnapshot(records=[], revision=sha)
        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise PersistenceError(
                f"{self.settings.path} is not valid JSON: {exc}"
            ) from exc
        return StoreSnapshot(records=decode_records(payload), revision=sha)

    def read_all(self) -> list[JournalRecord]:
        """
        Load every stored record.

        Returns:
            Stored records, empty when the file does not exist yet.
        """
        return self.read_snapshot().records

    def write_all(
        self, records: Sequence[JournalRecord], expected_revision: str | None = None
    ) -> WriteResult:
        """
        Commit the full master list on top of the given revision.

        Args:
            records: Full master list.
            expected_revision: Blob SHA of the snapshot the list was derived
                from, or None to create a file that must not exist yet.

        Returns:
            Write result carrying the new blob SHA.

        Raises:
            StaleRevisionError: The file changed since the snapshot was read.
            PersistenceError: The commit fails for another reason.
        """
        text = json.dumps(encode_records(records), ensure_ascii=False, indent=2)
        body: dict[str, Any] = {
            "message": f"Update journals.json ({utc_now_iso()})",
            "content": base64.b64encode(text.encode("utf-8")).decode("ascii"),
            "branch": self.settings.branch,
        }
        if expected_revision:
            body["sha"] = expected_revision

        response = self._request(
            "PUT", self._repo_url(f"contents/{self.settings.path}"), json=body
        )
        if response.status_code in {409, 422}:
            raise StaleRevisionError(
                f"GitHub rejected the write for {self.settings.path}: "
                "file changed since it was read"
            )
        if response.status_code not in {200, 201}:
            raise PersistenceError(
                f"GitHub write failed with status {response.status_code}"
            )
        content = response.json().get("content") or {}
        logger.info(
            "Committed %d journals to %s/%s:%s",
            len(records),
            self.settings.owner,
            self.settings.repo,
            self.settings.path,
        )
        return WriteResult(count=len(records), revision=content.get("sha"))

    def close(self) -> None:
        """
        Close HTTP resources.

        Returns:
            None.
        """
        self.client.close()
