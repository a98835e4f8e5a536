"""Tracker configuration loading."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from journal_tracker.shared.constants import (
    BACKENDS,
    CONFIG_ENV,
    DEFAULT_BATCH_SIZE,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_FIRESTORE_COLLECTION,
    DEFAULT_GITHUB_BRANCH,
    DEFAULT_GITHUB_PATH,
    DEFAULT_JOURNALS_FILE,
    DEFAULT_LIBRARY_ID,
    DEFAULT_REFRESH_INTERVAL,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT_SECONDS,
    FIRESTORE_BATCH_LIMIT,
    PROJECT_ROOT,
)
from journal_tracker.shared.converters import to_int
from journal_tracker.shared.state import load_json


@dataclass(frozen=True)
class GitHubSettings:
    """
    Repository file used by the GitHub contents backend.

    Args:
        token: Personal access token with contents write access.
        owner: Repository owner.
        repo: Repository name.
        path: File path inside the repository.
        branch: Branch to read and commit to.
    """

    token: str | None = None
    owner: str | None = None
    repo: str | None = None
    path: str = DEFAULT_GITHUB_PATH
    branch: str = DEFAULT_GITHUB_BRANCH


@dataclass(frozen=True)
class FirestoreSettings:
    """
    Service account and collection used by the Firestore backend.

    Args:
        project_id: Firebase project identifier.
        client_email: Service account email.
        private_key: Service account private key in PEM form.
        collection: Collection holding one document per ISSN.
    """

    project_id: str | None = None
    client_email: str | None = None
    private_key: str | None = None
    collection: str = DEFAULT_FIRESTORE_COLLECTION


@dataclass(frozen=True)
class TrackerConfig:
    """
    Runtime configuration supplied at startup.

    Args:
        catalog_api_key: Third Iron public API access token.
        library_id: Third Iron library identifier.
        batch_size: ISSNs per catalog request.
        chunk_size: Records per backend write batch.
        backend: Storage backend name.
        data_file: JSON file used by the local backend.
        timeout_seconds: HTTP timeout for catalog and GitHub calls.
        retries: Retry count for transient catalog failures.
        refresh_interval_seconds: Scheduled refresh period, 0 disables it.
        github: GitHub backend settings.
        firestore: Firestore backend settings.
    """

    catalog_api_key: str | None = None
    library_id: str = DEFAULT_LIBRARY_ID
    batch_size: int = DEFAULT_BATCH_SIZE
    chunk_size: int = DEFAULT_CHUNK_SIZE
    backend: str = "local"
    data_file: Path = DEFAULT_JOURNALS_FILE
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    retries: int = DEFAULT_RETRIES
    refresh_interval_seconds: int = DEFAULT_REFRESH_INTERVAL
    github: GitHubSettings = field(default_factory=GitHubSettings)
    firestore: FirestoreSettings = field(default_factory=FirestoreSettings)


def _text(value: Any) -> str | None:
    text = str(value or "").strip()
    return text or None


def _section(payload: dict[str, Any], key: str) -> dict[str, Any]:
    value = payload.get(key)
    return value if isinstance(value, dict) else {}


def _positive(value: Any, default: int, name: str) -> int:
    if value is None or value == "":
        return default
    parsed = to_int(value)
    if parsed is None or parsed <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return parsed


def _non_negative(value: Any, default: int, name: str) -> int:
    if value is None or value == "":
        return default
    parsed = to_int(value)
    if parsed is None or parsed < 0:
        raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
    return parsed


def resolve_path(value: str, base: Path) -> Path:
    """
    Resolve a possibly relative path against a base directory.

    Args:
        value: Path text.
        base: Base directory for relative paths.

    Returns:
        Absolute path.
    """
    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return (base / path).resolve()


def parse_config(
    payload: dict[str, Any], environ: Mapping[str, str] | None = None
) -> TrackerConfig:
    """
    Build configuration from a JSON payload and environment overrides.

    Args:
        payload: Parsed configuration object.
        environ: Environment mapping, defaults to os.environ.

    Returns:
        Validated configuration.

    Raises:
        ValueError: A setting is missing or out of range.
    """
    env = os.environ if environ is None else environ
    catalog = _section(payload, "catalog")
    github_obj = _section(payload, "github")
    firestore_obj = _section(payload, "firestore")

    backend = (
        _text(env.get("JOURNAL_TRACKER_BACKEND") or payload.get("backend")) or "local"
    ).lower()
    if backend not in BACKENDS:
        raise ValueError(
            f"Unknown backend {backend!r}, expected one of {', '.join(BACKENDS)}"
        )

    chunk_size = _positive(payload.get("chunk_size"), DEFAULT_CHUNK_SIZE, "chunk_size")
    if backend == "firestore" and chunk_size > FIRESTORE_BATCH_LIMIT:
        raise ValueError(
            f"chunk_size must not exceed {FIRESTORE_BATCH_LIMIT} for Firestore"
        )

    data_file_value = _text(payload.get("data_file"))
    data_file = (
        resolve_path(data_file_value, PROJECT_ROOT)
        if data_file_value
        else DEFAULT_JOURNALS_FILE
    )

    github = GitHubSettings(
        token=_text(env.get("GITHUB_TOKEN") or github_obj.get("token")),
        owner=_text(github_obj.get("owner")),
        repo=_text(github_obj.get("repo")),
        path=_text(github_obj.get("path")) or DEFAULT_GITHUB_PATH,
        branch=_text(github_obj.get("branch")) or DEFAULT_GITHUB_BRANCH,
    )
    if backend == "github" and not (github.token and github.owner and github.repo):
        raise ValueError("GitHub backend requires token, owner and repo")

    private_key = _text(
        env.get("FIREBASE_PRIVATE_KEY") or firestore_obj.get("private_key")
    )
    firestore = FirestoreSettings(
        project_id=_text(
            env.get("FIREBASE_PROJECT_ID") or firestore_obj.get("project_id")
        ),
        client_email=_text(
            env.get("FIREBASE_CLIENT_EMAIL") or firestore_obj.get("client_email")
        ),
        private_key=private_key.replace("\\n", "\n") if private_key else None,
        collection=_text(firestore_obj.get("collection"))
        or DEFAULT_FIRESTORE_COLLECTION,
    )
    if backend == "firestore" and not firestore.project_id:
        raise ValueError("Firestore backend requires a project id")

    return TrackerConfig(
        catalog_api_key=_text(
            env.get("BROWZINE_API_KEY") or catalog.get("api_key")
        ),
        library_id=_text(env.get("BROWZINE_LIBRARY_ID") or catalog.get("library_id"))
        or DEFAULT_LIBRARY_ID,
        batch_size=_positive(
            catalog.get("batch_size"), DEFAULT_BATCH_SIZE, "batch_size"
        ),
        chunk_size=chunk_size,
        backend=backend,
        data_file=data_file,
        timeout_seconds=_positive(
            catalog.get("timeout_seconds"), DEFAULT_TIMEOUT_SECONDS, "timeout_seconds"
        ),
        retries=_non_negative(catalog.get("retries"), DEFAULT_RETRIES, "retries"),
        refresh_interval_seconds=_non_negative(
            payload.get("refresh_interval_seconds"),
            DEFAULT_REFRESH_INTERVAL,
            "refresh_interval_seconds",
        ),
        github=github,
        firestore=firestore,
    )


def load_config(
    path: Path | None = None, environ: Mapping[str, str] | None = None
) -> TrackerConfig:
    """
    Load configuration from an optional JSON file.

    Args:
        path: Config file path; falls back to the JOURNAL_TRACKER_CONFIG variable.
        environ: Environment mapping, defaults to os.environ.

    Returns:
        Validated configuration.

    Raises:
        FileNotFoundError: An explicit config file does not exist.
        ValueError: The file is not a JSON object or a setting is invalid.
    """
    env = os.environ if environ is None else environ
    if path is None:
        env_path = _text(env.get(CONFIG_ENV))
        path = resolve_path(env_path, PROJECT_ROOT) if env_path else None
    if path is None:
        return parse_config({}, env)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    payload = load_json(path, None)
    if not isinstance(payload, dict):
        raise ValueError(f"Config file must be a JSON object: {path}")
    return parse_config(payload, env)
