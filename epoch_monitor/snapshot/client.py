"""Snapshot source client for the scan endpoint or a local scan output."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from .errors import SnapshotNotFoundError, SnapshotRequestError, SnapshotUpstreamError
from .models import Snapshot
from .normalizer import normalize_snapshot

logger = logging.getLogger(__name__)

META_FILE_SUFFIX = ".meta.json"


@dataclass(frozen=True)
class SnapshotClientConfig:
    """Configuration for snapshot client."""

    url: str = ""
    endpoint: str = "/api/scan"
    # A scan runs synchronously behind the endpoint, so allow it some time
    timeout: float = 300.0
    max_retries: int = 3
    retry_delay_seconds: float = 5.0
    # Local mode: read a scan output file/directory instead of the endpoint
    snapshot_path: str = ""


def unwrap_envelope(body: Any) -> Any:
    """
    Extract the raw snapshot from an endpoint response body.

    The scan endpoint answers {"success": true, "data": {...}} or
    {"success": false, "error": "...", "command_failed": true}. A body
    without a "success" key is taken to be the snapshot itself.

    Raises:
        SnapshotUpstreamError: If the endpoint reports failure
    """
    if not isinstance(body, Mapping) or "success" not in body:
        return body

    if body.get("success") is True:
        return body.get("data")

    error = body.get("error")
    raise SnapshotUpstreamError(
        error if isinstance(error, str) and error else "Scan endpoint reported failure",
        command_failed=bool(body.get("command_failed")),
    )


def _find_meta_file(directory: Path) -> Path:
    candidates = sorted(directory.glob(f"*{META_FILE_SUFFIX}"))
    if not candidates:
        raise SnapshotNotFoundError(f"No {META_FILE_SUFFIX} file in {directory}")
    return candidates[0]


def load_snapshot_file(path: str | Path) -> Snapshot:
    """
    Load and normalize a snapshot from disk.

    Args:
        path: A snapshot JSON file, or a scan output directory holding
              a *.meta.json file (the first one by name is used)

    Returns:
        Normalized Snapshot

    Raises:
        SnapshotNotFoundError: If the file or a meta file is missing
        SnapshotRequestError: If the file cannot be read or decoded
        SnapshotUpstreamError: If the file holds a failure envelope
    """
    file_path = Path(path)
    if not file_path.exists():
        raise SnapshotNotFoundError(f"Snapshot path not found: {file_path}")

    if file_path.is_dir():
        file_path = _find_meta_file(file_path)

    logger.info(f"Loading snapshot from: {file_path}")

    try:
        with open(file_path, encoding="utf-8") as f:
            body = json.load(f)
    except (OSError, ValueError) as e:
        raise SnapshotRequestError(f"Cannot read snapshot {file_path}: {e}") from e

    return normalize_snapshot(unwrap_envelope(body))


class SnapshotClient:
    """
    Client for fetching scan snapshots.

    The endpoint triggers a scan and returns its result. The client only
    transports and normalizes; it never interprets scan scores.
    """

    def __init__(self, config: SnapshotClientConfig):
        """
        Initialize snapshot client.

        Args:
            config: Snapshot client configuration
        """
        self._config = config
        self._base_url = config.url.rstrip("/")
        self._use_local = bool(config.snapshot_path)

        if self._use_local:
            logger.info(f"LOCAL SNAPSHOT: Will load data from {config.snapshot_path}")

    async def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        """
        Make request to scan endpoint.

        Args:
            method: HTTP method
            endpoint: API endpoint (e.g., "/api/scan")
            **kwargs: Additional arguments for httpx request

        Returns:
            Decoded JSON body

        Raises:
            SnapshotRequestError: If request fails or body is not JSON
        """
        url = f"{self._base_url}{endpoint}"

        async with httpx.AsyncClient(timeout=self._config.timeout) as client:
            try:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()

                try:
                    return response.json()
                except ValueError as e:
                    raise SnapshotRequestError(
                        f"Invalid JSON response from scan endpoint: {e}"
                    ) from e

            except httpx.HTTPStatusError as e:
                raise SnapshotRequestError(
                    f"Request failed: {e.response.status_code} - {e.response.text}"
                ) from e
            except httpx.RequestError as e:
                raise SnapshotRequestError(f"Connection error: {e}") from e

    async def fetch_snapshot(self) -> Snapshot:
        """
        Fetch one snapshot.

        Returns:
            Normalized Snapshot

        Raises:
            SnapshotRequestError: If transport fails
            SnapshotUpstreamError: If the scan produced no result
            SnapshotNotFoundError: If local snapshot path is missing
        """
        if self._use_local:
            return load_snapshot_file(self._config.snapshot_path)

        logger.info("Fetching snapshot from scan endpoint...")
        body = await self._request("GET", self._config.endpoint)
        snapshot = normalize_snapshot(unwrap_envelope(body))
        logger.info(f"Fetched {snapshot!r}")
        return snapshot

    async def fetch_with_retry(self) -> Snapshot:
        """
        Fetch snapshot with retry logic.

        Retries on SnapshotRequestError only. Upstream failures are reported
        immediately so the caller can surface a retryable state.

        Raises:
            SnapshotUpstreamError: If the scan produced no result (no retry)
            SnapshotRequestError: If all retries exhausted
        """

        def _log_retry(retry_state):
            exc = retry_state.outcome.exception()
            wait_time = retry_state.next_action.sleep
            logger.warning(
                f"Snapshot fetch failed: {exc}. "
                f"Retrying in {wait_time:.0f}s (attempt {retry_state.attempt_number}/{self._config.max_retries})"
            )

        async for attempt in AsyncRetrying(
            wait=wait_fixed(self._config.retry_delay_seconds),
            stop=stop_after_attempt(self._config.max_retries),
            retry=retry_if_exception_type(SnapshotRequestError),
            before_sleep=_log_retry,
            reraise=True,
        ):
            with attempt:
                return await self.fetch_snapshot()

        # Unreachable with reraise=True
        raise SnapshotRequestError("Snapshot fetch gave up without a result")
