"""Refresh coordination for the epoch dashboard."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from epoch_monitor.charts import ChartConfig
from epoch_monitor.clock import utc_now
from epoch_monitor.snapshot import (
    DEFAULT_MIN_REFRESH_SECONDS,
    Snapshot,
    SnapshotClient,
    SnapshotError,
)

from .view import DashboardView, build_view

logger = logging.getLogger(__name__)

REFRESH_JOB_ID = "snapshot_refresh"

RefreshCallback = Callable[[Snapshot | None], None | Awaitable[None]]


@dataclass(frozen=True)
class MonitorConfig:
    """Configuration for epoch monitor."""

    refresh_seconds: float = 60.0
    """Preferred refresh interval. Never shorter than the snapshot's minRefreshSeconds."""

    chart: ChartConfig = field(default_factory=ChartConfig)


class EpochMonitor:
    """
    Holds the latest snapshot and keeps it fresh.

    Every refresh is tagged with an increasing request id. A result (success
    or failure) is applied only if no newer request has been applied yet, so
    a slow older fetch never overwrites a newer one.

    A failed fetch keeps the last good snapshot and exposes the failure as
    last_error; retry() re-issues the same fetch.

    Usage:
        monitor = EpochMonitor(SnapshotClient(config))
        await monitor.refresh()
        view = monitor.view()
    """

    def __init__(self, client: SnapshotClient, config: MonitorConfig | None = None):
        """
        Initialize monitor.

        Args:
            client: Snapshot source
            config: Monitor configuration. Uses defaults if None.
        """
        self._client = client
        self._config = config or MonitorConfig()
        self._snapshot: Snapshot | None = None
        self._last_error: SnapshotError | None = None
        self._last_request_id = 0
        self._applied_request_id = 0
        self._in_flight = 0
        self._scheduler: AsyncIOScheduler | None = None
        self._refresh_interval: float | None = None
        self.query = ""

    @property
    def snapshot(self) -> Snapshot | None:
        """Latest applied snapshot, None until the first successful fetch."""
        return self._snapshot

    @property
    def last_error(self) -> SnapshotError | None:
        """Failure of the latest applied request, None after a success."""
        return self._last_error

    @property
    def is_refreshing(self) -> bool:
        return self._in_flight > 0

    @property
    def refresh_interval(self) -> float:
        """Effective refresh interval in seconds."""
        min_refresh = (
            self._snapshot.progress.min_refresh_seconds
            if self._snapshot is not None
            else DEFAULT_MIN_REFRESH_SECONDS
        )
        return max(self._config.refresh_seconds, min_refresh)

    def _is_stale(self, request_id: int) -> bool:
        return request_id < self._applied_request_id

    async def refresh(self) -> Snapshot | None:
        """
        Fetch a new snapshot and apply it unless a newer one was applied meanwhile.

        Returns:
            The applied snapshot, or None if the fetch failed or was superseded
        """
        self._last_request_id += 1
        request_id = self._last_request_id
        self._in_flight += 1

        try:
            snapshot = await self._client.fetch_with_retry()
        except SnapshotError as e:
            if self._is_stale(request_id):
                logger.info(f"Ignoring failure of superseded request {request_id}: {e}")
                return None
            self._applied_request_id = request_id
            self._last_error = e
            logger.error(f"Snapshot refresh failed: {e}")
            return None
        finally:
            self._in_flight -= 1

        if self._is_stale(request_id):
            logger.info(f"Discarding snapshot from superseded request {request_id}")
            return None

        self._applied_request_id = request_id
        self._snapshot = snapshot
        self._last_error = None
        logger.info(f"Applied {snapshot!r} (request {request_id})")

        self._reschedule_if_needed()
        return snapshot

    async def retry(self) -> Snapshot | None:
        """Re-issue the fetch after a failure."""
        logger.info("Retrying snapshot fetch...")
        return await self.refresh()

    def view(self, now: datetime | None = None) -> DashboardView | None:
        """
        Derive the dashboard view from the latest snapshot.

        Args:
            now: Wall-clock reference. Uses the active clock if None.

        Returns:
            DashboardView, or None if no snapshot was fetched yet
        """
        if self._snapshot is None:
            return None
        return build_view(
            self._snapshot,
            now if now is not None else utc_now(),
            query=self.query,
            chart_config=self._config.chart,
        )

    def start_scheduled(self, on_refresh: RefreshCallback | None = None) -> AsyncIOScheduler:
        """
        Start periodic refreshes using APScheduler.

        The interval follows refresh_interval and is widened when a snapshot
        raises minRefreshSeconds.

        Args:
            on_refresh: Callback called with the applied snapshot (None on
                        failure or when superseded). Can be sync or async.

        Returns:
            The scheduler instance (call stop_scheduled() to stop)
        """
        if self._scheduler is not None:
            return self._scheduler

        async def _scheduled_refresh():
            logger.info("Running scheduled snapshot refresh...")
            snapshot = await self.refresh()
            if on_refresh is not None:
                result = on_refresh(snapshot)
                if asyncio.iscoroutine(result):
                    await result

        self._refresh_interval = self.refresh_interval
        scheduler = AsyncIOScheduler(timezone="UTC")
        scheduler.add_job(
            _scheduled_refresh,
            IntervalTrigger(seconds=self._refresh_interval, timezone="UTC"),
            id=REFRESH_JOB_ID,
            name="Snapshot refresh",
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info(f"Scheduled snapshot refresh every {self._refresh_interval:.0f}s")

        return scheduler

    def stop_scheduled(self) -> None:
        """Stop periodic refreshes. No-op if not started."""
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        self._refresh_interval = None

    def _reschedule_if_needed(self) -> None:
        if self._scheduler is None:
            return
        interval = self.refresh_interval
        if interval == self._refresh_interval:
            return
        self._scheduler.reschedule_job(
            REFRESH_JOB_ID,
            trigger=IntervalTrigger(seconds=interval, timezone="UTC"),
        )
        self._refresh_interval = interval
        logger.info(f"Snapshot refresh interval changed to {interval:.0f}s")
