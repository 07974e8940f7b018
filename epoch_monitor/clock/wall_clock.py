"""Ticking wall-clock reference for live countdowns."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

TickListener = Callable[[datetime], None | Awaitable[None]]


def _default_clock() -> datetime:
    """Default clock returning current UTC time."""
    return datetime.now(UTC)


# Clock function for testing - defaults to UTC now
_get_now: Callable[[], datetime] = _default_clock


def set_clock(clock_fn: Callable[[], datetime]) -> None:
    """Set custom clock function for testing."""
    global _get_now
    _get_now = clock_fn


def reset_clock() -> None:
    """Reset clock to default UTC now."""
    global _get_now
    _get_now = _default_clock


def utc_now() -> datetime:
    """Current time from the active clock function."""
    return _get_now()


@dataclass(frozen=True)
class WallClockConfig:
    """Configuration for wall clock ticking."""

    tick_seconds: float = 1.0


class WallClock:
    """
    Wall-clock reference refreshed on a fixed cadence.

    The tick job is owned by an APScheduler AsyncIOScheduler that exists only
    between start() and stop(). start() is idempotent and stop() releases
    the scheduler once; both are safe to call repeatedly.

    Usage:
        async with WallClock() as clock:
            clock.add_listener(lambda now: print(countdown(target, now).label))
            ...
    """

    def __init__(self, config: WallClockConfig | None = None):
        """
        Initialize wall clock.

        Args:
            config: Tick configuration. Uses 1-second ticks if None.
        """
        self._config = config or WallClockConfig()
        self._now = utc_now()
        self._listeners: list[TickListener] = []
        self._scheduler: AsyncIOScheduler | None = None

    @property
    def now(self) -> datetime:
        """Reference time as of the last tick."""
        return self._now

    @property
    def running(self) -> bool:
        return self._scheduler is not None

    def add_listener(self, listener: TickListener) -> None:
        """Register a callback invoked with the new reference time on each tick."""
        self._listeners.append(listener)

    def remove_listener(self, listener: TickListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def tick(self) -> datetime:
        """Advance the reference to the current time and notify listeners."""
        self._now = utc_now()
        for listener in list(self._listeners):
            result = listener(self._now)
            if asyncio.iscoroutine(result):
                await result
        return self._now

    def start(self) -> None:
        """Start ticking. No-op if already running. Requires a running event loop."""
        if self._scheduler is not None:
            return

        scheduler = AsyncIOScheduler(timezone="UTC")
        scheduler.add_job(
            self.tick,
            IntervalTrigger(seconds=self._config.tick_seconds, timezone="UTC"),
            id="wall_clock_tick",
            coalesce=True,
            max_instances=1,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.debug(f"Wall clock started ({self._config.tick_seconds}s ticks)")

    def stop(self) -> None:
        """Stop ticking and release the scheduler. No-op if not running."""
        if self._scheduler is None:
            return

        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.debug("Wall clock stopped")

    async def __aenter__(self) -> WallClock:
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.stop()
