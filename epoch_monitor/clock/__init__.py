"""
Clock module for live countdowns.

Main components:
- countdown: Remaining-time label for an absolute instant
- WallClock: Reference time refreshed every second while a view is active
"""

from .countdown import (
    ELAPSED_LABEL,
    UNAVAILABLE_LABEL,
    Countdown,
    CountdownState,
    countdown,
    format_duration,
    parse_instant,
)
from .wall_clock import (
    WallClock,
    WallClockConfig,
    reset_clock,
    set_clock,
    utc_now,
)

__all__ = [
    # Countdown
    "Countdown",
    "CountdownState",
    "countdown",
    "format_duration",
    "parse_instant",
    "ELAPSED_LABEL",
    "UNAVAILABLE_LABEL",
    # Wall clock
    "WallClock",
    "WallClockConfig",
    # Clock utilities (for testing)
    "set_clock",
    "reset_clock",
    "utc_now",
]
