"""Countdown labels derived from absolute instants and a wall-clock reference."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

UNAVAILABLE_LABEL = "unavailable"
ELAPSED_LABEL = "started"


class CountdownState(Enum):
    """Mutually exclusive countdown outcomes."""

    UNAVAILABLE = "unavailable"  # target missing or unparsable
    ELAPSED = "elapsed"  # target reached or passed
    PENDING = "pending"  # target in the future


@dataclass(frozen=True)
class Countdown:
    """Remaining time until an instant, as shown to the user."""

    state: CountdownState
    remaining_seconds: int | None
    label: str

    @property
    def is_pending(self) -> bool:
        return self.state is CountdownState.PENDING


def parse_instant(value: str | datetime | None) -> datetime | None:
    """
    Parse an ISO-8601 instant.

    Accepts a trailing "Z". Naive values are taken as UTC.

    Returns:
        Timezone-aware datetime, or None if value is missing or unparsable
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_duration(seconds: float) -> str:
    """
    Format a duration as "Dd HHh MMm SSs".

    Hours, minutes and seconds are zero-padded; days are not. The duration
    is floored to whole seconds.

    Example:
        >>> format_duration(90)
        '0d 00h 01m 30s'
    """
    total = max(0, math.floor(seconds))
    days, rest = divmod(total, 86_400)
    hours, rest = divmod(rest, 3_600)
    minutes, secs = divmod(rest, 60)
    return f"{days}d {hours:02d}h {minutes:02d}m {secs:02d}s"


def countdown(
    target: str | datetime | None,
    now: datetime,
    elapsed_label: str = ELAPSED_LABEL,
) -> Countdown:
    """
    Derive the countdown to target as seen at now.

    Args:
        target: Absolute instant (ISO-8601 string or datetime)
        now: Current wall-clock reference
        elapsed_label: Label used once the target has been reached

    Returns:
        Countdown in UNAVAILABLE, ELAPSED or PENDING state
    """
    instant = parse_instant(target)
    if instant is None:
        return Countdown(CountdownState.UNAVAILABLE, None, UNAVAILABLE_LABEL)

    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    remaining = (instant - now).total_seconds()
    if remaining <= 0:
        return Countdown(CountdownState.ELAPSED, 0, elapsed_label)

    seconds = math.floor(remaining)
    return Countdown(CountdownState.PENDING, seconds, format_duration(seconds))
