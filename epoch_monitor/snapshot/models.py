"""Data models for normalized scan snapshots."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-f]{40}$")

DEFAULT_MIN_REFRESH_SECONDS = 30.0
DEFAULT_TOP_LIMIT = 100
DEFAULT_TOP_FLIPS_LIMIT = 100
MAX_PREVIOUS_EPOCHS = 2


@dataclass(frozen=True)
class IdentityRow:
    """One ranked identity on the grade leaderboard."""

    rank: int  # 1 = best
    address: str  # lowercase 0x-prefixed hex
    total_grade_score: float
    flip_count: int
    avg_grade_score: float
    max_flip_grade_score: float
    scan_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary using the wire field names."""
        return {
            "rank": self.rank,
            "address": self.address,
            "totalGradeScore": self.total_grade_score,
            "flipCount": self.flip_count,
            "avgGradeScore": self.avg_grade_score,
            "maxFlipGradeScore": self.max_flip_grade_score,
            "scanUrl": self.scan_url,
        }


@dataclass(frozen=True)
class FlipRow:
    """
    One graded flip on the flip leaderboard.

    author_rank refers to the identity leaderboard by value only; resolve it
    by looking the author address up in GradeLeaderboard.identity_lookup.
    """

    rank: int
    cid: str
    author: str
    grade_score: float
    status: str = ""
    author_rank: int | None = None
    word1: str | None = None
    word2: str | None = None
    scan_url: str = ""
    author_scan_url: str = ""

    @property
    def words(self) -> tuple[str, ...]:
        """Keywords attached to the flip, skipping missing ones."""
        return tuple(w for w in (self.word1, self.word2) if w)


@dataclass(frozen=True)
class GradeLeaderboard:
    """Leaderboards for one epoch, as reported by the scan."""

    epoch: int | None = None
    top_limit: int = DEFAULT_TOP_LIMIT
    top_flips_limit: int = DEFAULT_TOP_FLIPS_LIMIT
    excluded_wrong_words_authors_count: int = 0
    status_filters: tuple[str, ...] = ()
    top_identities: tuple[IdentityRow, ...] = ()
    identity_lookup: tuple[IdentityRow, ...] = ()
    """Full-rank search list. Equals top_identities when the scan sent none."""

    top_flips: tuple[FlipRow, ...] = ()


@dataclass(frozen=True)
class ProgressPoint:
    """One sample of submission counts within an epoch."""

    timestamp: str  # ISO-8601, kept verbatim
    flips_seen: int = 0
    unique_authors: int = 0


@dataclass(frozen=True)
class ProgressEpochSeries:
    """Ordered samples for one epoch. Points are kept in input order."""

    epoch: int
    points: tuple[ProgressPoint, ...] = ()

    def __len__(self) -> int:
        return len(self.points)

    @property
    def latest(self) -> ProgressPoint | None:
        """Last sample of the series, or None if empty."""
        return self.points[-1] if self.points else None


@dataclass(frozen=True)
class ProgressSeries:
    """Current epoch series plus the most recent completed epochs."""

    current_epoch: ProgressEpochSeries | None = None
    previous_epochs: tuple[ProgressEpochSeries, ...] = ()
    """Most recent first, at most MAX_PREVIOUS_EPOCHS entries."""


@dataclass(frozen=True)
class ProgressInfo:
    """Refresh-window metadata and progress series."""

    cache_used: bool = False
    min_refresh_seconds: float = DEFAULT_MIN_REFRESH_SECONDS
    seconds_until_next_refresh: float | None = None
    next_refresh_at: str | None = None
    series: ProgressSeries = field(default_factory=ProgressSeries)


@dataclass(frozen=True)
class ScanCounts:
    """Headline counters for the scanned epoch."""

    authors_over_threshold: int = 0
    total_extra_flips: int = 0
    flips_seen: int = 0
    unique_authors: int = 0


@dataclass(frozen=True)
class SessionInfo:
    """Validation session timing."""

    next_validation_time: str | None = None


@dataclass(frozen=True)
class Snapshot:
    """
    One fully normalized scan result.

    Derived state (charts, lookups, countdowns) is always rebuilt from the
    latest Snapshot; nothing is merged across snapshots.
    """

    epoch: int = 0
    threshold: float = 0.0
    counts: ScanCounts = field(default_factory=ScanCounts)
    note: str = ""
    timestamp: str | None = None
    session: SessionInfo = field(default_factory=SessionInfo)
    grade_leaderboard: GradeLeaderboard = field(default_factory=GradeLeaderboard)
    progress: ProgressInfo = field(default_factory=ProgressInfo)

    def __repr__(self) -> str:
        return (
            f"Snapshot(epoch={self.epoch}, "
            f"{len(self.grade_leaderboard.top_identities)} identities, "
            f"{len(self.grade_leaderboard.top_flips)} flips)"
        )
