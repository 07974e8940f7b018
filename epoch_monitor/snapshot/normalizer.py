"""
Normalization of raw scan snapshots.

The scan output is decoded JSON of unknown quality. Every function here
accepts an arbitrary value and returns typed entities without raising:

- List elements that are not objects, or that miss a mandatory field, are
  dropped (filtering map, not fail-fast validation).
- Numeric fields are coerced; values that are not finite numbers fall back
  to a default (0 for counters).
- Optional fields of the wrong type are treated as absent.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

from .models import (
    ADDRESS_PATTERN,
    DEFAULT_MIN_REFRESH_SECONDS,
    DEFAULT_TOP_FLIPS_LIMIT,
    DEFAULT_TOP_LIMIT,
    MAX_PREVIOUS_EPOCHS,
    FlipRow,
    GradeLeaderboard,
    IdentityRow,
    ProgressEpochSeries,
    ProgressInfo,
    ProgressPoint,
    ProgressSeries,
    ScanCounts,
    SessionInfo,
    Snapshot,
)

logger = logging.getLogger(__name__)


# --- Coercion helpers ---


def _to_number(value: Any, default: float = 0.0) -> float:
    """
    Coerce value to a finite float.

    Booleans count as 0/1 and numeric strings are parsed. Anything else,
    including NaN and infinities, returns default.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return number if math.isfinite(number) else default


def _to_count(value: Any) -> int:
    """Coerce value to a non-negative integer counter."""
    return max(0, int(_to_number(value)))


def _to_positive_int(value: Any) -> int | None:
    """Coerce value to a positive integer, or None if it is not one."""
    number = _to_number(value, default=math.nan)
    if math.isnan(number) or number < 1:
        return None
    return int(number)


def _to_config_number(value: Any) -> float | None:
    """
    Strict variant of _to_number for scalar settings.

    Only finite ints and floats count. Booleans and numeric strings are not
    settings of the expected type and yield None.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if math.isfinite(value) else None


def _to_limit(value: Any, default: int) -> int:
    number = _to_config_number(value)
    if number is None or number < 1:
        return default
    return int(number)


def _unique_rank(value: Any, used: set[int]) -> int:
    """
    Resolve the rank of one row so that no two rows of a list share it.

    A missing, invalid or already taken rank becomes one past the highest
    rank assigned so far.
    """
    rank = _to_positive_int(value)
    if rank is None or rank in used:
        rank = max(used, default=0) + 1
    used.add(rank)
    return rank


def _to_optional_number(value: Any) -> float | None:
    number = _to_number(value, default=math.nan)
    return None if math.isnan(number) else number


def _to_optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _log_dropped(kind: str, total: int, kept: int) -> None:
    if total > kept:
        logger.debug(f"Dropped {total - kept}/{total} malformed {kind}")


# --- Leaderboard rows ---


def normalize_identities(raw: Any, limit: int | None = None) -> tuple[IdentityRow, ...]:
    """
    Normalize a list of identity rows.

    Addresses are trimmed and lowercased; rows whose address is then not
    0x followed by 40 hex characters are dropped. Ranks are unique within
    the result: a missing, non-positive or repeated rank becomes one past
    the highest rank assigned so far.

    Args:
        raw: Candidate list (anything else yields an empty tuple)
        limit: Optional maximum number of rows to keep

    Returns:
        Tuple of IdentityRow in input order
    """
    items = _as_list(raw)
    rows: list[IdentityRow] = []
    used_ranks: set[int] = set()

    for item in items:
        if not isinstance(item, Mapping):
            continue
        address = item.get("address")
        if not isinstance(address, str):
            continue
        address = address.strip().lower()
        if ADDRESS_PATTERN.match(address) is None:
            continue

        rows.append(
            IdentityRow(
                rank=_unique_rank(item.get("rank"), used_ranks),
                address=address,
                total_grade_score=_to_number(item.get("totalGradeScore")),
                flip_count=_to_count(item.get("flipCount")),
                avg_grade_score=_to_number(item.get("avgGradeScore")),
                max_flip_grade_score=_to_number(item.get("maxFlipGradeScore")),
                scan_url=_to_optional_str(item.get("scanUrl")) or "",
            )
        )

    _log_dropped("identity rows", len(items), len(rows))

    if limit is not None:
        return tuple(rows[:limit])
    return tuple(rows)


def normalize_flips(raw: Any, limit: int | None = None) -> tuple[FlipRow, ...]:
    """
    Normalize a list of flip rows.

    Rows without a string cid or author are dropped. Ranks are made unique
    the same way as for identities.

    Args:
        raw: Candidate list
        limit: Optional maximum number of rows to keep

    Returns:
        Tuple of FlipRow in input order
    """
    items = _as_list(raw)
    rows: list[FlipRow] = []
    used_ranks: set[int] = set()

    for item in items:
        if not isinstance(item, Mapping):
            continue
        cid = item.get("cid")
        author = item.get("author")
        if not isinstance(cid, str) or not isinstance(author, str):
            continue

        rows.append(
            FlipRow(
                rank=_unique_rank(item.get("rank"), used_ranks),
                cid=cid,
                author=author.strip().lower(),
                grade_score=_to_number(item.get("gradeScore")),
                status=_to_optional_str(item.get("status")) or "",
                author_rank=_to_positive_int(item.get("authorRank")),
                word1=_to_optional_str(item.get("word1")),
                word2=_to_optional_str(item.get("word2")),
                scan_url=_to_optional_str(item.get("scanUrl")) or "",
                author_scan_url=_to_optional_str(item.get("authorScanUrl")) or "",
            )
        )

    _log_dropped("flip rows", len(items), len(rows))

    if limit is not None:
        return tuple(rows[:limit])
    return tuple(rows)


def _normalize_status_filters(raw: Any) -> tuple[str, ...]:
    # dict.fromkeys keeps first-seen order while removing duplicates
    return tuple(dict.fromkeys(s for s in _as_list(raw) if isinstance(s, str)))


def normalize_leaderboard(raw: Any) -> GradeLeaderboard:
    """
    Normalize the gradeLeaderboard node.

    identityLookup falls back to topIdentities when the source array is
    absent or empty. An empty array means "no override", not "no data":
    the top list is then the search list.
    """
    data = _as_mapping(raw)

    top_limit = _to_limit(data.get("topLimit"), DEFAULT_TOP_LIMIT)
    top_flips_limit = _to_limit(data.get("topFlipsLimit"), DEFAULT_TOP_FLIPS_LIMIT)

    top_identities = normalize_identities(data.get("topIdentities"), limit=top_limit)

    lookup_source = _as_list(data.get("identityLookup"))
    if lookup_source:
        identity_lookup = normalize_identities(lookup_source)
    else:
        identity_lookup = top_identities

    return GradeLeaderboard(
        epoch=_to_positive_int(data.get("epoch")),
        top_limit=top_limit,
        top_flips_limit=top_flips_limit,
        excluded_wrong_words_authors_count=_to_count(
            data.get("excludedWrongWordsAuthorsCount")
        ),
        status_filters=_normalize_status_filters(
            _as_mapping(data.get("filters")).get("status")
        ),
        top_identities=top_identities,
        identity_lookup=identity_lookup,
        top_flips=normalize_flips(data.get("topFlips"), limit=top_flips_limit),
    )


# --- Progress series ---


def normalize_points(raw: Any) -> tuple[ProgressPoint, ...]:
    """
    Normalize progress points.

    A point without a string timestamp is dropped; there is no safe default
    for it. Counters default to 0. Points are not sorted.
    """
    items = _as_list(raw)
    points = tuple(
        ProgressPoint(
            timestamp=item["timestamp"],
            flips_seen=_to_count(item.get("flipsSeen")),
            unique_authors=_to_count(item.get("uniqueAuthors")),
        )
        for item in items
        if isinstance(item, Mapping) and isinstance(item.get("timestamp"), str)
    )
    _log_dropped("progress points", len(items), len(points))
    return points


def normalize_series(raw: Any) -> ProgressEpochSeries | None:
    """Normalize one epoch series. Returns None unless epoch is a positive number."""
    if not isinstance(raw, Mapping):
        return None
    epoch = _to_positive_int(raw.get("epoch"))
    if epoch is None:
        return None
    return ProgressEpochSeries(epoch=epoch, points=normalize_points(raw.get("points")))


def normalize_previous_epochs(raw: Any) -> tuple[ProgressEpochSeries, ...]:
    """
    Normalize trailing epoch series.

    Invalid entries are removed first, then the result is capped to
    MAX_PREVIOUS_EPOCHS. Input order is trusted to be most recent first.
    """
    series = [s for s in map(normalize_series, _as_list(raw)) if s is not None]
    return tuple(series[:MAX_PREVIOUS_EPOCHS])


def normalize_progress(raw: Any) -> ProgressInfo:
    """Normalize the progress node (refresh window and series)."""
    data = _as_mapping(raw)
    series = _as_mapping(data.get("series"))

    min_refresh = _to_config_number(data.get("minRefreshSeconds"))
    if min_refresh is None or min_refresh <= 0:
        min_refresh = DEFAULT_MIN_REFRESH_SECONDS

    cache_used = data.get("cacheUsed")

    return ProgressInfo(
        cache_used=cache_used if isinstance(cache_used, bool) else False,
        min_refresh_seconds=min_refresh,
        seconds_until_next_refresh=_to_optional_number(
            data.get("secondsUntilNextRefresh")
        ),
        next_refresh_at=_to_optional_str(data.get("nextRefreshAt")),
        series=ProgressSeries(
            current_epoch=normalize_series(series.get("currentEpoch")),
            previous_epochs=normalize_previous_epochs(series.get("previousEpochs")),
        ),
    )


# --- Snapshot ---


def normalize_counts(raw: Any) -> ScanCounts:
    data = _as_mapping(raw)
    return ScanCounts(
        authors_over_threshold=_to_count(data.get("authorsOverThreshold")),
        total_extra_flips=_to_count(data.get("totalExtraFlips")),
        flips_seen=_to_count(data.get("flipsSeen")),
        unique_authors=_to_count(data.get("uniqueAuthors")),
    )


def normalize_snapshot(raw: Any) -> Snapshot:
    """
    Normalize a decoded scan result into a Snapshot.

    Never raises. A value that is not an object yields a Snapshot with all
    defaults, which renders as empty leaderboards and empty charts.

    Args:
        raw: Decoded JSON body of one scan

    Returns:
        Normalized Snapshot
    """
    if not isinstance(raw, Mapping):
        logger.warning(
            f"Snapshot is not an object ({type(raw).__name__}), using defaults"
        )
        raw = {}

    session = _as_mapping(raw.get("session"))
    note = raw.get("note")

    snapshot = Snapshot(
        epoch=_to_positive_int(raw.get("epoch")) or 0,
        threshold=_to_number(raw.get("threshold")),
        counts=normalize_counts(raw.get("counts")),
        note=note if isinstance(note, str) else "",
        timestamp=_to_optional_str(raw.get("timestamp")),
        session=SessionInfo(
            next_validation_time=_to_optional_str(session.get("nextValidationTime"))
        ),
        grade_leaderboard=normalize_leaderboard(raw.get("gradeLeaderboard")),
        progress=normalize_progress(raw.get("progress")),
    )

    logger.debug(f"Normalized {snapshot!r}")
    return snapshot
