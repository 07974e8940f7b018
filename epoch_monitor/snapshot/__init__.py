"""
Snapshot module: typed scan snapshots and where they come from.

Main components:
- normalize_snapshot: Turns an untyped scan result into a Snapshot (never raises)
- SnapshotClient: Fetches snapshots from the scan endpoint or a local file

Usage:
    from epoch_monitor.snapshot import SnapshotClient, SnapshotClientConfig

    client = SnapshotClient(SnapshotClientConfig(url="http://localhost:3000"))
    snapshot = await client.fetch_with_retry()
    print(snapshot.grade_leaderboard.top_identities[0].address)
"""

from .client import (
    SnapshotClient,
    SnapshotClientConfig,
    load_snapshot_file,
    unwrap_envelope,
)
from .errors import (
    SnapshotError,
    SnapshotNotFoundError,
    SnapshotRequestError,
    SnapshotUpstreamError,
)
from .models import (
    DEFAULT_MIN_REFRESH_SECONDS,
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
from .normalizer import (
    normalize_flips,
    normalize_identities,
    normalize_leaderboard,
    normalize_points,
    normalize_previous_epochs,
    normalize_progress,
    normalize_series,
    normalize_snapshot,
)

__all__ = [
    # Client
    "SnapshotClient",
    "SnapshotClientConfig",
    "load_snapshot_file",
    "unwrap_envelope",
    # Errors
    "SnapshotError",
    "SnapshotNotFoundError",
    "SnapshotRequestError",
    "SnapshotUpstreamError",
    # Models
    "DEFAULT_MIN_REFRESH_SECONDS",
    "MAX_PREVIOUS_EPOCHS",
    "FlipRow",
    "GradeLeaderboard",
    "IdentityRow",
    "ProgressEpochSeries",
    "ProgressInfo",
    "ProgressPoint",
    "ProgressSeries",
    "ScanCounts",
    "SessionInfo",
    "Snapshot",
    # Normalizer
    "normalize_flips",
    "normalize_identities",
    "normalize_leaderboard",
    "normalize_points",
    "normalize_previous_epochs",
    "normalize_progress",
    "normalize_series",
    "normalize_snapshot",
]
