"""Pure derivation of the dashboard view from a snapshot and the current time."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from epoch_monitor.charts import (
    ChartConfig,
    ChartGeometry,
    build_chart,
    flips_seen,
    select_series,
    unique_authors,
)
from epoch_monitor.clock import Countdown, countdown
from epoch_monitor.lookup import LookupResult, lookup_identity, lookup_source
from epoch_monitor.snapshot.models import FlipRow, IdentityRow, Snapshot

REFRESH_AVAILABLE_LABEL = "refresh available"


@dataclass(frozen=True)
class DashboardView:
    """
    Everything the dashboard shows for one snapshot at one instant.

    A new snapshot or a clock tick produces a new view; views are never
    patched in place.
    """

    snapshot: Snapshot
    now: datetime
    flips_chart: ChartGeometry
    authors_chart: ChartGeometry
    lookup: LookupResult
    next_validation: Countdown
    next_refresh: Countdown

    @property
    def top_identities(self) -> tuple[IdentityRow, ...]:
        return self.snapshot.grade_leaderboard.top_identities

    @property
    def top_flips(self) -> tuple[FlipRow, ...]:
        return self.snapshot.grade_leaderboard.top_flips

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        snapshot = self.snapshot
        counts = snapshot.counts

        def _chart(chart: ChartGeometry) -> dict[str, Any]:
            return {
                "currentEpoch": chart.current_epoch,
                "currentPath": chart.current_path,
                "trailing": [
                    {"epoch": line.epoch, "path": line.path, "opacity": line.opacity}
                    for line in chart.trailing
                ],
                "maxValue": chart.max_value,
                "maxElapsed": chart.max_elapsed,
                "latestValue": chart.latest_value,
            }

        return {
            "epoch": snapshot.epoch,
            "threshold": snapshot.threshold,
            "timestamp": snapshot.timestamp,
            "note": snapshot.note,
            "counts": {
                "authorsOverThreshold": counts.authors_over_threshold,
                "totalExtraFlips": counts.total_extra_flips,
                "flipsSeen": counts.flips_seen,
                "uniqueAuthors": counts.unique_authors,
            },
            "nextValidation": self.next_validation.label,
            "nextRefresh": self.next_refresh.label,
            "lookup": {
                "state": self.lookup.state.value,
                "query": self.lookup.query,
                "identity": self.lookup.identity.to_dict() if self.lookup.identity else None,
            },
            "topIdentities": [row.to_dict() for row in self.top_identities],
            "charts": {
                "flipsSeen": _chart(self.flips_chart),
                "uniqueAuthors": _chart(self.authors_chart),
            },
        }


def build_view(
    snapshot: Snapshot,
    now: datetime,
    query: str = "",
    chart_config: ChartConfig | None = None,
) -> DashboardView:
    """
    Build the dashboard view.

    Args:
        snapshot: Latest normalized snapshot
        now: Wall-clock reference
        query: Raw address search input
        chart_config: Chart size and opacities. Uses defaults if None.

    Returns:
        DashboardView
    """
    selection = select_series(snapshot.progress)

    return DashboardView(
        snapshot=snapshot,
        now=now,
        flips_chart=build_chart(selection, flips_seen, chart_config),
        authors_chart=build_chart(selection, unique_authors, chart_config),
        lookup=lookup_identity(query, lookup_source(snapshot.grade_leaderboard)),
        next_validation=countdown(snapshot.session.next_validation_time, now),
        next_refresh=countdown(
            snapshot.progress.next_refresh_at,
            now,
            elapsed_label=REFRESH_AVAILABLE_LABEL,
        ),
    )
