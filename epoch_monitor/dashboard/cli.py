"""
Epoch monitor CLI - show epoch progress, leaderboards and countdowns.

Usage:
    epoch-monitor --scan.url http://localhost:3000
    epoch-monitor --snapshot.path ./scan_out --address 0xabc...
    epoch-monitor --watch --chart.out_dir ./charts
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from epoch_monitor.charts import ChartConfig, ChartGeometry, render_svg
from epoch_monitor.clock import WallClock, format_duration
from epoch_monitor.lookup import LookupState
from epoch_monitor.snapshot import SnapshotClient, SnapshotClientConfig

from .config import check_config, config_to_dict, get_config, setup_logging
from .monitor import EpochMonitor, MonitorConfig
from .view import DashboardView

logger = logging.getLogger(__name__)


def _chart_caption(name: str, chart: ChartGeometry) -> str:
    trailing = ", ".join(f"epoch {line.epoch}" for line in chart.trailing) or "none"
    return (
        f"  {name}: latest {chart.latest_value:.0f} "
        f"(scale max {chart.max_value:.0f} over {format_duration(chart.max_elapsed)}; "
        f"overlays: {trailing})"
    )


def _lookup_line(view: DashboardView) -> str | None:
    lookup = view.lookup
    if lookup.state is LookupState.NO_QUERY:
        return None
    if lookup.state is LookupState.INVALID:
        return f"Lookup: '{lookup.query}' is not a valid address (0x + 40 hex characters)"
    if lookup.identity is None:
        return f"Lookup: {lookup.query} not found in leaderboard"
    identity = lookup.identity
    return (
        f"Lookup: {identity.address} is rank #{identity.rank} "
        f"(total {identity.total_grade_score:.2f}, {identity.flip_count} flips)"
    )


def format_summary(view: DashboardView, top: int = 10) -> str:
    """Render a plain-text dashboard summary."""
    snapshot = view.snapshot
    counts = snapshot.counts
    board = snapshot.grade_leaderboard

    lines = [
        f"Epoch {snapshot.epoch} (threshold {snapshot.threshold:g})",
        f"  Flips seen:             {counts.flips_seen}",
        f"  Unique authors:         {counts.unique_authors}",
        f"  Authors over threshold: {counts.authors_over_threshold}",
        f"  Total extra flips:      {counts.total_extra_flips}",
        f"Next validation: {view.next_validation.label}",
        f"Next refresh:    {view.next_refresh.label}",
    ]
    if snapshot.note:
        lines.append(f"Note: {snapshot.note}")

    lines.append("Progress:")
    lines.append(_chart_caption("Flips seen", view.flips_chart))
    lines.append(_chart_caption("Unique authors", view.authors_chart))

    if top and view.top_identities:
        lines.append(f"Top identities ({len(view.top_identities)}/{board.top_limit}):")
        for row in view.top_identities[:top]:
            lines.append(
                f"  #{row.rank:<4} {row.address}  total {row.total_grade_score:8.2f}  "
                f"avg {row.avg_grade_score:6.2f}  flips {row.flip_count}"
            )

    if top and view.top_flips:
        filters = ", ".join(board.status_filters) or "all"
        lines.append(f"Top flips (status: {filters}):")
        for flip in view.top_flips[:top]:
            author_rank = f"#{flip.author_rank}" if flip.author_rank else "-"
            words = "/".join(flip.words) or "-"
            lines.append(
                f"  #{flip.rank:<4} {flip.grade_score:6.2f}  {flip.status or '-':<10} "
                f"{words:<20} author {author_rank}"
            )
        if board.excluded_wrong_words_authors_count:
            lines.append(
                f"  ({board.excluded_wrong_words_authors_count} authors excluded for wrong words)"
            )

    lookup_line = _lookup_line(view)
    if lookup_line:
        lines.append(lookup_line)

    return "\n".join(lines)


def write_charts(view: DashboardView, out_dir: str | Path, config: ChartConfig) -> list[Path]:
    """Write both progress charts as SVG files. Returns written paths."""
    directory = Path(out_dir)
    directory.mkdir(parents=True, exist_ok=True)

    written = []
    for name, chart, title in (
        ("flips_seen", view.flips_chart, "Flips seen"),
        ("unique_authors", view.authors_chart, "Unique authors"),
    ):
        path = directory / f"{name}.svg"
        path.write_text(render_svg(chart, config, title=title), encoding="utf-8")
        written.append(path)

    logger.info(f"Wrote charts to {directory}")
    return written


def _emit(view: DashboardView, config: argparse.Namespace, chart_config: ChartConfig) -> None:
    if config.as_json:
        print(json.dumps(view.to_dict(), indent=2))
    else:
        print(format_summary(view, top=config.top))

    if config.chart_out_dir:
        write_charts(view, config.chart_out_dir, chart_config)


def _build_monitor(config: argparse.Namespace) -> tuple[EpochMonitor, ChartConfig]:
    chart_config = ChartConfig(width=config.chart_width, height=config.chart_height)
    client = SnapshotClient(
        SnapshotClientConfig(
            url=config.scan_url,
            endpoint=config.scan_endpoint,
            timeout=config.scan_timeout,
            max_retries=config.scan_max_retries,
            retry_delay_seconds=config.scan_retry_delay,
            snapshot_path=config.snapshot_path,
        )
    )
    monitor = EpochMonitor(
        client,
        MonitorConfig(refresh_seconds=config.refresh_seconds, chart=chart_config),
    )
    monitor.query = config.address
    return monitor, chart_config


async def _watch(monitor: EpochMonitor, config: argparse.Namespace, chart_config: ChartConfig) -> int:
    def on_refresh(_snapshot) -> None:
        view = monitor.view()
        if monitor.last_error is not None:
            print(f"\nERROR: {monitor.last_error} (will retry)", file=sys.stderr)
        if view is not None:
            print()
            _emit(view, config, chart_config)

    def on_tick(now) -> None:
        view = monitor.view(now)
        if view is not None and not config.as_json:
            print(
                f"\r  next refresh: {view.next_refresh.label:<20} "
                f"next validation: {view.next_validation.label:<20}",
                end="",
                flush=True,
            )

    await monitor.refresh()
    on_refresh(monitor.snapshot)

    monitor.start_scheduled(on_refresh)
    try:
        async with WallClock() as clock:
            clock.add_listener(on_tick)
            await asyncio.Event().wait()
    except asyncio.CancelledError:
        pass
    finally:
        monitor.stop_scheduled()

    return 0


async def run(config: argparse.Namespace) -> int:
    """Run the dashboard once or in watch mode."""
    monitor, chart_config = _build_monitor(config)

    if config.watch:
        return await _watch(monitor, config, chart_config)

    await monitor.refresh()
    view = monitor.view()
    if view is None:
        print(f"ERROR: Snapshot fetch failed: {monitor.last_error}", file=sys.stderr)
        return 1

    _emit(view, config, chart_config)
    return 0


def main(args: list[str] | None = None) -> int:
    """Entry point."""
    config = get_config(args)

    try:
        check_config(config)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    setup_logging(config.log_level)
    logger.info(f"Config: {config_to_dict(config)}")

    try:
        return asyncio.run(run(config))
    except KeyboardInterrupt:
        print()
        return 0
