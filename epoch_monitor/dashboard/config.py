"""
Dashboard configuration management.
"""

from __future__ import annotations

import argparse
import logging
import math
import os
from typing import Any


def add_args(parser: argparse.ArgumentParser) -> None:
    """
    Add dashboard arguments to the parser.

    Arguments can be overridden by environment variables.
    """

    parser.add_argument(
        "--scan.url",
        dest="scan_url",
        type=str,
        help="Base URL of the service exposing the scan endpoint.",
        default=os.environ.get("SCAN_URL", "http://localhost:3000"),
    )

    parser.add_argument(
        "--scan.endpoint",
        dest="scan_endpoint",
        type=str,
        help="Path of the scan endpoint.",
        default=os.environ.get("SCAN_ENDPOINT", "/api/scan"),
    )

    parser.add_argument(
        "--scan.timeout",
        dest="scan_timeout",
        type=float,
        help="Request timeout in seconds (a scan runs behind the endpoint).",
        default=float(os.environ.get("SCAN_TIMEOUT", "300")),
    )

    parser.add_argument(
        "--scan.max_retries",
        dest="scan_max_retries",
        type=int,
        help="Max attempts for a failed snapshot fetch.",
        default=int(os.environ.get("SCAN_MAX_RETRIES", "3")),
    )

    parser.add_argument(
        "--scan.retry_delay",
        dest="scan_retry_delay",
        type=float,
        help="Delay in seconds between snapshot fetch attempts.",
        default=float(os.environ.get("SCAN_RETRY_DELAY", "5")),
    )

    parser.add_argument(
        "--snapshot.path",
        dest="snapshot_path",
        type=str,
        help="Read snapshots from this file or scan output directory instead of the endpoint.",
        default=os.environ.get("SNAPSHOT_PATH", ""),
    )

    parser.add_argument(
        "--refresh_seconds",
        type=float,
        help="Refresh interval in watch mode (never below the snapshot's minRefreshSeconds).",
        default=float(os.environ.get("REFRESH_SECONDS", "60")),
    )

    parser.add_argument(
        "--chart.width",
        dest="chart_width",
        type=float,
        help="Logical chart width.",
        default=float(os.environ.get("CHART_WIDTH", "720")),
    )

    parser.add_argument(
        "--chart.height",
        dest="chart_height",
        type=float,
        help="Logical chart height.",
        default=float(os.environ.get("CHART_HEIGHT", "220")),
    )

    parser.add_argument(
        "--chart.out_dir",
        dest="chart_out_dir",
        type=str,
        help="Write flips/authors charts as SVG files into this directory.",
        default=os.environ.get("CHART_OUT_DIR", ""),
    )

    parser.add_argument(
        "--address",
        type=str,
        help="Identity address to look up in the leaderboard.",
        default=os.environ.get("LOOKUP_ADDRESS", ""),
    )

    parser.add_argument(
        "--top",
        type=int,
        help="Number of leaderboard rows to print.",
        default=int(os.environ.get("TOP_ROWS", "10")),
    )

    parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Print the dashboard view as JSON.",
        default=False,
    )

    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep refreshing on schedule until interrupted.",
        default=os.environ.get("WATCH", "false").lower() == "true",
    )

    parser.add_argument(
        "--log_level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level.",
        default=os.environ.get("LOG_LEVEL", "WARNING"),
    )


def get_config(args: list[str] | None = None) -> argparse.Namespace:
    """Parse arguments and return configuration."""
    parser = argparse.ArgumentParser(
        prog="epoch-monitor",
        description="Epoch progress and grade leaderboard monitor",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    add_args(parser)
    return parser.parse_args(args)


def _is_positive(value: float) -> bool:
    return math.isfinite(value) and value > 0


def check_config(config: argparse.Namespace) -> None:
    """
    Validate configuration.

    Raises:
        ValueError: If configuration is invalid.
    """
    if not config.snapshot_path and not config.scan_url:
        raise ValueError(
            "--scan.url is required (or set SCAN_URL), unless --snapshot.path is given"
        )

    if config.scan_max_retries < 1:
        raise ValueError("--scan.max_retries must be at least 1")

    if not _is_positive(config.scan_timeout):
        raise ValueError("--scan.timeout must be a positive number")

    if not (math.isfinite(config.scan_retry_delay) and config.scan_retry_delay >= 0):
        raise ValueError("--scan.retry_delay must be a non-negative number")

    if not _is_positive(config.refresh_seconds):
        raise ValueError("--refresh_seconds must be a positive number")

    if not (_is_positive(config.chart_width) and _is_positive(config.chart_height)):
        raise ValueError("--chart.width and --chart.height must be positive numbers")

    if config.top < 0:
        raise ValueError("--top must not be negative")


def config_to_dict(config: argparse.Namespace) -> dict[str, Any]:
    """Convert config to dictionary for logging."""
    return {
        "scan_url": config.scan_url,
        "scan_endpoint": config.scan_endpoint,
        "scan_timeout": config.scan_timeout,
        "scan_max_retries": config.scan_max_retries,
        "scan_retry_delay": config.scan_retry_delay,
        "snapshot_path": config.snapshot_path,
        "refresh_seconds": config.refresh_seconds,
        "chart_width": config.chart_width,
        "chart_height": config.chart_height,
        "chart_out_dir": config.chart_out_dir,
        "address": config.address,
        "top": config.top,
        "as_json": config.as_json,
        "watch": config.watch,
        "log_level": config.log_level,
    }


def setup_logging(level: str) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
