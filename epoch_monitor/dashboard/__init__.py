"""
Dashboard layer.

This package contains:
- build_view: Pure derivation of everything shown for a snapshot at an instant
- EpochMonitor: Latest-snapshot holder with ordered refreshes and scheduling
- Config: CLI argument parsing and configuration

The normalization, chart and lookup logic lives in the sibling packages.
"""

from .config import (
    add_args,
    check_config,
    config_to_dict,
    get_config,
    setup_logging,
)
from .monitor import EpochMonitor, MonitorConfig
from .view import DashboardView, build_view

__all__ = [
    "DashboardView",
    "EpochMonitor",
    "MonitorConfig",
    "build_view",
    "add_args",
    "check_config",
    "config_to_dict",
    "get_config",
    "setup_logging",
]
