"""
Charts module for multi-epoch progress overlays.

Main components:
- select_series: Current epoch plus up to two trailing epochs
- build_chart: Shared-scale path geometry for one metric
- render_svg: Standalone SVG document for a chart

Usage:
    from epoch_monitor.charts import build_chart, flips_seen, select_series

    geometry = build_chart(select_series(snapshot.progress), flips_seen)
    print(geometry.current_path, geometry.max_value)
"""

from .errors import ChartError, InvalidChartConfigError
from .geometry import (
    CURRENT_OPACITY,
    METRICS,
    Accessor,
    ChartConfig,
    ChartGeometry,
    ChartLine,
    ChartPoint,
    build_chart,
    build_path,
    flips_seen,
    to_chart_points,
    unique_authors,
)
from .render import render_svg
from .series import SeriesSelection, select_series

__all__ = [
    # Selection
    "SeriesSelection",
    "select_series",
    # Geometry
    "Accessor",
    "ChartConfig",
    "ChartGeometry",
    "ChartLine",
    "ChartPoint",
    "CURRENT_OPACITY",
    "METRICS",
    "build_chart",
    "build_path",
    "flips_seen",
    "to_chart_points",
    "unique_authors",
    # Rendering
    "render_svg",
    # Errors
    "ChartError",
    "InvalidChartConfigError",
]
