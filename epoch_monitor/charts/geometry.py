"""
Line-chart geometry for overlaid epoch series.

Each series is placed on a "seconds since its own first sample" X axis, so
epochs that started at different wall-clock times overlay directly. All
series drawn together share one scale:

    x = elapsed / max_elapsed * width
    y = height - value / max_value * height      (screen Y, 0 at the top)

max_elapsed and max_value are taken across every series in the chart and
floored at 1, so empty or flat charts never divide by zero.

Path policy:
    0 points   -> "" (nothing drawn)
    1 point    -> horizontal line across the full width at that value
    N points   -> N commands (one M, then L), in input order, no smoothing
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from epoch_monitor.clock.countdown import parse_instant
from epoch_monitor.snapshot.models import MAX_PREVIOUS_EPOCHS, ProgressPoint

from .errors import InvalidChartConfigError
from .series import SeriesSelection

Accessor = Callable[[ProgressPoint], float]

CURRENT_OPACITY = 1.0


def flips_seen(point: ProgressPoint) -> float:
    return float(point.flips_seen)


def unique_authors(point: ProgressPoint) -> float:
    return float(point.unique_authors)


METRICS: dict[str, Accessor] = {
    "flips_seen": flips_seen,
    "unique_authors": unique_authors,
}


@dataclass(frozen=True)
class ChartConfig:
    """Logical chart size and trailing line opacities."""

    width: float = 720.0
    height: float = 220.0
    trailing_opacities: tuple[float, ...] = (0.45, 0.24)
    """Opacity per trailing epoch, most recent first. Must strictly decrease."""

    def __post_init__(self) -> None:
        if not (self.width > 0 and self.height > 0):
            raise InvalidChartConfigError(
                f"Chart size must be positive, got {self.width}x{self.height}"
            )
        if len(self.trailing_opacities) < MAX_PREVIOUS_EPOCHS:
            raise InvalidChartConfigError(
                f"Need {MAX_PREVIOUS_EPOCHS} trailing opacities, "
                f"got {len(self.trailing_opacities)}"
            )
        for opacity in self.trailing_opacities:
            if not 0 < opacity < CURRENT_OPACITY:
                raise InvalidChartConfigError(
                    f"Trailing opacity must be in (0, 1), got {opacity}"
                )
        for newer, older in zip(self.trailing_opacities, self.trailing_opacities[1:]):
            if older >= newer:
                raise InvalidChartConfigError(
                    f"Trailing opacities must strictly decrease: {self.trailing_opacities}"
                )


@dataclass(frozen=True)
class ChartPoint:
    elapsed_seconds: float
    value: float


@dataclass(frozen=True)
class ChartLine:
    """One trailing epoch line."""

    epoch: int
    path: str
    opacity: float


@dataclass(frozen=True)
class ChartGeometry:
    """Everything needed to draw one overlay chart and its captions."""

    current_path: str
    current_epoch: int | None
    trailing: tuple[ChartLine, ...]
    """Most recent trailing epoch first."""

    max_value: float
    max_elapsed: float
    latest_value: float
    """Last value of the current series (0 when it has no points)."""


def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def to_chart_points(
    points: Sequence[ProgressPoint], accessor: Accessor
) -> tuple[ChartPoint, ...]:
    """
    Convert progress points to (elapsed, value) pairs.

    Elapsed time is measured from the series' own first point. Points are
    not sorted: a timestamp earlier than the first point, or one that does
    not parse, gets elapsed 0.
    """
    if not points:
        return ()

    origin = parse_instant(points[0].timestamp)
    chart_points = []
    for point in points:
        instant = parse_instant(point.timestamp)
        if origin is None or instant is None:
            elapsed = 0.0
        else:
            elapsed = max(0.0, (instant - origin).total_seconds())
        chart_points.append(
            ChartPoint(
                elapsed_seconds=elapsed,
                value=_finite_or_zero(float(accessor(point))),
            )
        )
    return tuple(chart_points)


def _axis_max(values: Iterable[float]) -> float:
    array = np.fromiter(values, dtype=np.float64)
    if array.size == 0:
        return 1.0
    return max(1.0, float(array.max()))


def build_path(
    points: Sequence[ChartPoint],
    max_elapsed: float,
    max_value: float,
    width: float,
    height: float,
) -> str:
    """
    Build an SVG path for one series on the shared scale.

    Args:
        points: Chart points in input order
        max_elapsed: Shared X axis maximum (>= 1)
        max_value: Shared Y axis maximum (>= 1)
        width: Chart width
        height: Chart height

    Returns:
        Path data string, empty for an empty series
    """
    if not points:
        return ""

    elapsed = np.array([p.elapsed_seconds for p in points], dtype=np.float64)
    values = np.array([p.value for p in points], dtype=np.float64)

    xs = elapsed / max_elapsed * width
    ys = height - values / max_value * height

    if len(points) == 1:
        # A lone sample is drawn as a flat line so it stays visible
        return f"M0.00,{ys[0]:.2f} L{width:.2f},{ys[0]:.2f}"

    commands = [
        f"{'M' if i == 0 else 'L'}{x:.2f},{y:.2f}"
        for i, (x, y) in enumerate(zip(xs, ys))
    ]
    return " ".join(commands)


def build_chart(
    selection: SeriesSelection,
    accessor: Accessor,
    config: ChartConfig | None = None,
) -> ChartGeometry:
    """
    Build overlay geometry for the current epoch and its trailing epochs.

    Args:
        selection: Series to draw together
        accessor: Metric to plot, e.g. flips_seen or unique_authors
        config: Chart size and opacities. Uses defaults if None.

    Returns:
        ChartGeometry with shared axes
    """
    config = config or ChartConfig()

    current = to_chart_points(selection.current_points, accessor)
    trailing = [
        (series.epoch, to_chart_points(series.points, accessor))
        for series in selection.trailing[: len(config.trailing_opacities)]
    ]

    all_points = [current, *(points for _, points in trailing)]
    max_elapsed = _axis_max(p.elapsed_seconds for series in all_points for p in series)
    max_value = _axis_max(p.value for series in all_points for p in series)

    def _path(points: Sequence[ChartPoint]) -> str:
        return build_path(points, max_elapsed, max_value, config.width, config.height)

    lines = tuple(
        ChartLine(epoch=epoch, path=_path(points), opacity=config.trailing_opacities[i])
        for i, (epoch, points) in enumerate(trailing)
    )

    return ChartGeometry(
        current_path=_path(current),
        current_epoch=selection.current.epoch if selection.current else None,
        trailing=lines,
        max_value=max_value,
        max_elapsed=max_elapsed,
        latest_value=current[-1].value if current else 0.0,
    )
