"""Selection of the epoch series rendered together on one chart."""

from __future__ import annotations

from dataclasses import dataclass

from epoch_monitor.snapshot.models import (
    MAX_PREVIOUS_EPOCHS,
    ProgressEpochSeries,
    ProgressInfo,
    ProgressPoint,
)


@dataclass(frozen=True)
class SeriesSelection:
    """Current epoch series plus trailing epochs, most recent first."""

    current: ProgressEpochSeries | None
    trailing: tuple[ProgressEpochSeries, ...] = ()

    @property
    def current_points(self) -> tuple[ProgressPoint, ...]:
        """Points of the current series, empty when there is none."""
        return self.current.points if self.current is not None else ()


def select_series(progress: ProgressInfo) -> SeriesSelection:
    """
    Pick the current epoch and up to two preceding epochs.

    A missing current series is not an error: it renders as an empty line.
    """
    series = progress.series
    return SeriesSelection(
        current=series.current_epoch,
        trailing=tuple(series.previous_epochs[:MAX_PREVIOUS_EPOCHS]),
    )
