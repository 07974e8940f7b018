"""Unit tests for SVG rendering."""

from epoch_monitor.charts import (
    ChartConfig,
    ChartGeometry,
    ChartLine,
    build_chart,
    flips_seen,
    render_svg,
    select_series,
)
from epoch_monitor.snapshot import normalize_snapshot


def _geometry(**overrides) -> ChartGeometry:
    values = {
        "current_path": "M0.00,220.00 L720.00,0.00",
        "current_epoch": 152,
        "trailing": (
            ChartLine(epoch=151, path="M0.00,200.00 L720.00,100.00", opacity=0.45),
            ChartLine(epoch=150, path="M0.00,210.00 L720.00,210.00", opacity=0.24),
        ),
        "max_value": 100.0,
        "max_elapsed": 3600.0,
        "latest_value": 100.0,
    }
    values.update(overrides)
    return ChartGeometry(**values)


class TestRenderSvg:
    """Tests for render_svg."""

    def test_document_uses_chart_size(self) -> None:
        svg = render_svg(_geometry(), ChartConfig(width=300, height=100))

        assert svg.startswith("<svg ")
        assert 'viewBox="0 0 300 100"' in svg
        assert svg.rstrip().endswith("</svg>")

    def test_current_line_drawn_last(self) -> None:
        """Oldest trailing first, current epoch on top."""
        svg = render_svg(_geometry())

        positions = [svg.index(f'data-epoch="{epoch}"') for epoch in (150, 151, 152)]
        assert positions == sorted(positions)
        assert 'stroke-opacity="1" data-epoch="152"' in svg
        assert 'stroke-opacity="0.45" data-epoch="151"' in svg

    def test_empty_paths_are_skipped(self) -> None:
        """Series without points produce no path element."""
        svg = render_svg(_geometry(current_path="", trailing=()))

        assert "<path" not in svg

    def test_title_is_escaped(self) -> None:
        svg = render_svg(_geometry(), title="Flips <seen> & more")

        assert "<title>Flips &lt;seen&gt; &amp; more</title>" in svg

    def test_renders_built_chart(self, raw_snapshot) -> None:
        """End to end from snapshot to SVG."""
        selection = select_series(normalize_snapshot(raw_snapshot).progress)

        svg = render_svg(build_chart(selection, flips_seen))

        assert svg.count("<path") == 3
