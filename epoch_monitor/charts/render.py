"""Standalone SVG rendering of chart geometry."""

from __future__ import annotations

from html import escape

from .geometry import CURRENT_OPACITY, ChartConfig, ChartGeometry

STROKE_WIDTH = 2


def _path_element(path: str, opacity: float, epoch: int | None) -> str:
    epoch_attr = f' data-epoch="{epoch}"' if epoch is not None else ""
    return (
        f'  <path d="{path}" fill="none" stroke="currentColor" '
        f'stroke-width="{STROKE_WIDTH}" stroke-opacity="{opacity:g}"{epoch_attr}/>'
    )


def render_svg(
    geometry: ChartGeometry,
    config: ChartConfig | None = None,
    title: str | None = None,
) -> str:
    """
    Render geometry as an SVG document.

    Trailing lines are drawn oldest first so the current epoch ends up on
    top. Empty paths produce no element.

    Args:
        geometry: Output of build_chart
        config: Must be the config the geometry was built with
        title: Optional accessible title

    Returns:
        SVG document as a string
    """
    config = config or ChartConfig()
    width, height = f"{config.width:g}", f"{config.height:g}"

    lines = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {width} {height}" '
        f'width="{width}" height="{height}">'
    ]
    if title:
        lines.append(f"  <title>{escape(title)}</title>")

    for line in reversed(geometry.trailing):
        if line.path:
            lines.append(_path_element(line.path, line.opacity, line.epoch))

    if geometry.current_path:
        lines.append(
            _path_element(geometry.current_path, CURRENT_OPACITY, geometry.current_epoch)
        )

    lines.append("</svg>")
    return "\n".join(lines) + "\n"
