from __future__ import annotations

import logging
from html import escape
from pathlib import Path
from typing import Optional

from .config import LayoutConfig, RenderConfig
from .model import AxisTick, CalloutMark, EraBand, LayoutResult
from .text_measure import PX_PER_PT

logger = logging.getLogger(__name__)

LINE_HEIGHT_EM = 1.2


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _marker_ids(eras: list[EraBand]) -> dict[str, int]:
    """Number each distinct era color in order of first use; marker ids are built from the number."""

    ids: dict[str, int] = {}
    for era in eras:
        ids.setdefault(era.color, len(ids))
    return ids


def _font_attrs(layout: LayoutConfig) -> str:
    return f'font-family="{escape(layout.font_family)}" font-size="{_fmt(layout.font_size_pt)}pt"'


def _era_markers(marker_ids: dict[str, int]) -> list[str]:
    parts: list[str] = []
    for color, idx in marker_ids.items():
        fill = escape(color)
        parts.append(
            f'<marker id="era_start_{idx}" markerWidth="10" markerHeight="10" refX="0" refY="3" orient="auto">'
            f'<path d="M6,0 L6,7 L0,3 L6,0" fill="{fill}"/></marker>'
        )
        parts.append(
            f'<marker id="era_end_{idx}" markerWidth="10" markerHeight="10" refX="6" refY="3" orient="auto">'
            f'<path d="M0,0 L0,7 L6,3 L0,0" fill="{fill}"/></marker>'
        )
    return parts


def _render_era(
    parts: list[str],
    era: EraBand,
    *,
    marker_idx: int,
    result: LayoutResult,
    layout: LayoutConfig,
    render: RenderConfig,
) -> None:
    color = escape(era.color)
    left = min(era.x0, era.x1)
    band_w = abs(era.x1 - era.x0)
    parts.append(
        f'<rect x="{left}" y="0" width="{band_w}" height="{_fmt(era.height)}" fill="{color}" fill-opacity="{_fmt(render.era_opacity)}"/>'
    )
    for x in (era.x0, era.x1):
        parts.append(
            f'<line x1="{x}" y1="0" x2="{x}" y2="{_fmt(result.y_axis)}" stroke="{color}" stroke-width="0.5" stroke-dasharray="5,5"/>'
        )
    y_era = _fmt(result.y_era)
    parts.append(
        f'<line x1="{era.x0}" y1="{y_era}" x2="{era.x1}" y2="{y_era}" stroke="{color}" stroke-width="0.75" '
        f'marker-start="url(#era_start_{marker_idx})" marker-end="url(#era_end_{marker_idx})"/>'
    )
    parts.append(
        f'<text x="{_fmt(0.5 * (era.x0 + era.x1))}" y="{_fmt(result.y_era - layout.text_fudge_y)}" {_font_attrs(layout)} '
        f'text-anchor="middle" fill="{color}">{escape(era.name)}</text>'
    )


def _render_tick(parts: list[str], tick: AxisTick, *, layout: LayoutConfig, render: RenderConfig) -> None:
    dy = layout.tick_half_length
    if tick.tick:
        parts.append(
            f'<line x1="{tick.x}" y1="{_fmt(-dy)}" x2="{tick.x}" y2="{_fmt(dy)}" stroke="{escape(render.axis_color)}" stroke-width="2"/>'
        )
    # Rotated to read bottom-to-top, ending just below the tick.
    anchor_y = _fmt(2 * dy)
    baseline_x = _fmt(tick.x + layout.font_size_pt * PX_PER_PT / 3)
    parts.append(
        f'<text x="{baseline_x}" y="{anchor_y}" {_font_attrs(layout)} text-anchor="end" fill="{escape(tick.fill)}" '
        f'transform="rotate(270, {baseline_x}, {anchor_y})">{escape(tick.label)}</text>'
    )


def _render_callout(parts: list[str], mark: CalloutMark, *, layout: LayoutConfig, render: RenderConfig) -> None:
    color = escape(mark.color)
    parts.append(f'<path d="{mark.leader_path}" stroke="{color}" stroke-width="1" fill="none"/>')

    lines = mark.label.split("\n")
    line_h = layout.font_size_pt * PX_PER_PT * LINE_HEIGHT_EM
    text_x = _fmt(mark.x - layout.callout_width - layout.text_fudge_x)
    first_y = mark.y + layout.text_fudge_y - (len(lines) - 1) * line_h
    parts.append(f'<text x="{text_x}" y="{_fmt(first_y)}" {_font_attrs(layout)} text-anchor="end" fill="{color}">')
    for idx, line in enumerate(lines):
        dy = "0" if idx == 0 else _fmt(line_h)
        parts.append(f'<tspan x="{text_x}" dy="{dy}">{escape(line)}</tspan>')
    parts.append("</text>")
    parts.append(
        f'<circle cx="{mark.x}" cy="0" r="{_fmt(render.marker_radius)}" fill="{escape(render.background)}" stroke="{color}"/>'
    )


def render_svg(result: LayoutResult, *, layout: LayoutConfig, render: RenderConfig) -> str:
    width = result.width
    height = _fmt(result.height)

    parts: list[str] = []
    parts.append('<?xml version="1.0" encoding="UTF-8"?>')
    parts.append(f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" viewBox="0 0 {width} {height}">')
    parts.append(f'<rect x="0" y="0" width="100%" height="100%" fill="{escape(render.background)}"/>')

    marker_ids = _marker_ids(result.eras)
    markers = _era_markers(marker_ids)
    if markers:
        parts.append("<defs>")
        parts.extend(markers)
        parts.append("</defs>")

    for era in result.eras:
        _render_era(parts, era, marker_idx=marker_ids[era.color], result=result, layout=layout, render=render)

    parts.append(f'<g class="axis" transform="translate(0, {_fmt(result.y_axis)})">')
    parts.append(
        f'<line x1="0" y1="0" x2="{width}" y2="0" stroke="{escape(render.axis_color)}" stroke-width="{_fmt(render.axis_stroke_width)}"/>'
    )
    for tick in result.ticks:
        _render_tick(parts, tick, layout=layout, render=render)
    for mark in result.callouts:
        _render_callout(parts, mark, layout=layout, render=render)
    parts.append("</g>")

    parts.append("</svg>")
    return "\n".join(parts) + "\n"


def write_svg(result: LayoutResult, output_path: Path, *, layout: LayoutConfig, render: RenderConfig) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_svg(result, layout=layout, render=render), encoding="utf-8")
    return output_path


def write_png(svg_path: Path, png_path: Path) -> Optional[Path]:
    try:
        import cairosvg  # type: ignore[import-not-found]
    except (ImportError, OSError):
        logger.error("PNG output needs cairosvg (install the 'png' extra); skipped %s", png_path)
        return None

    png_path.parent.mkdir(parents=True, exist_ok=True)
    cairosvg.svg2png(url=str(svg_path), write_to=str(png_path))
    if not png_path.exists() or png_path.stat().st_size == 0:
        raise RuntimeError(f"PNG render failed: {png_path}")
    return png_path
