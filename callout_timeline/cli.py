from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .config import TimelineConfig, load_timeline_config
from .convert import load_timeline_data
from .layout import TimelineLayout
from .svg_render import write_png, write_svg
from .text_measure import PillowTextMeasurer, preflight_pillow

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="callout-timeline",
        description="Lay out a timeline document (JSON or TOML) and render it as SVG.",
    )
    parser.add_argument("input", help="Timeline document (.json or .toml), v1 or v2 schema.")
    parser.add_argument("--output", help="Output SVG path (default: input path with a .svg suffix).")
    parser.add_argument("--png", help="Also render a PNG to this path (requires the 'png' extra).")
    parser.add_argument("--config", help="TOML file with [layout] and [render] overrides.")
    parser.add_argument("--font", help="TTF/OTF font used to measure label widths (default: Pillow's bundled font).")
    parser.add_argument(
        "--full-scan",
        action="store_true",
        help="Check every earlier callout for collisions instead of stopping at the first clear one.",
    )
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(list(argv) if argv is not None else sys.argv[1:])
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s: %(message)s")

    preflight = preflight_pillow()
    if not preflight.ok:
        print(preflight.message, file=sys.stderr)
        return 2
    logger.debug("%s", preflight.message)

    config = TimelineConfig()
    if args.config:
        try:
            config = load_timeline_config(Path(args.config).expanduser())
        except SystemExit as exc:
            logger.error("%s", exc)
            return 2
    layout_cfg = replace(config.layout, full_collision_scan=True) if args.full_scan else config.layout

    input_path = Path(args.input).expanduser()
    if not input_path.exists():
        print(f"Input not found: {input_path}", file=sys.stderr)
        return 2

    try:
        data = load_timeline_data(input_path)
        result = TimelineLayout(
            data,
            measure=PillowTextMeasurer(args.font),
            layout=layout_cfg,
            render=config.render,
        ).build()
    except ValueError as exc:
        logger.error("%s: %s", input_path, exc)
        return 2

    output = Path(args.output).expanduser() if args.output else input_path.with_suffix(".svg")
    write_svg(result, output, layout=layout_cfg, render=config.render)
    print(output)

    if args.png:
        png = write_png(output, Path(args.png).expanduser())
        if png is None:
            return 2
        print(png)
    return 0
