from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import tomllib

BLACK = "#000000"
GRAY = "#C0C0C0"


@dataclass(frozen=True)
class LayoutConfig:
    callout_width: float = 10
    callout_height: float = 15
    level_increment: float = 10
    text_fudge_x: float = 3
    text_fudge_y: float = 1.5
    y_era: float = 10
    tick_half_length: float = 5
    font_family: str = "Helvetica"
    font_size_pt: float = 6
    # Scan every earlier callout instead of stopping at the first one that clears.
    full_collision_scan: bool = False


@dataclass(frozen=True)
class RenderConfig:
    axis_color: str = BLACK
    label_color: str = GRAY
    callout_color: str = BLACK
    era_color: str = GRAY
    era_opacity: float = 0.15
    axis_stroke_width: float = 3
    marker_radius: float = 4
    background: str = "#FFFFFF"


@dataclass(frozen=True)
class TimelineConfig:
    layout: LayoutConfig = LayoutConfig()
    render: RenderConfig = RenderConfig()


def _apply_table(path: Path, name: str, base: Any, table: Any) -> Any:
    if table is None:
        return base
    if not isinstance(table, dict):
        raise SystemExit(f"{path}: [{name}] must be a table")
    known = {f.name: f for f in fields(base)}
    updates: dict[str, Any] = {}
    for key, value in table.items():
        if key not in known:
            raise SystemExit(f"{path}: unknown key '{key}' in [{name}]")
        current = getattr(base, key)
        if isinstance(current, bool):
            if not isinstance(value, bool):
                raise SystemExit(f"{path}: [{name}] {key} must be true or false")
            updates[key] = value
        elif isinstance(current, (int, float)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise SystemExit(f"{path}: [{name}] {key} must be a number")
            updates[key] = float(value)
        else:
            text = str(value).strip()
            if not text:
                raise SystemExit(f"{path}: [{name}] {key} must not be empty")
            updates[key] = text
    return replace(base, **updates)


def load_timeline_config(path: Path) -> TimelineConfig:
    if not path.is_file():
        raise SystemExit(f"Config file not found: {path}")
    try:
        raw = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise SystemExit(f"{path}: invalid TOML: {exc}") from exc
    unknown = set(raw) - {"layout", "render"}
    if unknown:
        raise SystemExit(f"{path}: unknown table(s): {', '.join(sorted(unknown))}")

    layout = _apply_table(path, "layout", LayoutConfig(), raw.get("layout"))
    render = _apply_table(path, "render", RenderConfig(), raw.get("render"))

    if layout.font_size_pt <= 0:
        raise SystemExit(f"{path}: [layout] font_size_pt must be > 0")
    if layout.level_increment <= 0:
        raise SystemExit(f"{path}: [layout] level_increment must be > 0")
    if not 0.0 <= render.era_opacity <= 1.0:
        raise SystemExit(f"{path}: [render] era_opacity must be between 0 and 1")

    return TimelineConfig(layout=layout, render=render)
