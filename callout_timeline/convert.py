"""
Normalize timeline documents into the canonical `TimelineData` schema.

Two document shapes are accepted:
- v1: snake_case keys (`start`, `end`, `num_ticks`, `tick_format`) with tuple-encoded
  callouts `[description, date, color?]` and eras `[name, start, end, color?]`
- v2: `apiVersion = 2`, camelCase keys, object-encoded callouts and eras
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

import tomllib

from .model import CalloutSpec, EraSpec, TimelineData


def _require(raw: Mapping[str, Any], key: str, where: str) -> Any:
    if key not in raw or raw[key] is None:
        raise ValueError(f"{where}: missing required field '{key}'")
    return raw[key]


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _is_integral(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and int(value) == value


def _optional_int(value: Any, where: str) -> Optional[int]:
    if value is None:
        return None
    if not _is_integral(value):
        raise ValueError(f"{where}: expected an integer, got {value!r}")
    return int(value)


def _width(value: Any) -> int:
    if not _is_integral(value) or value <= 0:
        raise ValueError(f"width must be a positive integer, got {value!r}")
    return int(value)


def convert_callouts(old_callouts: Sequence[Sequence[str]]) -> list[CalloutSpec]:
    callouts: list[CalloutSpec] = []
    for idx, old in enumerate(old_callouts):
        if isinstance(old, (str, bytes)) or len(old) not in {2, 3}:
            raise ValueError(f"callouts[{idx}]: expected [description, date] or [description, date, color]")
        color = old[2] if len(old) == 3 else None
        callouts.append(CalloutSpec(description=str(old[0]), date=str(old[1]), color=_optional_str(color)))
    return callouts


def convert_eras(old_eras: Sequence[Sequence[str]]) -> list[EraSpec]:
    eras: list[EraSpec] = []
    for idx, old in enumerate(old_eras):
        if isinstance(old, (str, bytes)) or len(old) not in {3, 4}:
            raise ValueError(f"eras[{idx}]: expected [name, start, end] or [name, start, end, color]")
        color = old[3] if len(old) == 4 else None
        eras.append(EraSpec(name=str(old[0]), start_date=str(old[1]), end_date=str(old[2]), color=_optional_str(color)))
    return eras


def convert_v1_to_v2(raw: Mapping[str, Any]) -> TimelineData:
    return TimelineData(
        width=_width(_require(raw, "width", "timeline")),
        start_date=str(_require(raw, "start", "timeline")),
        end_date=str(_require(raw, "end", "timeline")),
        num_ticks=_optional_int(raw.get("num_ticks"), "num_ticks"),
        tick_format=_optional_str(raw.get("tick_format")),
        callouts=convert_callouts(raw.get("callouts") or []),
        eras=convert_eras(raw.get("eras") or []),
    )


def _callouts_v2(items: Sequence[Any]) -> list[CalloutSpec]:
    callouts: list[CalloutSpec] = []
    for idx, item in enumerate(items):
        where = f"callouts[{idx}]"
        if not isinstance(item, Mapping):
            raise ValueError(f"{where}: expected an object")
        callouts.append(
            CalloutSpec(
                description=str(_require(item, "description", where)),
                date=str(_require(item, "date", where)),
                color=_optional_str(item.get("color")),
            )
        )
    return callouts


def _eras_v2(items: Sequence[Any]) -> list[EraSpec]:
    eras: list[EraSpec] = []
    for idx, item in enumerate(items):
        where = f"eras[{idx}]"
        if not isinstance(item, Mapping):
            raise ValueError(f"{where}: expected an object")
        eras.append(
            EraSpec(
                name=str(_require(item, "name", where)),
                start_date=str(_require(item, "startDate", where)),
                end_date=str(_require(item, "endDate", where)),
                color=_optional_str(item.get("color")),
            )
        )
    return eras


def timeline_data_from_mapping(raw: Mapping[str, Any]) -> TimelineData:
    if raw.get("apiVersion") != 2:
        return convert_v1_to_v2(raw)
    return TimelineData(
        width=_width(_require(raw, "width", "timeline")),
        start_date=str(_require(raw, "startDate", "timeline")),
        end_date=str(_require(raw, "endDate", "timeline")),
        num_ticks=_optional_int(raw.get("numTicks"), "numTicks"),
        tick_format=_optional_str(raw.get("tickFormat")),
        callouts=_callouts_v2(raw.get("callouts") or []),
        eras=_eras_v2(raw.get("eras") or []),
    )


def load_timeline_data(path: Path) -> TimelineData:
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix == ".json":
        raw = json.loads(text)
    elif suffix == ".toml":
        raw = tomllib.loads(text)
    else:
        raise ValueError(f"{path}: unsupported timeline file type '{path.suffix}' (expected .json or .toml)")
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: top level must be an object")
    return timeline_data_from_mapping(raw)
