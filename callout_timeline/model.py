from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class CalloutSpec:
    description: str
    date: str
    color: Optional[str] = None


@dataclass(frozen=True)
class EraSpec:
    name: str
    start_date: str
    end_date: str
    color: Optional[str] = None


@dataclass(frozen=True)
class TimelineData:
    """Canonical (v2) timeline document, after schema conversion."""

    width: int
    start_date: str
    end_date: str
    num_ticks: Optional[int] = None
    tick_format: Optional[str] = None
    callouts: list[CalloutSpec] = field(default_factory=list)
    eras: list[EraSpec] = field(default_factory=list)


@dataclass(frozen=True)
class TimeInterval:
    start: float
    end: float


@dataclass(frozen=True)
class Callout:
    description: str
    instant: float
    color: Optional[str] = None


@dataclass(frozen=True)
class Era:
    name: str
    start: float
    end: float
    color: Optional[str] = None


@dataclass(frozen=True)
class LevelAssignment:
    level: int
    left_boundary: float
    text: str


@dataclass(frozen=True)
class AxisTick:
    x: int
    label: str
    height: float
    tick: bool = True
    fill: str = "#C0C0C0"


@dataclass(frozen=True)
class CalloutMark:
    x: int
    y: float
    level: int
    leader_path: str
    label: str
    color: str


@dataclass(frozen=True)
class EraBand:
    x0: int
    x1: int
    color: str
    name: str
    height: float = 0.0


@dataclass(frozen=True)
class LayoutResult:
    width: int
    height: float
    y_era: float
    y_axis: float
    ticks: list[AxisTick]
    callouts: list[CalloutMark]
    eras: list[EraBand]
