from __future__ import annotations

import logging
import math
from typing import Iterable, Optional, Sequence

from .config import BLACK, LayoutConfig
from .model import Callout, CalloutMark, LevelAssignment
from .text_measure import TextMeasurer
from .time_map import TimeAxisMapper

logger = logging.getLogger(__name__)

SPLIT_WINDOW = (0.33, 0.66)


def sort_callouts(callouts: Iterable[Callout]) -> list[Callout]:
    """
    Order callouts by instant, ascending.

    Callouts sharing an instant come out last-inserted-first: each instant is a bucket that is
    popped from the end.
    """

    buckets: dict[float, list[Callout]] = {}
    for callout in callouts:
        buckets.setdefault(callout.instant, []).append(callout)
    ordered: list[Callout] = []
    for instant in sorted(buckets):
        ordered.extend(reversed(buckets[instant]))
    return ordered


def bifurcate_text(text: str) -> Optional[tuple[str, str]]:
    """
    Split `text` at the last space between 33% and 66% of its length.

    Returns None when that window holds no space. A space at index 0 does not count as a split.
    """

    start = math.floor(len(text) * SPLIT_WINDOW[0])
    end = len(text) * SPLIT_WINDOW[1]
    cut = 0
    i = start
    while i < end:
        if text[i] == " ":
            cut = i
        i += 1
    if cut == 0:
        return None
    return text[:cut], text[cut + 1 :]


def calculate_callout_level(
    left_boundary: float,
    prev_endpoints: Sequence[float],
    prev_levels: Sequence[int],
    *,
    full_scan: bool = False,
) -> int:
    """
    Lowest level at which a label reaching left to `left_boundary` clears earlier callouts.

    By default the scan walks back from the newest callout and stops at the first one whose
    endpoint the label does not cross; earlier callouts are assumed to lie further left. With
    `full_scan` every earlier callout is checked.
    """

    level = 0
    if full_scan:
        for endpoint, prev_level in zip(prev_endpoints, prev_levels):
            if left_boundary < endpoint:
                level = max(level, prev_level + 1)
        return level

    i = len(prev_endpoints) - 1
    while i >= 0 and left_boundary < prev_endpoints[i]:
        level = max(level, prev_levels[i] + 1)
        i -= 1
    return level


def leader_path(x: int, y: float, callout_width: float) -> str:
    return f"M{x},0 L{x},{y:g} L{x - callout_width:g},{y:g}"


class CalloutLayoutEngine:
    """
    Stack callout flags into levels so that no label crosses an earlier callout's anchor.

    One engine serves one layout run: callouts must be placed in ascending time order (see
    `sort_callouts`), and each placement feeds the collision state used by the next.
    """

    def __init__(
        self,
        axis: TimeAxisMapper,
        *,
        width: float,
        measure: TextMeasurer,
        layout: LayoutConfig,
        default_color: str = BLACK,
    ) -> None:
        self.axis = axis
        self.width = width
        self.measure = measure
        self.layout = layout
        self.default_color = default_color
        self.prev_endpoints: list[float] = [-math.inf]
        self.prev_levels: list[int] = [-1]
        # Callout flags point up, so the tallest one has the most negative y.
        self.min_y = 0.0

    def left_boundary(self, text: str, x: float) -> float:
        text_width = self.measure(self.layout.font_family, self.layout.font_size_pt, text)
        return x - (text_width + self.layout.callout_width + self.layout.text_fudge_x)

    def _level_for(self, text: str, x: float) -> tuple[int, float]:
        boundary = self.left_boundary(text, x)
        level = calculate_callout_level(
            boundary,
            self.prev_endpoints,
            self.prev_levels,
            full_scan=self.layout.full_collision_scan,
        )
        return level, boundary

    def assign_level(self, x: int, description: str) -> LevelAssignment:
        level, boundary = self._level_for(description, x)
        text = description

        halves = bifurcate_text(description)
        if halves is not None:
            longest = halves[0] if len(halves[0]) > len(halves[1]) else halves[1]
            split_level, split_boundary = self._level_for(longest, x)
            # Two lines of text take one extra level.
            split_level += 1
            if split_level < level:
                level = split_level
                boundary = split_boundary
                text = "\n".join(halves)

        self.prev_endpoints.append(x)
        self.prev_levels.append(level)
        return LevelAssignment(level=level, left_boundary=boundary, text=text)

    def place(self, callout: Callout) -> Optional[CalloutMark]:
        if not self.axis.is_in_range(callout.instant):
            logger.warning(
                "Skipped callout '%s': normalized position %.4f is outside the visible range",
                callout.description,
                self.axis.normalize(callout.instant),
            )
            return None

        x = self.axis.to_pixel(callout.instant, self.width)
        assignment = self.assign_level(x, callout.description)
        y = -self.layout.callout_height - assignment.level * self.layout.level_increment
        self.min_y = min(self.min_y, y)
        return CalloutMark(
            x=x,
            y=y,
            level=assignment.level,
            leader_path=leader_path(x, y, self.layout.callout_width),
            label=assignment.text,
            color=callout.color or self.default_color,
        )

    def layout_all(self, callouts: Iterable[Callout]) -> list[CalloutMark]:
        marks: list[CalloutMark] = []
        for callout in sort_callouts(callouts):
            mark = self.place(callout)
            if mark is not None:
                marks.append(mark)
        return marks
