from __future__ import annotations

import math
from dataclasses import dataclass

from .model import TimeInterval

PADDING_FRACTION = 0.1
DEGENERATE_POSITION = 0.5


@dataclass(frozen=True)
class TimeAxisMapper:
    """
    Map instants onto a horizontal axis padded by 10% of the raw span on each side.

    `normalize` is the position within the padded interval (in [0, 1] for visible instants).
    A zero-length interval puts every instant at the midpoint instead of dividing by zero.
    """

    interval: TimeInterval
    padded_start: float
    padded_end: float

    @property
    def span(self) -> float:
        return self.padded_end - self.padded_start

    @property
    def is_degenerate(self) -> bool:
        return self.span <= 0

    def normalize(self, instant: float) -> float:
        if self.is_degenerate:
            return DEGENERATE_POSITION
        return (instant - self.padded_start) / self.span

    def is_in_range(self, instant: float) -> bool:
        position = self.normalize(instant)
        return 0.0 <= position <= 1.0

    def to_pixel(self, instant: float, width: float) -> int:
        # Round half up, not Python's banker's rounding.
        return int(math.floor(self.normalize(instant) * width + 0.5))


def make_axis_mapper(start: float, end: float) -> TimeAxisMapper:
    if end < start:
        raise ValueError(f"Axis end ({end}) is before start ({start})")
    pad = PADDING_FRACTION * (end - start)
    return TimeAxisMapper(
        interval=TimeInterval(start=start, end=end),
        padded_start=start - pad,
        padded_end=end + pad,
    )
