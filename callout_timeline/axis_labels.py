from __future__ import annotations

import logging
from typing import Optional

from .config import GRAY, LayoutConfig
from .height_budget import HeightBudgetAccumulator
from .model import AxisTick
from .text_measure import TextMeasurer, rotated_label_footprint
from .time_map import TimeAxisMapper

logger = logging.getLogger(__name__)


class AxisLabelPlacer:
    """Place rotated labels (and optional tick marks) on the main axis, feeding the height budget."""

    def __init__(
        self,
        axis: TimeAxisMapper,
        *,
        width: float,
        measure: TextMeasurer,
        layout: LayoutConfig,
        budget: HeightBudgetAccumulator,
        default_fill: str = GRAY,
    ) -> None:
        self.axis = axis
        self.width = width
        self.measure = measure
        self.layout = layout
        self.budget = budget
        self.default_fill = default_fill
        self.ticks: list[AxisTick] = []

    def add(self, instant: float, label: str, *, tick: bool = True, fill: Optional[str] = None) -> Optional[AxisTick]:
        if not self.axis.is_in_range(instant):
            logger.warning(
                "Skipped axis label '%s': normalized position %.4f is outside the visible range",
                label,
                self.axis.normalize(instant),
            )
            return None

        height = rotated_label_footprint(
            self.measure,
            font_family=self.layout.font_family,
            font_size_pt=self.layout.font_size_pt,
            text=label,
            tick_half_length=self.layout.tick_half_length,
        )
        self.budget.observe(height)
        placed = AxisTick(
            x=self.axis.to_pixel(instant, self.width),
            label=label,
            height=height,
            tick=tick,
            fill=fill or self.default_fill,
        )
        self.ticks.append(placed)
        return placed
