from __future__ import annotations

import logging
from typing import Iterable, Optional

from .axis_labels import AxisLabelPlacer
from .config import GRAY
from .model import Era, EraBand
from .time_map import TimeAxisMapper
from .time_parse import format_tick_label

logger = logging.getLogger(__name__)


class EraBandPlanner:
    """
    Compute pixel bounds for era bands.

    Bands are independent: they may overlap each other, and an era whose end precedes its start
    yields a negative-width band that is passed through as-is.
    """

    def __init__(self, axis: TimeAxisMapper, *, width: float, default_color: str = GRAY) -> None:
        self.axis = axis
        self.width = width
        self.default_color = default_color

    def plan_band(self, era: Era, *, height: float) -> Optional[EraBand]:
        for instant in (era.start, era.end):
            if not self.axis.is_in_range(instant):
                logger.warning(
                    "Skipped era '%s': normalized position %.4f is outside the visible range",
                    era.name,
                    self.axis.normalize(instant),
                )
                return None
        return EraBand(
            x0=self.axis.to_pixel(era.start, self.width),
            x1=self.axis.to_pixel(era.end, self.width),
            color=era.color or self.default_color,
            name=era.name,
            height=height,
        )

    def plan_bands(self, eras: Iterable[Era], *, height: float) -> list[EraBand]:
        bands: list[EraBand] = []
        for era in eras:
            band = self.plan_band(era, height=height)
            if band is not None:
                bands.append(band)
        return bands

    @staticmethod
    def add_boundary_labels(eras: Iterable[Era], labels: AxisLabelPlacer, *, tick_format: Optional[str] = None) -> None:
        # Each boundary is range-checked on its own, independent of whether the band was drawn.
        for era in eras:
            labels.add(era.start, format_tick_label(era.start, tick_format))
            labels.add(era.end, format_tick_label(era.end, tick_format))
