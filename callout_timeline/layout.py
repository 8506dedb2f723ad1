from __future__ import annotations

import logging
from typing import Optional

from .axis_labels import AxisLabelPlacer
from .callouts import CalloutLayoutEngine, sort_callouts
from .config import LayoutConfig, RenderConfig
from .eras import EraBandPlanner
from .height_budget import HeightBudgetAccumulator
from .model import Callout, CalloutMark, Era, EraBand, LayoutResult, TimelineData
from .text_measure import TextMeasurer
from .time_map import make_axis_mapper
from .time_parse import format_callout_date_label, format_tick_label, parse_date

logger = logging.getLogger(__name__)


def resolve_callouts(data: TimelineData) -> list[Callout]:
    return [Callout(description=c.description, instant=parse_date(c.date), color=c.color) for c in data.callouts]


def resolve_eras(data: TimelineData) -> list[Era]:
    return [Era(name=e.name, start=parse_date(e.start_date), end=parse_date(e.end_date), color=e.color) for e in data.eras]


class TimelineLayout:
    """
    Two-pass layout of one timeline document.

    Era bands span the full canvas height, which depends on how tall the callouts stack and how
    long the axis labels are. So the axis and callouts are planned first
    (`plan_axis_and_callouts`), the axis offset and height are derived from that, and only then
    are the eras planned (`plan_eras`). `build` runs the whole sequence.
    """

    def __init__(
        self,
        data: TimelineData,
        *,
        measure: TextMeasurer,
        layout: Optional[LayoutConfig] = None,
        render: Optional[RenderConfig] = None,
    ) -> None:
        self.data = data
        self.measure = measure
        self.layout = layout or LayoutConfig()
        self.render = render or RenderConfig()
        self.width = data.width
        self.start = parse_date(data.start_date)
        self.end = parse_date(data.end_date)
        self.axis = make_axis_mapper(self.start, self.end)
        self.callouts = resolve_callouts(data)
        self.eras = resolve_eras(data)

        self.budget = HeightBudgetAccumulator()
        self.labels = AxisLabelPlacer(
            self.axis,
            width=self.width,
            measure=measure,
            layout=self.layout,
            budget=self.budget,
            default_fill=self.render.label_color,
        )
        self.era_planner = EraBandPlanner(self.axis, width=self.width, default_color=self.render.era_color)
        self.callout_marks: list[CalloutMark] = []
        self.era_bands: list[EraBand] = []
        self._axis_planned = False
        self._eras_planned = False

    def _plan_main_axis(self) -> None:
        tick_format = self.data.tick_format
        self.labels.add(self.start, format_tick_label(self.start, tick_format), tick=True)
        self.labels.add(self.end, format_tick_label(self.end, tick_format), tick=True)

        num_ticks = self.data.num_ticks
        if num_ticks:
            delta = self.end - self.start
            for j in range(1, num_ticks):
                instant = self.start + j * delta / num_ticks
                self.labels.add(instant, format_tick_label(instant, tick_format))

    def plan_axis_and_callouts(self) -> float:
        """Pass 1: ticks and callouts. Returns the most negative y reached by a callout."""

        if self._axis_planned:
            raise RuntimeError("plan_axis_and_callouts() already ran for this layout")
        self._plan_main_axis()

        engine = CalloutLayoutEngine(
            self.axis,
            width=self.width,
            measure=self.measure,
            layout=self.layout,
            default_color=self.render.callout_color,
        )
        for callout in sort_callouts(self.callouts):
            mark = engine.place(callout)
            if mark is None:
                continue
            self.callout_marks.append(mark)
            self.labels.add(callout.instant, format_callout_date_label(callout.instant), tick=False, fill=self.render.callout_color)

        self._axis_planned = True
        return engine.min_y

    def plan_eras(self, height: float) -> list[EraBand]:
        """Pass 2: era bands spanning the final canvas `height`, plus their boundary labels."""

        if not self._axis_planned:
            raise RuntimeError("plan_eras() requires plan_axis_and_callouts() to run first")
        if self._eras_planned:
            raise RuntimeError("plan_eras() already ran for this layout")
        self.era_bands = self.era_planner.plan_bands(self.eras, height=height)
        EraBandPlanner.add_boundary_labels(self.eras, self.labels, tick_format=self.data.tick_format)
        self._eras_planned = True
        return self.era_bands

    def build(self) -> LayoutResult:
        min_callout_y = self.plan_axis_and_callouts()

        y_era = self.layout.y_era
        y_axis = y_era + self.layout.callout_height - min_callout_y
        height = y_axis + self.budget.current() + 4 * self.layout.text_fudge_y

        self.plan_eras(height)

        levels = {mark.level for mark in self.callout_marks}
        logger.debug(
            "Laid out %d/%d callouts on %d level(s), %d era band(s); height=%.1f",
            len(self.callout_marks),
            len(self.callouts),
            len(levels),
            len(self.era_bands),
            height,
        )
        return LayoutResult(
            width=self.width,
            height=height,
            y_era=y_era,
            y_axis=y_axis,
            ticks=list(self.labels.ticks),
            callouts=list(self.callout_marks),
            eras=list(self.era_bands),
        )
