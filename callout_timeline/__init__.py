from .layout import TimelineLayout
from .text_measure import PillowTextMeasurer, preflight_pillow

__all__ = ["PillowTextMeasurer", "TimelineLayout", "preflight_pillow"]
