from __future__ import annotations

from callout_timeline.height_budget import HeightBudgetAccumulator
from callout_timeline.text_measure import rotated_label_footprint


def test_budget_tracks_running_maximum() -> None:
    budget = HeightBudgetAccumulator()
    assert budget.current() == 0.0
    seen: list[float] = []
    for height in (12.0, 40.0, 8.0, 40.0, 55.5, 3.0):
        budget.observe(height)
        seen.append(budget.current())
    assert seen == sorted(seen)
    assert budget.current() == 55.5


def test_rotated_label_footprint_uses_width_plus_tick() -> None:
    def measure(font_family: str, font_size_pt: float, text: str) -> float:
        return 4.0 * len(text)

    footprint = rotated_label_footprint(measure, font_family="Helvetica", font_size_pt=6, text="Sat Jan 01 2000", tick_half_length=5)
    assert footprint == 70.0
