from __future__ import annotations


class HeightBudgetAccumulator:
    """Running maximum of the label footprints placed below the axis."""

    def __init__(self) -> None:
        self._max_height = 0.0

    def observe(self, label_height: float) -> float:
        self._max_height = max(self._max_height, float(label_height))
        return self._max_height

    def current(self) -> float:
        return self._max_height
