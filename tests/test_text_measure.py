from __future__ import annotations

import gc
import weakref

import pytest

from callout_timeline.text_measure import PillowTextMeasurer, preflight_pillow


def test_pillow_preflight_reports_freetype() -> None:
    preflight = preflight_pillow()
    if not preflight.ok:
        pytest.skip(preflight.message)
    assert "Pillow" in preflight.message


def test_default_font_widths_grow_with_text() -> None:
    if not preflight_pillow().ok:
        pytest.skip("Pillow without FreeType")
    measure = PillowTextMeasurer()
    short = measure("Helvetica", 6, "abc")
    long = measure("Helvetica", 6, "abcdefghij")
    assert 0 < short < long
    assert measure("Helvetica", 12, "abcdefghij") > long


def test_multiline_width_is_widest_line() -> None:
    if not preflight_pillow().ok:
        pytest.skip("Pillow without FreeType")
    measure = PillowTextMeasurer()
    assert measure("Helvetica", 6, "abc\nabcdefghij") == measure("Helvetica", 6, "abcdefghij")
    assert measure("Helvetica", 6, "") == 0.0


def test_font_cache_is_per_instance() -> None:
    if not preflight_pillow().ok:
        pytest.skip("Pillow without FreeType")
    first = PillowTextMeasurer()
    second = PillowTextMeasurer()
    first("Helvetica", 6, "abc")
    assert first._font.cache_info().currsize == 1
    assert second._font.cache_info().currsize == 0

    ref = weakref.ref(first)
    del first
    gc.collect()
    assert ref() is None
