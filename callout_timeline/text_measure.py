from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Protocol

import PIL
from PIL import ImageFont, features

PX_PER_PT = 96.0 / 72.0


class TextMeasurer(Protocol):
    def __call__(self, font_family: str, font_size_pt: float, text: str) -> float: ...


@dataclass(frozen=True)
class PillowPreflight:
    ok: bool
    message: str


def preflight_pillow() -> PillowPreflight:
    if not features.check("freetype2"):
        return PillowPreflight(
            ok=False,
            message="Pillow was built without FreeType support; text widths cannot be measured. Reinstall Pillow from a wheel.",
        )
    return PillowPreflight(ok=True, message=f"Pillow {PIL.__version__} (FreeType {features.version('freetype2')})")


class PillowTextMeasurer:
    """
    Estimate rendered text width with Pillow's FreeType bindings.

    The font comes from `font_path` (any TTF/OTF); without one, Pillow's bundled scalable default
    font is used. `font_family` only keys the cache: the family named in the SVG is resolved by the
    viewer, so the width here is an estimate, which is all the layout needs.
    """

    def __init__(self, font_path: Optional[str] = None) -> None:
        self.font_path = font_path
        self._font = lru_cache(maxsize=32)(self._load_font)
        self._width = lru_cache(maxsize=4096)(self._measure)

    def __call__(self, font_family: str, font_size_pt: float, text: str) -> float:
        return self._width(font_family, float(font_size_pt), text)

    def _load_font(self, size_px: float) -> ImageFont.FreeTypeFont:
        if self.font_path:
            return ImageFont.truetype(self.font_path, size_px)
        return ImageFont.load_default(size=size_px)

    def _measure(self, font_family: str, font_size_pt: float, text: str) -> float:
        font = self._font(font_size_pt * PX_PER_PT)
        return max((float(font.getlength(line)) for line in text.split("\n")), default=0.0)


def rotated_label_footprint(
    measure: TextMeasurer,
    *,
    font_family: str,
    font_size_pt: float,
    text: str,
    tick_half_length: float,
) -> float:
    """
    Vertical space taken below the axis by a tick label.

    Axis labels are drawn rotated 270 degrees, so the text *width* is what extends downward.
    """

    return measure(font_family, font_size_pt, text) + 2 * tick_half_length
