from __future__ import annotations

from functools import lru_cache

from PIL import ImageFont


DEFAULT_FONT_SIZE_PX = 12.0

# Fraction of the advance width that sits left of the anchor point.
ANCHOR_SHIFT = {"start": 0.0, "middle": 0.5, "end": 1.0}


def text_size(text: str, *, font_size_px: float = DEFAULT_FONT_SIZE_PX) -> tuple[int, int]:
    """Pixel (width, height) of `text` rendered with the bundled default font."""
    font = load_font(font_size_px)
    if not text:
        ascent, descent = font.getmetrics()
        return (0, max(1, int(ascent + descent)))
    left, top, right, bottom = font.getbbox(text)
    return (max(0, int(right - left)), max(1, int(bottom - top)))


@lru_cache(maxsize=32)
def load_font(font_size_px: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    return ImageFont.load_default(size=max(1, int(round(font_size_px))))
