from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class HitRegion:
    """Invisible full-height pointer target of one record (plot coordinates).

    `x`/`width` is the visible extent highlighted on hover; `capture` is the
    horizontal slot that owns pointer positions. Capture slots of one scene
    tile the plot width without overlap.
    """

    record_index: int
    x: float
    width: float
    height: float
    capture: tuple[float, float]

    def captures(self, x: float) -> bool:
        lo, hi = self.capture
        return lo <= x < hi


def band_hit_regions(
    band_starts: Sequence[float],
    bandwidth: float,
    slots: Sequence[tuple[float, float]],
    height: float,
) -> list[HitRegion]:
    return [
        HitRegion(record_index=i, x=start, width=bandwidth, height=height, capture=slot)
        for i, (start, slot) in enumerate(zip(band_starts, slots, strict=True))
    ]


def slice_hit_regions(count: int, plot_width: float, height: float) -> list[HitRegion]:
    """Equal slices of the plot width, one per record."""
    if count <= 0:
        return []
    width = plot_width / count
    regions: list[HitRegion] = []
    for i in range(count):
        x0 = i * width
        x1 = plot_width if i == count - 1 else (i + 1) * width
        regions.append(HitRegion(record_index=i, x=x0, width=width, height=height, capture=(x0, x1)))
    return regions


def resolve_hit(regions: Sequence[HitRegion], x: float, y: float, *, plot_width: float, plot_height: float) -> int | None:
    if not regions or y < 0.0 or y > plot_height or x < 0.0 or x > plot_width:
        return None
    for region in regions:
        if region.captures(x):
            return region.record_index
    # x == plot_width sits on the closed right edge of the last slot.
    return regions[-1].record_index
