from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Hashable, Sequence

import numpy as np


DEFAULT_MIN_SPAN = 1.0
DEFAULT_WIDEN_RATIO = 0.05


@dataclass(frozen=True)
class BandScale:
    """Categorical scale splitting `range` into one slot per domain value.

    With the default outer padding (half the inner padding) every category
    owns an equal `step = span / n` slot and the band sits centred inside it,
    `padding_inner * step` narrower than the slot.
    """

    domain: tuple[Hashable, ...]
    range: tuple[float, float]
    padding_inner: float = 0.0
    padding_outer: float | None = None
    _index: dict[Hashable, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not 0.0 <= self.padding_inner < 1.0:
            raise ValueError("padding_inner must be in [0, 1)")
        if self.padding_outer is not None and self.padding_outer < 0.0:
            raise ValueError("padding_outer must be >= 0")
        unique: list[Hashable] = []
        for value in self.domain:
            if value not in self._index:
                self._index[value] = len(unique)
                unique.append(value)
        object.__setattr__(self, "domain", tuple(unique))

    @property
    def outer(self) -> float:
        return self.padding_inner / 2.0 if self.padding_outer is None else self.padding_outer

    def step(self) -> float:
        n = len(self.domain)
        if n == 0:
            return 0.0
        start, stop = self.range
        return (stop - start) / max(1e-12, n - self.padding_inner + 2.0 * self.outer)

    def bandwidth(self) -> float:
        return self.step() * (1.0 - self.padding_inner)

    def __call__(self, value: Hashable) -> float | None:
        index = self._index.get(value)
        if index is None:
            return None
        return self.range[0] + self.step() * (self.outer + index)

    def index_of(self, value: Hashable) -> int | None:
        return self._index.get(value)

    def slot(self, index: int) -> tuple[float, float]:
        """Pointer-capture extent of the category at `index`.

        Slots split the inter-band gaps evenly and extend to the range ends,
        so consecutive slots tile the full range.
        """
        n = len(self.domain)
        if not 0 <= index < n:
            raise IndexError(index)
        start, stop = self.range
        step = self.step()
        half_gap = self.padding_inner * step / 2.0
        band_start = start + step * (self.outer + index)
        lo = start if index == 0 else band_start - half_gap
        hi = stop if index == n - 1 else band_start + self.bandwidth() + half_gap
        return (lo, hi)


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]
    clamp: bool = False

    def __post_init__(self) -> None:
        d0, d1 = (float(v) for v in self.domain)
        if not (np.isfinite(d0) and np.isfinite(d1)):
            raise ValueError("linear scale domain must be finite")
        if d0 == d1:
            raise ValueError("linear scale domain must have a non-zero span")
        object.__setattr__(self, "domain", (d0, d1))
        object.__setattr__(self, "range", (float(self.range[0]), float(self.range[1])))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        t = (float(value) - d0) / (d1 - d0)
        if self.clamp:
            t = min(1.0, max(0.0, t))
        return r0 + t * (r1 - r0)

    def map_array(self, values: np.ndarray) -> np.ndarray:
        d0, d1 = self.domain
        r0, r1 = self.range
        t = (np.asarray(values, dtype=np.float64) - d0) / (d1 - d0)
        if self.clamp:
            t = np.clip(t, 0.0, 1.0)
        return r0 + t * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r0 == r1:
            return d0
        return d0 + (float(pixel) - r0) / (r1 - r0) * (d1 - d0)

    def ticks(self, count: int) -> np.ndarray:
        lo, hi = sorted(self.domain)
        return generate_nice_ticks(lo, hi, count)


def extent(values: Sequence[float] | np.ndarray) -> tuple[float, float] | None:
    arr = np.asarray(values, dtype=np.float64)
    finite = arr[np.isfinite(arr)]
    if finite.size == 0:
        return None
    return (float(np.min(finite)), float(np.max(finite)))


def widen_domain(
    lo: float,
    hi: float,
    *,
    min_span: float = DEFAULT_MIN_SPAN,
    ratio: float = DEFAULT_WIDEN_RATIO,
) -> tuple[float, float]:
    """Return a domain with non-zero span; `[0, 0]` widens upward only."""
    if hi > lo:
        return (lo, hi)
    if lo == 0.0:
        return (0.0, min_span)
    delta = max(min_span, abs(lo) * ratio)
    return (lo - delta, hi + delta)


def generate_nice_ticks(vmin: float, vmax: float, count: int) -> np.ndarray:
    """Round tick values inside `[vmin, vmax]`, roughly `count` of them."""
    if count <= 0:
        raise ValueError("count must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)
    step = _nice_step((vmax - vmin) / count)
    first = np.ceil(vmin / step) * step
    last = np.floor(vmax / step) * step
    ticks = np.arange(first, last + 0.5 * step, step, dtype=np.float64)
    # Snap accumulated drift (e.g. 0.30000000000000004).
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    decimals = _decimals_from_step(step) if step is not None else 6
    try:
        quantized = Decimal(str(value)).quantize(Decimal("1").scaleb(-decimals))
    except InvalidOperation:
        quantized = Decimal(str(value))
    out = format(quantized, "f")
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    return "0" if out == "-0" else out


def format_ticks(ticks: np.ndarray) -> list[str]:
    if ticks.size == 0:
        return []
    step = float(abs(ticks[1] - ticks[0])) if ticks.size > 1 else None
    return [format_tick(float(v), step=step) for v in ticks]


def _nice_step(raw_step: float) -> float:
    exp = np.floor(np.log10(raw_step))
    frac = raw_step / (10**exp)
    if frac < 1.5:
        nice = 1.0
    elif frac < 3.0:
        nice = 2.0
    elif frac < 7.0:
        nice = 5.0
    else:
        nice = 10.0
    return float(nice * (10**exp))


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    exponent = Decimal(str(step)).normalize().as_tuple().exponent
    return min(12, max(0, -int(exponent)))
