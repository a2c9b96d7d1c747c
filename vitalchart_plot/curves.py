from __future__ import annotations

import numpy as np

from vitalchart_core.surface import format_length


DEFAULT_SAMPLES_PER_SEGMENT = 16


def monotone_tangents(xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Per-point slopes of a monotone cubic in x (Steffen's method).

    Interior slopes are limited so each cubic segment stays within the range of
    its two end samples; where neighbouring secants disagree in sign the slope
    is zero, which makes local extrema sit exactly on samples.
    """
    n = xs.size
    if n < 2:
        return np.zeros(n, dtype=np.float64)
    h = np.diff(xs)
    secants = np.diff(ys) / h
    tangents = np.zeros(n, dtype=np.float64)
    if n > 2:
        h0, h1 = h[:-1], h[1:]
        s0, s1 = secants[:-1], secants[1:]
        p = (s0 * h1 + s1 * h0) / (h0 + h1)
        limited = np.minimum(np.minimum(np.abs(s0), np.abs(s1)), 0.5 * np.abs(p))
        tangents[1:-1] = (np.sign(s0) + np.sign(s1)) * limited
        tangents[0] = _end_tangent(h[0], secants[0], tangents[1])
        tangents[-1] = _end_tangent(h[-1], secants[-1], tangents[-2])
    else:
        tangents[:] = secants[0]
    return tangents


def monotone_path(xs: np.ndarray, ys: np.ndarray) -> str:
    """SVG path data interpolating the samples with monotone cubic segments."""
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    if xs.size == 0:
        return ""
    parts = [f"M{format_length(xs[0])},{format_length(ys[0])}"]
    if xs.size == 1:
        return parts[0]
    tangents = monotone_tangents(xs, ys)
    for i in range(xs.size - 1):
        (c1x, c1y), (c2x, c2y) = _control_points(xs, ys, tangents, i)
        parts.append(
            "C"
            f"{format_length(c1x)},{format_length(c1y)},"
            f"{format_length(c2x)},{format_length(c2y)},"
            f"{format_length(xs[i + 1])},{format_length(ys[i + 1])}"
        )
    return "".join(parts)


def sample_monotone(
    xs: np.ndarray,
    ys: np.ndarray,
    samples_per_segment: int = DEFAULT_SAMPLES_PER_SEGMENT,
) -> np.ndarray:
    """Dense (N, 2) polyline along the monotone curve, endpoints included."""
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    if xs.size < 2:
        return np.stack([xs, ys], axis=1) if xs.size else np.zeros((0, 2), dtype=np.float64)
    if samples_per_segment < 1:
        raise ValueError("samples_per_segment must be >= 1")
    tangents = monotone_tangents(xs, ys)
    t = np.linspace(0.0, 1.0, samples_per_segment + 1)[:-1]
    b0 = (1 - t) ** 3
    b1 = 3 * (1 - t) ** 2 * t
    b2 = 3 * (1 - t) * t**2
    b3 = t**3
    chunks: list[np.ndarray] = []
    for i in range(xs.size - 1):
        (c1x, c1y), (c2x, c2y) = _control_points(xs, ys, tangents, i)
        px = b0 * xs[i] + b1 * c1x + b2 * c2x + b3 * xs[i + 1]
        py = b0 * ys[i] + b1 * c1y + b2 * c2y + b3 * ys[i + 1]
        chunks.append(np.stack([px, py], axis=1))
    chunks.append(np.asarray([[xs[-1], ys[-1]]], dtype=np.float64))
    return np.concatenate(chunks, axis=0)


def _control_points(
    xs: np.ndarray, ys: np.ndarray, tangents: np.ndarray, i: int
) -> tuple[tuple[float, float], tuple[float, float]]:
    dx = (xs[i + 1] - xs[i]) / 3.0
    first = (float(xs[i] + dx), float(ys[i] + dx * tangents[i]))
    second = (float(xs[i + 1] - dx), float(ys[i + 1] - dx * tangents[i + 1]))
    return first, second


def _end_tangent(h: float, secant: float, neighbour: float) -> float:
    return (3.0 * secant - neighbour) / 2.0 if h else neighbour
