from __future__ import annotations

import math
from typing import Iterable

import numpy as np
from PIL import Image, ImageDraw

from vitalchart_core.marks import CircleMark, LineMark, Mark, PathMark, RectMark, TextMark
from vitalchart_plot.scene import Scene
from vitalchart_plot.text import ANCHOR_SHIFT, load_font


RGBA = tuple[int, int, int, int]


def parse_color(value: str | None) -> RGBA | None:
    if not value:
        return None
    value = value.strip()
    if value in ("none", "transparent"):
        return None
    if value.startswith("#"):
        hex_value = value[1:]
        if len(hex_value) in (3, 4):
            hex_value = "".join(ch * 2 for ch in hex_value)
        if len(hex_value) == 6:
            hex_value += "ff"
        if len(hex_value) == 8:
            try:
                r, g, b, a = (int(hex_value[i : i + 2], 16) for i in range(0, 8, 2))
            except ValueError:
                return None
            return (r, g, b, a)
        return None
    if value.startswith("rgb"):
        numbers = [p.strip() for p in value[value.find("(") + 1 : value.find(")")].split(",")]
        try:
            r, g, b = (int(float(n)) for n in numbers[:3])
            a = int(round(float(numbers[3]) * 255)) if len(numbers) >= 4 else 255
        except (ValueError, IndexError):
            return None
        return (r, g, b, max(0, min(255, a)))
    return None


def rasterize_scene(scene: Scene) -> np.ndarray:
    """Paint the scene's current state into an (H, W, 4) uint8 array."""
    width = max(1, int(math.ceil(scene.width)))
    height = max(1, int(math.ceil(scene.height)))
    image = Image.new("RGBA", (width, height), (0, 0, 0, 0))

    _paint(image, scene.backdrop, dx=0.0, dy=0.0)
    dx, dy = scene.plot.x, scene.plot.y
    _paint(image, scene.marks, dx=dx, dy=dy)
    for group in scene.context.annotations:
        if not group.visible:
            continue
        _paint(image, (group.highlight, *group.ring), dx=dx, dy=dy)
        _paint(image, group.label, dx=dx + group.label_x, dy=dy + group.label_y)
    return np.asarray(image, dtype=np.uint8).copy()


def _paint(image: Image.Image, marks: Iterable[Mark], *, dx: float, dy: float) -> None:
    for mark in marks:
        color = parse_color(getattr(mark, "fill", None) or getattr(mark, "stroke", None))
        if color is None or mark.opacity <= 0.0:
            continue
        color = (color[0], color[1], color[2], int(round(color[3] * min(1.0, mark.opacity))))
        layer = Image.new("RGBA", image.size, (0, 0, 0, 0))
        _draw_mark(ImageDraw.Draw(layer), mark, color, dx=dx, dy=dy)
        image.alpha_composite(layer)


def _draw_mark(draw: ImageDraw.ImageDraw, mark: Mark, color: RGBA, *, dx: float, dy: float) -> None:
    if isinstance(mark, RectMark):
        if mark.width <= 0 or mark.height <= 0:
            return
        x0, y0 = mark.x + dx, mark.y + dy
        draw.rectangle((x0, y0, x0 + mark.width - 1, y0 + mark.height - 1), fill=color)
    elif isinstance(mark, CircleMark):
        cx, cy = mark.cx + dx, mark.cy + dy
        draw.ellipse((cx - mark.r, cy - mark.r, cx + mark.r, cy + mark.r), fill=color)
    elif isinstance(mark, LineMark):
        width = max(1, int(round(mark.stroke_width)))
        start = (mark.x1 + dx, mark.y1 + dy)
        end = (mark.x2 + dx, mark.y2 + dy)
        if mark.dash is None:
            draw.line((start, end), fill=color, width=width)
        else:
            for seg in _dash_segments(start, end, mark.dash):
                draw.line(seg, fill=color, width=width)
    elif isinstance(mark, PathMark):
        if len(mark.points) < 2:
            return
        points = [(x + dx, y + dy) for x, y in mark.points]
        draw.line(points, fill=color, width=max(1, int(round(mark.stroke_width))), joint="curve")
    elif isinstance(mark, TextMark):
        if not mark.text:
            return
        font = load_font(mark.font_size)
        advance = draw.textlength(mark.text, font=font)
        x = mark.x + dx - advance * ANCHOR_SHIFT.get(mark.anchor, 0.0)
        # TextMark.y is the baseline, PIL positions by the ascender line.
        ascent = font.getmetrics()[0]
        draw.text((x, mark.y + dy - ascent), mark.text, fill=color, font=font)


def _dash_segments(
    start: tuple[float, float],
    end: tuple[float, float],
    dash: tuple[float, float],
) -> list[tuple[tuple[float, float], tuple[float, float]]]:
    on, off = dash
    length = math.hypot(end[0] - start[0], end[1] - start[1])
    if length == 0 or on <= 0:
        return []
    ux = (end[0] - start[0]) / length
    uy = (end[1] - start[1]) / length
    segments = []
    pos = 0.0
    while pos < length:
        stop = min(length, pos + on)
        segments.append(
            ((start[0] + ux * pos, start[1] + uy * pos), (start[0] + ux * stop, start[1] + uy * stop))
        )
        pos = stop + max(0.0, off)
    return segments
