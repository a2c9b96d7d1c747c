from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union
import xml.etree.ElementTree as ET

from .surface import format_length


TextAnchor = Literal["start", "middle", "end"]


@dataclass(frozen=True)
class RectMark:
    x: float
    y: float
    width: float
    height: float
    fill: str
    opacity: float = 1.0
    role: str = "rect"
    record_index: int | None = None
    series_key: str | None = None

    def to_element(self) -> ET.Element:
        return ET.Element(
            "rect",
            _attrs(
                x=self.x,
                y=self.y,
                width=max(0.0, self.width),
                height=max(0.0, self.height),
                fill=self.fill,
                opacity=self.opacity,
                role=self.role,
            ),
        )


@dataclass(frozen=True)
class CircleMark:
    cx: float
    cy: float
    r: float
    fill: str
    opacity: float = 1.0
    role: str = "circle"
    record_index: int | None = None
    series_key: str | None = None

    def to_element(self) -> ET.Element:
        return ET.Element(
            "circle",
            _attrs(cx=self.cx, cy=self.cy, r=self.r, fill=self.fill, opacity=self.opacity, role=self.role),
        )


@dataclass(frozen=True)
class LineMark:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str
    stroke_width: float = 1.0
    dash: tuple[float, float] | None = None
    opacity: float = 1.0
    role: str = "line"
    record_index: int | None = None

    def to_element(self) -> ET.Element:
        attrs = _attrs(
            x1=self.x1,
            y1=self.y1,
            x2=self.x2,
            y2=self.y2,
            stroke=self.stroke,
            opacity=self.opacity,
            role=self.role,
        )
        attrs["stroke-width"] = format_length(self.stroke_width)
        if self.dash is not None:
            attrs["stroke-dasharray"] = f"{format_length(self.dash[0])},{format_length(self.dash[1])}"
        return ET.Element("line", attrs)


@dataclass(frozen=True)
class PathMark:
    """Open stroked path; `points` is the dense polyline the path traces."""

    d: str
    points: tuple[tuple[float, float], ...]
    stroke: str
    stroke_width: float = 1.0
    opacity: float = 1.0
    role: str = "path"
    record_index: int | None = None

    def to_element(self) -> ET.Element:
        attrs = _attrs(d=self.d, fill="none", stroke=self.stroke, opacity=self.opacity, role=self.role)
        attrs["stroke-width"] = format_length(self.stroke_width)
        return ET.Element("path", attrs)


@dataclass(frozen=True)
class TextMark:
    x: float
    y: float
    text: str
    fill: str
    font_size: float = 12.0
    anchor: TextAnchor = "start"
    opacity: float = 1.0
    role: str = "text"
    record_index: int | None = None

    def to_element(self) -> ET.Element:
        attrs = _attrs(x=self.x, y=self.y, fill=self.fill, opacity=self.opacity, role=self.role)
        attrs["font-size"] = format_length(self.font_size)
        attrs["text-anchor"] = self.anchor
        element = ET.Element("text", attrs)
        element.text = self.text
        return element


Mark = Union[RectMark, CircleMark, LineMark, PathMark, TextMark]


def group_element(
    marks: tuple[Mark, ...] | list[Mark],
    *,
    dx: float = 0.0,
    dy: float = 0.0,
    opacity: float | None = None,
    role: str | None = None,
) -> ET.Element:
    attrs: dict[str, str] = {}
    if dx or dy:
        attrs["transform"] = f"translate({format_length(dx)},{format_length(dy)})"
    if opacity is not None:
        attrs["opacity"] = format_length(opacity)
    if role is not None:
        attrs["data-role"] = role
    group = ET.Element("g", attrs)
    for mark in marks:
        group.append(mark.to_element())
    return group


def _attrs(**values: object) -> dict[str, str]:
    out: dict[str, str] = {}
    for key, value in values.items():
        if key == "role":
            out["data-role"] = str(value)
        elif key == "opacity":
            if value != 1.0:
                out["opacity"] = format_length(float(value))  # type: ignore[arg-type]
        elif isinstance(value, float):
            out[key] = format_length(value)
        else:
            out[key] = str(value)
    return out
