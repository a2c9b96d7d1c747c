from __future__ import annotations

from typing import Sequence

from vitalchart_core.marks import LineMark, Mark, TextMark
from vitalchart_plot.scales import BandScale, LinearScale, format_ticks


GRID_DASH = (3.0, 3.0)


def bottom_tick_labels(count: int, labels: Sequence[str] | None, ordinals: Sequence[int] | None = None) -> list[str]:
    """Axis text per category: 1-based position unless replacement labels exist.

    `ordinals` selects which replacement label each category takes (weekday
    number for the average chart); without it the position is used.
    """
    out: list[str] = []
    for i in range(count):
        position = ordinals[i] if ordinals is not None else i + 1
        if labels is not None and 1 <= position <= len(labels):
            out.append(labels[position - 1])
        else:
            out.append(str(position))
    return out


def bottom_axis(
    x: BandScale,
    texts: Sequence[str],
    *,
    plot_height: float,
    tick_padding: float,
    color: str,
    font_size: float,
    centered: bool = True,
    tick_size: float = 0.0,
) -> list[Mark]:
    """Tick labels of the categorical axis; tick lines only when `tick_size > 0`."""
    marks: list[Mark] = []
    offset = x.bandwidth() / 2.0 if centered else 0.0
    for category, text in zip(x.domain, texts, strict=True):
        start = x(category)
        if start is None:
            continue
        tick_x = start + offset
        if tick_size > 0:
            marks.append(
                LineMark(tick_x, plot_height, tick_x, plot_height + tick_size, stroke=color, role="x-tick")
            )
        marks.append(
            TextMark(
                x=tick_x,
                y=plot_height + tick_padding,
                text=text,
                fill=color,
                font_size=font_size,
                anchor="middle",
                role="x-tick-label",
            )
        )
    return marks


def baseline(plot_width: float, plot_height: float, *, color: str, width: float = 1.0) -> LineMark:
    """Plain stroke along the bottom edge, drawn apart from the tick axis."""
    return LineMark(0.0, plot_height, plot_width, plot_height, stroke=color, stroke_width=width, role="baseline")


def right_value_axis(
    scale: LinearScale,
    *,
    tick_count: int,
    plot_width: float,
    label_padding: float,
    grid_color: str,
    text_color: str,
    font_size: float,
) -> list[Mark]:
    """Dashed horizontal grid lines with value labels right of the plot."""
    ticks = scale.ticks(tick_count)
    marks: list[Mark] = []
    for value, text in zip(ticks.tolist(), format_ticks(ticks), strict=True):
        y = scale(value)
        marks.append(
            LineMark(0.0, y, plot_width, y, stroke=grid_color, dash=GRID_DASH, role="grid")
        )
        marks.append(
            TextMark(
                x=plot_width + label_padding,
                y=y + font_size / 3.0,
                text=text,
                fill=text_color,
                font_size=font_size,
                anchor="start",
                role="y-tick-label",
            )
        )
    return marks
