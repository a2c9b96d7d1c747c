from __future__ import annotations

import logging
import math

import numpy as np

from vitalchart_core.dimensions import Dimensions
from vitalchart_core.marks import CircleMark, Mark, PathMark, RectMark, TextMark
from vitalchart_plot.activity import TITLE_FONT_SIZE, format_value
from vitalchart_plot.axes import bottom_axis, bottom_tick_labels
from vitalchart_plot.builder import AverageScales, build_average_scales
from vitalchart_plot.config import AverageChartConfig
from vitalchart_plot.curves import monotone_path, sample_monotone
from vitalchart_plot.records import AverageSession, Dataset
from vitalchart_plot.scene import Scene
from vitalchart_ui.controller import RenderContext
from vitalchart_ui.hit_regions import slice_hit_regions
from vitalchart_ui.tooltip import AnnotationGroup


LOGGER = logging.getLogger(__name__)


def render_average_scene(
    dataset: Dataset,
    dims: Dimensions | None,
    config: AverageChartConfig,
) -> Scene | None:
    """Smoothed session-length line with hover-revealed points and labels."""
    scales = build_average_scales(dataset, dims, config)
    if scales is None or dims is None:
        return None
    plot = scales.plot
    records = [r for r in dataset.records if isinstance(r, AverageSession)]

    marks: list[Mark] = bottom_axis(
        scales.x,
        bottom_tick_labels(len(records), config.tick_labels, ordinals=[r.day for r in records]),
        plot_height=plot.height,
        tick_padding=config.tick_padding,
        color=config.text_color,
        font_size=config.font_size,
        centered=False,
    )
    path = _line_mark(records, scales, config)
    if path is not None:
        marks.append(path)

    annotations = [_annotation(i, record, scales, config, dims) for i, record in enumerate(records)]
    context = RenderContext(
        annotations=annotations,
        hit_regions=slice_hit_regions(len(records), plot.width, plot.height),
        plot_width=plot.width,
        plot_height=plot.height,
        offset=(plot.x, plot.y),
        tooltip_shift=config.tooltip.shift,
    )
    backdrop: list[Mark] = [RectMark(0.0, 0.0, dims.width, dims.height, fill=config.background, role="background")]
    if config.title:
        backdrop.append(
            TextMark(
                x=config.margins.left,
                y=config.margins.top / 2.0 + TITLE_FONT_SIZE / 3.0,
                text=config.title,
                fill=config.title_color,
                font_size=TITLE_FONT_SIZE,
                role="title",
            )
        )
    return Scene(
        width=dims.width,
        height=dims.height,
        plot=plot,
        context=context,
        backdrop=backdrop,
        marks=marks,
    )


def point_position(record: AverageSession, scales: AverageScales) -> tuple[float, float] | None:
    x = scales.x(str(record.day))
    if x is None or not math.isfinite(record.session_length):
        return None
    return (x, scales.value(max(0.0, record.session_length)))


def _line_mark(records: list[AverageSession], scales: AverageScales, config: AverageChartConfig) -> PathMark | None:
    points = [p for p in (point_position(r, scales) for r in records) if p is not None]
    if len(points) < len(records):
        LOGGER.debug("line skips %d record(s) without a finite session length", len(records) - len(points))
    if not points:
        return None
    xs = np.asarray([p[0] for p in points], dtype=np.float64)
    ys = np.asarray([p[1] for p in points], dtype=np.float64)
    dense = sample_monotone(xs, ys)
    return PathMark(
        d=monotone_path(xs, ys),
        points=tuple((float(x), float(y)) for x, y in dense.tolist()),
        stroke=config.line_color,
        stroke_width=config.line_width,
        role="line",
    )


def _annotation(
    index: int,
    record: AverageSession,
    scales: AverageScales,
    config: AverageChartConfig,
    dims: Dimensions,
) -> AnnotationGroup:
    style = config.tooltip
    plot = scales.plot
    anchor_x = scales.x(str(record.day)) or 0.0
    # Shade from the hovered day to the right edge of the surface.
    highlight = RectMark(
        x=anchor_x,
        y=-plot.y,
        width=dims.width - plot.x - anchor_x,
        height=dims.height,
        fill=style.highlight_fill,
        opacity=style.highlight_opacity,
        role="highlight",
        record_index=index,
    )
    position = point_position(record, scales)
    if position is None:
        return AnnotationGroup(
            record_index=index,
            anchor_x=anchor_x,
            highlight=highlight,
            label=(),
            label_width=style.label_width,
            label_y=0.0,
        )

    cx, cy = position
    ring: list[CircleMark] = [
        CircleMark(cx=cx, cy=cy, r=config.point_radius, fill=config.line_color, role="point", record_index=index)
    ]
    if style.ring_radius is not None:
        ring.append(
            CircleMark(
                cx=cx,
                cy=cy,
                r=style.ring_radius,
                fill=config.line_color,
                opacity=style.ring_opacity,
                role="ring",
                record_index=index,
            )
        )
    label = (
        RectMark(
            x=0.0,
            y=0.0,
            width=style.label_width,
            height=style.label_height,
            fill=style.label_fill,
            role="tooltip-bubble",
            record_index=index,
        ),
        TextMark(
            x=style.label_width / 2.0,
            y=style.label_height / 2.0 + style.font_size / 3.0,
            text=format_value(record.session_length, f" {config.value_unit}"),
            fill=style.text_fill,
            font_size=style.font_size,
            anchor="middle",
            role="tooltip-text",
            record_index=index,
        ),
    )
    if style.label_top is not None:
        label_y = style.label_top
    else:
        label_y = max(-plot.y, cy - style.label_height - style.label_gap)
    return AnnotationGroup(
        record_index=index,
        anchor_x=anchor_x,
        highlight=highlight,
        label=label,
        label_width=style.label_width,
        label_y=label_y,
        ring=tuple(ring),
    )
