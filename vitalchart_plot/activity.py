from __future__ import annotations

import logging
import math

from vitalchart_core.dimensions import Dimensions
from vitalchart_core.marks import CircleMark, Mark, RectMark, TextMark
from vitalchart_plot.axes import baseline, bottom_axis, bottom_tick_labels, right_value_axis
from vitalchart_plot.builder import ActivityScales, build_activity_scales
from vitalchart_plot.config import ActivityChartConfig
from vitalchart_plot.records import Dataset, WeightSession
from vitalchart_plot.scene import Scene
from vitalchart_plot.text import text_size
from vitalchart_ui.controller import RenderContext
from vitalchart_ui.hit_regions import band_hit_regions
from vitalchart_ui.tooltip import AnnotationGroup


LOGGER = logging.getLogger(__name__)

TITLE_FONT_SIZE = 15.0
LEGEND_SWATCH_RADIUS = 4.0
LEGEND_GAP = 10.0
HEADER_BASELINE = 32.0


def render_activity_scene(
    dataset: Dataset,
    dims: Dimensions | None,
    config: ActivityChartConfig,
) -> Scene | None:
    """Grouped daily bars (one per series) with caps, axes and tooltips."""
    scales = build_activity_scales(dataset, dims, config)
    if scales is None or dims is None:
        return None
    plot = scales.plot

    marks: list[Mark] = []
    marks.extend(
        right_value_axis(
            scales.axis,
            tick_count=config.axis_tick_count,
            plot_width=plot.width,
            label_padding=config.tick_padding,
            grid_color=config.grid_color,
            text_color=config.text_color,
            font_size=config.font_size,
        )
    )
    marks.extend(
        bottom_axis(
            scales.x,
            bottom_tick_labels(len(scales.x.domain), config.tick_labels),
            plot_height=plot.height,
            tick_padding=config.tick_padding,
            color=config.text_color,
            font_size=config.font_size,
        )
    )
    marks.append(baseline(plot.width, plot.height, color=config.baseline_color))

    annotations: list[AnnotationGroup] = []
    for index, record in enumerate(dataset.records):
        assert isinstance(record, WeightSession)
        marks.extend(_bar_marks(index, record, scales, config))
        annotations.append(_annotation(index, record, scales, config))

    band_starts = [scales.x(day) or 0.0 for day in scales.x.domain]
    slots = [scales.x.slot(i) for i in range(len(scales.x.domain))]
    context = RenderContext(
        annotations=annotations,
        hit_regions=band_hit_regions(band_starts, scales.x.bandwidth(), slots, plot.height),
        plot_width=plot.width,
        plot_height=plot.height,
        offset=(plot.x, plot.y),
        tooltip_shift=config.tooltip.shift,
    )
    return Scene(
        width=dims.width,
        height=dims.height,
        plot=plot,
        context=context,
        backdrop=_backdrop(dims, config),
        marks=marks,
    )


def bar_width(scales: ActivityScales, config: ActivityChartConfig) -> float:
    """Bar thickness, capped at one series step so neighbours never overlap."""
    if config.bar_width is None:
        return scales.series.bandwidth()
    return min(config.bar_width, scales.series.step())


def _bar_marks(index: int, record: WeightSession, scales: ActivityScales, config: ActivityChartConfig) -> list[Mark]:
    band_x = scales.x(record.day)
    if band_x is None:
        return []
    width = bar_width(scales, config)
    marks: list[Mark] = []
    for key in config.series_keys:
        value = record.value(key)
        offset = scales.series(key)
        if not math.isfinite(value) or offset is None:
            LOGGER.debug("skipping %s bar of record %d: value=%r", key, index, value)
            continue
        # Centred on the sub-band; a width up to one step stays inside the day band.
        x = band_x + offset + (scales.series.bandwidth() - width) / 2.0
        top = min(scales.plot.height, scales.value(max(0.0, value)))
        color = config.series_colors[key]
        marks.append(
            RectMark(
                x=x,
                y=top,
                width=width,
                height=scales.plot.height - top,
                fill=color,
                role="bar",
                record_index=index,
                series_key=key,
            )
        )
        marks.append(
            CircleMark(
                cx=x + width / 2.0,
                cy=top,
                r=width / 2.0,
                fill=color,
                role="bar-cap",
                record_index=index,
                series_key=key,
            )
        )
    return marks


def _annotation(index: int, record: WeightSession, scales: ActivityScales, config: ActivityChartConfig) -> AnnotationGroup:
    style = config.tooltip
    band_x = scales.x(record.day) or 0.0
    highlight = RectMark(
        x=band_x,
        y=0.0,
        width=scales.x.bandwidth(),
        height=scales.plot.height,
        fill=style.highlight_fill,
        opacity=style.highlight_opacity,
        role="highlight",
        record_index=index,
    )
    label: list[Mark] = [
        RectMark(
            x=0.0,
            y=0.0,
            width=style.label_width,
            height=style.label_height,
            fill=style.label_fill,
            role="tooltip-bubble",
            record_index=index,
        )
    ]
    rows = len(config.series_keys)
    for row, key in enumerate(config.series_keys):
        value = record.value(key)
        if not math.isfinite(value):
            continue
        label.append(
            TextMark(
                x=style.label_width / 2.0,
                y=style.label_height * (row + 1) / (rows + 1) + style.font_size / 3.0,
                text=format_value(value, config.series_units.get(key, "")),
                fill=style.text_fill,
                font_size=style.font_size,
                anchor="middle",
                role="tooltip-text",
                record_index=index,
            )
        )
    label_y = style.label_top if style.label_top is not None else 0.0
    return AnnotationGroup(
        record_index=index,
        anchor_x=band_x,
        highlight=highlight,
        label=tuple(label),
        label_width=style.label_width,
        label_y=label_y,
    )


def _backdrop(dims: Dimensions, config: ActivityChartConfig) -> list[Mark]:
    marks: list[Mark] = [
        RectMark(0.0, 0.0, dims.width, dims.height, fill=config.background, role="background"),
    ]
    if config.title:
        marks.append(
            TextMark(
                x=config.margins.left,
                y=HEADER_BASELINE,
                text=config.title,
                fill=config.title_color,
                font_size=TITLE_FONT_SIZE,
                role="title",
            )
        )
    # Legend entries are laid out right-to-left from the plot's right edge.
    x = dims.width - config.margins.right
    for key in reversed(config.series_keys):
        label = config.series_labels.get(key, key)
        label_w, _ = text_size(label, font_size_px=config.font_size)
        x -= label_w
        marks.append(
            TextMark(
                x=x,
                y=HEADER_BASELINE,
                text=label,
                fill=config.text_color,
                font_size=config.font_size,
                role="legend-label",
            )
        )
        x -= LEGEND_GAP
        marks.append(
            CircleMark(
                cx=x - LEGEND_SWATCH_RADIUS,
                cy=HEADER_BASELINE - config.font_size / 3.0,
                r=LEGEND_SWATCH_RADIUS,
                fill=config.series_colors[key],
                role="legend-swatch",
            )
        )
        x -= 2.0 * LEGEND_SWATCH_RADIUS + 3.0 * LEGEND_GAP
    return marks


def format_value(value: float, unit: str) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text}{unit}"
