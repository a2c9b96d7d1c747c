from __future__ import annotations

from dataclasses import dataclass
import logging

import numpy as np

from vitalchart_core.dimensions import Dimensions
from vitalchart_plot.config import ActivityChartConfig, AverageChartConfig, Margins
from vitalchart_plot.records import Dataset
from vitalchart_plot.scales import BandScale, LinearScale, extent, widen_domain


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlotArea:
    """Margin-adjusted plotting rectangle in surface coordinates."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class ActivityScales:
    plot: PlotArea
    x: BandScale
    series: BandScale
    axis: LinearScale
    value: LinearScale


@dataclass(frozen=True)
class AverageScales:
    plot: PlotArea
    x: BandScale
    value: LinearScale


def plot_area(dims: Dimensions | None, margins: Margins) -> PlotArea | None:
    if dims is None:
        return None
    width = dims.width - margins.left - margins.right
    height = dims.height - margins.top - margins.bottom
    if width <= 0 or height <= 0:
        return None
    return PlotArea(x=margins.left, y=margins.top, width=width, height=height)


def build_activity_scales(
    dataset: Dataset,
    dims: Dimensions | None,
    config: ActivityChartConfig,
) -> ActivityScales | None:
    plot = plot_area(dims, config.margins)
    if plot is None or dataset.empty:
        LOGGER.debug("activity scales not ready: plot=%s records=%d", plot, len(dataset))
        return None

    values = dataset.stacked_values(config.series_keys)
    value_extent = extent(values.ravel())
    axis_extent = extent(dataset.values(config.axis_key))
    if value_extent is None:
        LOGGER.debug("activity dataset has no finite values")
        return None

    x = BandScale(tuple(dataset.days()), (0.0, plot.width), padding_inner=config.band_padding)
    series = BandScale(config.series_keys, (0.0, x.bandwidth()), padding_inner=config.series_padding)

    if axis_extent is None:
        axis_extent = value_extent
    axis = LinearScale(
        widen_domain(*axis_extent),
        (plot.height, min(plot.height * 0.5, config.axis_top_inset)),
    )
    top = max(0.0, value_extent[1]) * config.headroom_factor
    value = LinearScale(widen_domain(0.0, top), (plot.height, 0.0))
    return ActivityScales(plot=plot, x=x, series=series, axis=axis, value=value)


def build_average_scales(
    dataset: Dataset,
    dims: Dimensions | None,
    config: AverageChartConfig,
) -> AverageScales | None:
    plot = plot_area(dims, config.margins)
    if plot is None or dataset.empty:
        LOGGER.debug("average scales not ready: plot=%s records=%d", plot, len(dataset))
        return None

    lengths = dataset.values(config.value_key)
    if not np.any(np.isfinite(lengths)):
        LOGGER.debug("average dataset has no finite values")
        return None

    x = BandScale(tuple(dataset.days()), (0.0, plot.width), padding_inner=config.band_padding)
    top = max(0.0, float(np.nanmax(lengths)))
    value = LinearScale(
        widen_domain(0.0, top),
        (plot.height, min(plot.height * 0.5, config.value_top_inset)),
    )
    return AverageScales(plot=plot, x=x, value=value)
