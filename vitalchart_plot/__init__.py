from vitalchart_plot.chart import ActivityChart, AverageSessionsChart, Chart
from vitalchart_plot.config import (
    ActivityChartConfig,
    AverageChartConfig,
    Margins,
    TooltipStyle,
    default_config,
    load_chart_config,
)
from vitalchart_plot.errors import PlotDataError
from vitalchart_plot.records import AverageSession, Dataset, WeightSession
from vitalchart_plot.scales import BandScale, LinearScale
from vitalchart_plot.scene import Scene

__all__ = [
    "ActivityChart",
    "ActivityChartConfig",
    "AverageChartConfig",
    "AverageSession",
    "AverageSessionsChart",
    "BandScale",
    "Chart",
    "Dataset",
    "LinearScale",
    "Margins",
    "PlotDataError",
    "Scene",
    "TooltipStyle",
    "WeightSession",
    "default_config",
    "load_chart_config",
]
