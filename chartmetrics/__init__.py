"""chartmetrics package exports.

Preferred high-level API:
    from chartmetrics import compute_chart_metrics, ChartData, Dimensions
"""

from .axis import AxisGenerator, select_regime
from .config import MetricsConfig
from .dimensions import resolve_dimensions
from .errors import ChartMetricsError, EmptyDatasetError, InvalidChartDataError
from .metrics import MetricsComputer, compute_chart_metrics
from .timeutils import PandasTimeBuckets, StrftimeFormatter
from .types import (
    ChartData,
    ChartMetrics,
    Dimensions,
    Margins,
    Series,
    TickDescriptor,
    XAxisOptions,
)

__version__ = "0.1.0"

__all__ = [
    "AxisGenerator",
    "ChartData",
    "ChartMetrics",
    "ChartMetricsError",
    "Dimensions",
    "EmptyDatasetError",
    "InvalidChartDataError",
    "Margins",
    "MetricsComputer",
    "MetricsConfig",
    "PandasTimeBuckets",
    "Series",
    "StrftimeFormatter",
    "TickDescriptor",
    "XAxisOptions",
    "compute_chart_metrics",
    "resolve_dimensions",
    "select_regime",
]
