"""Chart metrics computation.

This module turns resolved dimensions and raw series into the pixel extents,
data domains and display ranges a renderer needs, and attaches time-axis
ticks when the x-axis carries time data.
"""

from __future__ import annotations

import collections.abc as cabc
from typing import Any, List, Mapping, Optional, Union

import numpy as np

from .axis import AxisGenerator
from .config import MetricsConfig
from .dimensions import DimensionsLike, resolve_dimensions
from .domain import DomainTracker
from .errors import EmptyDatasetError, InvalidChartDataError
from .types import ChartData, ChartMetrics, Point, Series, is_sequence

ChartDataLike = Union[ChartData, Mapping[str, Any]]


def point_y_value(point: Point) -> float:
    """Return the y-value of a point, summing stacked sub-values."""
    y = point[1] if is_sequence(point) else point
    if is_sequence(y):
        return float(np.sum(np.asarray(y, dtype=float)))
    return float(y)


def sorted_points(series: Series) -> List[Point]:
    """Return the series points ordered by x (stable)."""
    return sorted(series.data, key=lambda p: p[0])


def _check_pairs(index: int, points) -> None:
    """Raise if a paired series holds a point that is not an ``[x, y]`` pair."""
    for j, point in enumerate(points):
        if not is_sequence(point) or len(point) < 2:
            raise InvalidChartDataError(
                f"series[{index}] point {j} is not an [x, y] pair: {point!r}"
            )


class MetricsComputer:
    """Computes :class:`ChartMetrics` for one chart.

    A computer holds only configuration and collaborators, so one instance
    can serve any number of charts.

    Attributes:
        config: Layout constants and behaviour switches.
        axis_generator: Produces time-axis ticks.
        logger: Logger for diagnostics.
    """

    def __init__(
        self,
        config: Optional[MetricsConfig] = None,
        axis_generator: Optional[AxisGenerator] = None,
    ):
        self.config = config or MetricsConfig()
        self.axis_generator = axis_generator or AxisGenerator.from_config(self.config)
        self.logger = self.config.get_logger(__name__)

    def compute(
        self,
        measured_width: Optional[float],
        dims: DimensionsLike,
        data: ChartDataLike,
    ) -> ChartMetrics:
        """Compute the metrics for ``data`` drawn on a surface.

        Args:
            measured_width: Measured surface width, or ``None``.
            dims: Partial dimensions; see :func:`resolve_dimensions`.
            data: Chart data, as :class:`ChartData` or its mapping form.

        Returns:
            A new :class:`ChartMetrics`.

        Raises:
            InvalidChartDataError: If ``data`` cannot be interpreted.
            EmptyDatasetError: In strict mode, if no point yields a y-value.
        """
        cfg = self.config
        data = self._coerce_data(data)
        dims = resolve_dimensions(measured_width, dims, cfg)
        margins = dims.margins
        self.logger.debug(
            "Resolved dimensions: %sx%s margins=%s", dims.width, dims.height, margins
        )

        metrics = ChartMetrics()
        metrics.svg_width = dims.width
        metrics.svg_height = dims.height

        # Chart height and width, leaving room for the x-axis strip
        axis_enabled = not data.x_axis.disabled
        metrics.chart_height = metrics.svg_height - margins.top - margins.bottom
        if axis_enabled:
            metrics.chart_height -= cfg.x_axis_height
            metrics.x_axis_label_start = (
                metrics.chart_height
                + margins.top
                + (cfg.x_axis_height - cfg.x_axis_label_inset)
            )
        metrics.chart_width = metrics.svg_width - margins.left - margins.right

        x_extent, y_extent = self._scan(data, metrics)
        if cfg.strict and not y_extent.seen:
            raise EmptyDatasetError("No series contributed a y-value")

        metrics.x_data_min, metrics.x_data_max = x_extent.extent()
        y_min, y_max = y_extent.extent()

        # Headroom above; below, pad negatives further down or start at zero
        y_max += y_max * cfg.y_headroom
        if y_min < 0:
            y_min += y_min * cfg.y_headroom
        else:
            y_min = 0.0
        metrics.y_data_min = y_min
        metrics.y_data_max = y_max

        metrics.x_domain = [metrics.x_data_min, metrics.x_data_max]
        metrics.x_range = [margins.left, metrics.chart_width + margins.left]
        metrics.y_domain = [metrics.y_data_min, metrics.y_data_max]
        metrics.y_range = [metrics.chart_height + margins.top, margins.top]

        if axis_enabled and data.x_axis.time_data:
            if data.x_axis.extend_area_to_axis:
                metrics.x_axis_inclusive_area = metrics.y_range[0] + cfg.x_axis_height
            points = self.axis_generator.generate(
                metrics.x_data_min, metrics.x_data_max, metrics.chart_width
            )
            # Without a margin the outermost tick would collide with the chart edge
            if not margins.left:
                points = points[1:]
            if not margins.right:
                points = points[:-1]
            metrics.x_axis_points = points

        return metrics

    def _scan(self, data: ChartData, metrics: ChartMetrics):
        """Single pass over every series, collecting x and y extents.

        Each series is reduced into its own y tracker, which is then merged
        into the chart-wide extent.
        """
        x_extent = DomainTracker()
        y_extent = DomainTracker()
        for index, series in enumerate(data.series):
            points = series.data
            if series.is_paired:
                _check_pairs(index, points)
                if self.config.sort_in_place and isinstance(points, list):
                    points.sort(key=lambda p: p[0])
                else:
                    points = sorted_points(series)
                x_extent.update_bounds(points[0][0], points[-1][0])
            elif not self.config.sort_in_place:
                points = list(points)
            metrics.series.append(points)

            series_y = DomainTracker()
            for point in points:
                series_y.update(point_y_value(point))
            y_extent.merge(series_y)

        if not y_extent.seen:
            self.logger.warning(
                "No series contributed a y-value; y domain will be NaN"
            )
        return x_extent, y_extent

    @staticmethod
    def _coerce_data(data: ChartDataLike) -> ChartData:
        if isinstance(data, ChartData):
            return data
        if isinstance(data, cabc.Mapping):
            return ChartData.from_mapping(data)
        raise InvalidChartDataError(
            f"Unsupported chart data type: {type(data).__name__}. "
            "Provide ChartData or a mapping with 'series' and 'xAxis'."
        )


def compute_chart_metrics(
    measured_width: Optional[float],
    dims: DimensionsLike,
    data: ChartDataLike,
    config: Optional[MetricsConfig] = None,
) -> ChartMetrics:
    """Compute chart metrics with a one-off :class:`MetricsComputer`."""
    return MetricsComputer(config).compute(measured_width, dims, data)
