"""Exceptions raised by chartmetrics."""

from __future__ import annotations


class ChartMetricsError(Exception):
    """Base class for every error raised by this package."""


class EmptyDatasetError(ChartMetricsError, ValueError):
    """Raised in strict mode when no series contributes a y-value."""


class InvalidChartDataError(ChartMetricsError, TypeError):
    """Raised when chart data or dimensions cannot be interpreted."""
