"""Type definitions for chart inputs and computed metrics.

This module defines the dataclasses passed into and returned by the metrics
computer. Inputs can be built directly, from the plain-mapping shape used by
chart front-ends (camelCase keys), or from a pandas DataFrame.
"""

from __future__ import annotations

import collections.abc as cabc
import json
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np

from .errors import InvalidChartDataError

if TYPE_CHECKING:  # pragma: no cover
    import pandas as pd  # type: ignore

# A point is either a bare y-value or an ``[x, y]`` pair where ``y`` may be a
# sequence of stacked sub-values.
Point = Union[float, Sequence[Any]]


def is_sequence(value: Any) -> bool:
    """Return True for list-like values (lists, tuples, numpy arrays)."""
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return isinstance(value, (cabc.Sequence, np.ndarray))


@dataclass
class Margins:
    """Margins around the plotted area, in pixels.

    ``None`` means the side was left unspecified and is distinct from an
    explicit ``0``.
    """

    top: Optional[float] = None
    left: Optional[float] = None
    bottom: Optional[float] = None
    right: Optional[float] = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "Margins":
        return cls(
            top=mapping.get("top"),
            left=mapping.get("left"),
            bottom=mapping.get("bottom"),
            right=mapping.get("right"),
        )


@dataclass
class Dimensions:
    """Drawing-surface size and margins, in pixels.

    Attributes:
        width: Surface width; ``None`` means use the measured width.
        height: Surface height; ``None`` means derive it from the width.
        margins: Per-side margins; ``None`` means use the defaults.
    """

    width: Optional[float] = None
    height: Optional[float] = None
    margins: Optional[Margins] = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "Dimensions":
        """Build dimensions from ``{"width", "height", "margins": {...}}``.

        Raises:
            InvalidChartDataError: If ``margins`` is neither a mapping nor
                a :class:`Margins`.
        """
        margins = mapping.get("margins")
        if isinstance(margins, cabc.Mapping):
            margins = Margins.from_mapping(margins)
        elif margins is not None and not isinstance(margins, Margins):
            raise InvalidChartDataError(
                f"margins must be a mapping, got {type(margins).__name__}"
            )
        return cls(width=mapping.get("width"), height=mapping.get("height"), margins=margins)


@dataclass
class XAxisOptions:
    """X-axis switches.

    Attributes:
        disabled: Hide the x-axis and give its strip back to the chart.
        time_data: X values are epoch milliseconds; generate time ticks.
        extend_area_to_axis: Let filled areas run through the axis strip.
    """

    disabled: bool = False
    time_data: bool = False
    extend_area_to_axis: bool = False

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "XAxisOptions":
        def pick(camel: str, snake: str) -> bool:
            return bool(mapping.get(camel, mapping.get(snake, False)))

        return cls(
            disabled=pick("disabled", "disabled"),
            time_data=pick("timeData", "time_data"),
            extend_area_to_axis=pick("extendAreaToAxis", "extend_area_to_axis"),
        )


@dataclass
class Series:
    """One plotted data set.

    If the first point is an ``[x, y]`` pair, every point is treated as one.
    """

    data: List[Point] = field(default_factory=list)
    name: Optional[str] = None

    @property
    def is_paired(self) -> bool:
        return len(self.data) > 0 and is_sequence(self.data[0])


@dataclass
class ChartData:
    """All series of a chart plus the x-axis options."""

    series: List[Series] = field(default_factory=list)
    x_axis: XAxisOptions = field(default_factory=XAxisOptions)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "ChartData":
        """Build chart data from ``{"series": [...], "xAxis": {...}}``.

        Each series entry may be a mapping with a ``data`` key or a bare
        sequence of points.

        Raises:
            InvalidChartDataError: If ``series`` is missing or malformed.
        """
        raw_series = mapping.get("series")
        if not is_sequence(raw_series):
            raise InvalidChartDataError("chart data needs a 'series' sequence")

        series: List[Series] = []
        for i, entry in enumerate(raw_series):
            if isinstance(entry, Series):
                series.append(entry)
            elif isinstance(entry, cabc.Mapping):
                data = entry.get("data")
                if data is None:
                    data = []
                elif not is_sequence(data):
                    raise InvalidChartDataError(f"series[{i}].data must be a sequence")
                # Keep the caller's list object so the legacy in-place sort
                # stays visible to them.
                series.append(Series(data=data, name=entry.get("name")))
            elif is_sequence(entry):
                series.append(Series(data=entry))
            else:
                raise InvalidChartDataError(
                    f"series[{i}] must be a mapping or a sequence, got {type(entry).__name__}"
                )

        raw_axis = mapping.get("xAxis", mapping.get("x_axis")) or {}
        if isinstance(raw_axis, XAxisOptions):
            x_axis = raw_axis
        elif isinstance(raw_axis, cabc.Mapping):
            x_axis = XAxisOptions.from_mapping(raw_axis)
        else:
            raise InvalidChartDataError("xAxis must be a mapping")
        return cls(series=series, x_axis=x_axis)

    @classmethod
    def from_dataframe(
        cls,
        df: "pd.DataFrame",
        y: Union[str, Sequence[str]],
        x: Optional[str] = None,
        time_data: Optional[bool] = None,
        x_axis: Optional[XAxisOptions] = None,
    ) -> "ChartData":
        """Build one series per ``y`` column of a pandas DataFrame.

        Args:
            df: Source frame.
            y: Column name or names holding y-values.
            x: Optional column holding x-values. Datetime columns are
                converted to epoch milliseconds (UTC).
            time_data: Override for ``x_axis.time_data``. Defaults to True
                when ``x`` is a datetime column.
            x_axis: Base x-axis options.

        Returns:
            Chart data with paired points when ``x`` is given, bare y-values
            otherwise. Rows with a missing x or y are dropped.

        Raises:
            InvalidChartDataError: If a named column does not exist.
        """
        import pandas as pd

        y_cols = [y] if isinstance(y, str) else list(y)
        wanted = y_cols + ([x] if x is not None else [])
        missing = [c for c in wanted if c not in df.columns]
        if missing:
            raise InvalidChartDataError(f"Columns not found in DataFrame: {missing}")

        axis = x_axis or XAxisOptions()
        xs = None
        is_datetime = False
        if x is not None:
            x_col = df[x]
            is_datetime = pd.api.types.is_datetime64_any_dtype(x_col)
            if is_datetime:
                stamps = pd.to_datetime(x_col, utc=True)
                epoch = pd.Timestamp(0, tz="UTC")
                xs = (stamps - epoch) / pd.Timedelta(milliseconds=1)
            else:
                xs = pd.to_numeric(x_col, errors="coerce")

        series: List[Series] = []
        for col in y_cols:
            ys = pd.to_numeric(df[col], errors="coerce")
            if xs is None:
                data: List[Point] = [float(v) for v in ys.dropna()]
            else:
                frame = pd.DataFrame({"x": xs, "y": ys}).dropna()
                data = [[float(a), float(b)] for a, b in frame.itertuples(index=False)]
            series.append(Series(data=data, name=str(col)))

        use_time = is_datetime if time_data is None else bool(time_data)
        return cls(
            series=series,
            x_axis=XAxisOptions(
                disabled=axis.disabled,
                time_data=use_time,
                extend_area_to_axis=axis.extend_area_to_axis,
            ),
        )


@dataclass(frozen=True)
class TickDescriptor:
    """A labeled x-axis position: display text and epoch-millisecond x."""

    text: str
    x: float

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "x": self.x}


def _json_number(value: Any) -> Any:
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


@dataclass
class ChartMetrics:
    """Layout and axis metrics consumed by a chart renderer.

    Attributes:
        svg_width: Full surface width.
        svg_height: Full surface height.
        chart_width: Plot width inside the margins.
        chart_height: Plot height inside the margins and axis strip.
        x_data_min: Smallest x observed, NaN if no paired series.
        x_data_max: Largest x observed, NaN if no paired series.
        y_data_min: Padded y minimum (0 unless data goes negative).
        y_data_max: Padded y maximum (20% headroom).
        x_domain: ``[x_data_min, x_data_max]``.
        x_range: Left-to-right pixel range of the x-axis.
        y_domain: ``[y_data_min, y_data_max]``.
        y_range: Bottom-to-top pixel range of the y-axis.
        x_axis_label_start: Vertical offset of x-axis labels.
        x_axis_inclusive_area: Bottom of filled areas running through the
            axis strip.
        x_axis_points: Time-axis ticks, ascending by x.
        series: Point lists of every series, pair series sorted by x.
    """

    svg_width: float = math.nan
    svg_height: float = math.nan
    chart_width: float = math.nan
    chart_height: float = math.nan
    x_data_min: float = math.nan
    x_data_max: float = math.nan
    y_data_min: float = math.nan
    y_data_max: float = math.nan
    x_domain: List[float] = field(default_factory=list)
    x_range: List[float] = field(default_factory=list)
    y_domain: List[float] = field(default_factory=list)
    y_range: List[float] = field(default_factory=list)
    x_axis_label_start: Optional[float] = None
    x_axis_inclusive_area: Optional[float] = None
    x_axis_points: Optional[List[TickDescriptor]] = None
    series: List[List[Point]] = field(default_factory=list, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        """Return the metrics as a JSON-safe mapping with camelCase keys.

        NaN becomes ``None``; optional fields are omitted when unset.
        """
        out: Dict[str, Any] = {
            "svgWidth": self.svg_width,
            "svgHeight": self.svg_height,
            "chartWidth": self.chart_width,
            "chartHeight": self.chart_height,
            "xDataMin": self.x_data_min,
            "xDataMax": self.x_data_max,
            "yDataMin": self.y_data_min,
            "yDataMax": self.y_data_max,
            "xDomain": [_json_number(v) for v in self.x_domain],
            "xRange": [_json_number(v) for v in self.x_range],
            "yDomain": [_json_number(v) for v in self.y_domain],
            "yRange": [_json_number(v) for v in self.y_range],
        }
        out = {k: _json_number(v) for k, v in out.items()}
        if self.x_axis_label_start is not None:
            out["xAxisLabelStart"] = self.x_axis_label_start
        if self.x_axis_inclusive_area is not None:
            out["xAxisInclusiveArea"] = _json_number(self.x_axis_inclusive_area)
        if self.x_axis_points is not None:
            out["xAxisPoints"] = [p.to_dict() for p in self.x_axis_points]
        return out

    def save_json(self, path: str) -> None:
        """Write :meth:`to_dict` to a JSON file.

        Args:
            path: Destination file path. Parent directories must exist.
        """
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, ensure_ascii=False, indent=2)
