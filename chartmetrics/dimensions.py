"""Normalization of partial size and margin specifications."""

from __future__ import annotations

import collections.abc as cabc
import math
from typing import Any, Mapping, Optional, Union

from .config import MetricsConfig
from .errors import InvalidChartDataError
from .types import Dimensions, Margins

DimensionsLike = Union[Dimensions, Mapping[str, Any], None]


def _coerce_dimensions(dims: DimensionsLike) -> Optional[Dimensions]:
    if dims is None or isinstance(dims, Dimensions):
        return dims
    if isinstance(dims, cabc.Mapping):
        return Dimensions.from_mapping(dims)
    raise InvalidChartDataError(
        f"dimensions must be Dimensions or a mapping, got {type(dims).__name__}"
    )


def resolve_dimensions(
    measured_width: Optional[float] = None,
    dims: DimensionsLike = None,
    config: Optional[MetricsConfig] = None,
) -> Dimensions:
    """Fill every unset field of ``dims``.

    Args:
        measured_width: Width of the drawing surface as measured by the host,
            or ``None`` when it could not be measured.
        dims: Partial dimensions. Falsy ``width``/``height`` are replaced,
            margin sides are replaced only when ``None`` (an explicit ``0``
            is kept).
        config: Supplies the default width, height ratio and margin.

    Returns:
        A new :class:`Dimensions` with every field set. ``dims`` is left
        untouched.
    """
    cfg = config or MetricsConfig()
    if measured_width is None or (
        isinstance(measured_width, float) and math.isnan(measured_width)
    ):
        possible_width = cfg.default_width
    else:
        possible_width = measured_width

    dims = _coerce_dimensions(dims)
    if dims is None:
        return Dimensions(
            width=possible_width,
            height=possible_width * cfg.height_ratio,
            margins=_default_margins(cfg),
        )

    width = dims.width or possible_width
    height = dims.height or width * cfg.height_ratio

    given = dims.margins or Margins()
    default = cfg.default_margin
    margins = Margins(
        top=default if given.top is None else given.top,
        left=default if given.left is None else given.left,
        bottom=default if given.bottom is None else given.bottom,
        right=default if given.right is None else given.right,
    )
    return Dimensions(width=width, height=height, margins=margins)


def _default_margins(cfg: MetricsConfig) -> Margins:
    m = cfg.default_margin
    return Margins(top=m, left=m, bottom=m, right=m)
