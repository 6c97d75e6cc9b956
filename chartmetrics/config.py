from __future__ import annotations

"""Configuration for the metrics computation.

Layout constants live here rather than in the algorithms so a renderer with a
different label font or axis strip can tune them without touching
`chartmetrics.metrics` or `chartmetrics.axis`.
"""

import logging
from dataclasses import dataclass
from typing import Optional


@dataclass
class MetricsConfig:
    """Configuration understood by the metrics computer.

    Attributes mirror what the computation needs: surface defaults, the
    reserved x-axis strip, the assumed label footprint used for tick thinning,
    y-axis headroom, the timezone used for time bucketing, and logging.
    """

    # Surface defaults
    default_width: float = 300.0  # used when no measured width is available
    height_ratio: float = 0.4
    default_margin: float = 50.0
    # X-axis strip
    x_axis_height: float = 50.0
    x_axis_label_inset: float = 16.0
    label_size: float = 62.5  # average rendered width of one tick label
    # Y-axis
    y_headroom: float = 0.2
    # Time axis
    timezone: str = "UTC"
    # Behaviour
    strict: bool = False  # raise EmptyDatasetError instead of propagating NaN
    sort_in_place: bool = False  # legacy: sort the caller's series directly
    # Logging
    logger: Optional[logging.Logger] = None
    log_level: int = logging.WARNING

    def get_logger(self, name: str) -> logging.Logger:
        """Return the configured logger, or the module logger for ``name``."""
        logger = self.logger or logging.getLogger(name)
        if self.logger is not None:
            logger.setLevel(self.log_level)
        return logger
