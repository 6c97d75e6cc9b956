"""Time-axis tick generation.

Ticks are produced in three steps:

1. pick a bucketing regime (hourly, weekly, monthly) from the span in days;
2. build the candidate instants for that regime, adding the start when it is
   off the bucket grid and always adding the end;
3. thin the candidates so labels of a fixed average width do not overlap.

Thinning uses a fixed label footprint instead of measuring text, which keeps
the whole computation a single pass. Each regime's format is short enough
for that footprint.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, TypeVar

import pandas as pd

from .config import MetricsConfig
from .timeutils import (
    MS_PER_DAY,
    PandasTimeBuckets,
    StrftimeFormatter,
    TimeBuckets,
    TimeFormatter,
    to_epoch_ms,
    to_timestamp,
)
from .types import TickDescriptor

T = TypeVar("T")

HOURLY_MAX_DAYS = 2
WEEKLY_MAX_DAYS = 65


@dataclass(frozen=True)
class Regime:
    """A tick granularity and the label format that goes with it."""

    name: str
    pattern: str


HOURLY = Regime("hourly", "%I:%M %p")  # 09:00 AM
WEEKLY = Regime("weekly", "%b %d")  # Jan 21
MONTHLY = Regime("monthly", "%b %Y")  # Jan 2017


def select_regime(span_days: float) -> Regime:
    """Return the regime for a time span given in days."""
    if span_days < HOURLY_MAX_DAYS:
        return HOURLY
    if span_days < WEEKLY_MAX_DAYS:
        return WEEKLY
    return MONTHLY


def possible_label_count(chart_width: float, label_size: float) -> int:
    """Number of labels that fit in ``chart_width`` after reserving one slot."""
    if not math.isfinite(chart_width) or label_size <= 0:
        return 0
    return math.floor((chart_width - label_size) / label_size)


def thin_candidates(candidates: Sequence[T], possible_labels: int) -> List[T]:
    """Drop candidates so at most about ``possible_labels`` remain.

    The first and last candidates are always kept. In between, a candidate
    survives when its index is a multiple of
    ``len(candidates) // possible_labels``. When everything fits (that
    quotient is 0) all candidates are kept; when nothing fits
    (``possible_labels < 1``) only the two ends are kept.
    """
    last = len(candidates) - 1
    if possible_labels < 1:
        return [c for i, c in enumerate(candidates) if i == 0 or i == last]

    skip_count = len(candidates) // possible_labels
    if skip_count == 0:
        return list(candidates)
    return [
        c
        for i, c in enumerate(candidates)
        if i == 0 or i == last or i % skip_count == 0
    ]


class AxisGenerator:
    """Generates labeled ticks for a time-based x-axis.

    Attributes:
        buckets: Calendar range provider.
        formatter: Turns an instant into label text.
        label_size: Assumed average width of one label, in pixels.
        timezone: Timezone in which buckets and labels are computed.
    """

    def __init__(
        self,
        buckets: Optional[TimeBuckets] = None,
        formatter: Optional[TimeFormatter] = None,
        label_size: float = 62.5,
        timezone: str = "UTC",
        logger: Optional[logging.Logger] = None,
    ):
        self.buckets = buckets or PandasTimeBuckets()
        self.formatter = formatter or StrftimeFormatter()
        self.label_size = label_size
        self.timezone = timezone
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: MetricsConfig) -> "AxisGenerator":
        return cls(
            label_size=config.label_size,
            timezone=config.timezone,
            logger=config.get_logger(__name__),
        )

    def candidates(self, x_min: float, x_max: float) -> Tuple[Regime, List[pd.Timestamp]]:
        """Return the regime and unthinned tick instants for a domain.

        Args:
            x_min: Domain start in epoch milliseconds.
            x_max: Domain end in epoch milliseconds.
        """
        start = to_timestamp(x_min, self.timezone)
        end = to_timestamp(x_max, self.timezone)
        regime = select_regime((x_max - x_min) / MS_PER_DAY)

        instants: List[pd.Timestamp] = []
        if regime is HOURLY:
            if start.minute != 0:
                instants.append(start)
            instants.extend(self.buckets.hour_range(start, end, 1))
        elif regime is WEEKLY:
            if start.hour != 0:
                instants.append(start)
            instants.extend(self.buckets.day_range(start, end, 7))
        else:
            if start.day != 1:
                instants.append(start)
            instants.extend(self.buckets.month_range(start, end, 1))
        instants.append(end)
        return regime, instants

    def generate(self, x_min: float, x_max: float, chart_width: float) -> List[TickDescriptor]:
        """Return thinned, formatted ticks ascending by x.

        Args:
            x_min: Domain start in epoch milliseconds.
            x_max: Domain end in epoch milliseconds.
            chart_width: Pixel width available to the axis.

        Returns:
            Tick descriptors, or an empty list when the domain is not finite.
        """
        if not (math.isfinite(x_min) and math.isfinite(x_max)):
            self.logger.warning(
                "Time axis requested but the x domain is empty; no ticks generated"
            )
            return []

        regime, instants = self.candidates(x_min, x_max)
        possible_labels = possible_label_count(chart_width, self.label_size)
        if possible_labels < 1:
            self.logger.warning(
                "Chart width %.1fpx fits no %.1fpx labels; keeping axis ends only",
                chart_width,
                self.label_size,
            )
        kept = thin_candidates(instants, possible_labels)
        self.logger.debug(
            "Time axis: regime=%s candidates=%d possible_labels=%d kept=%d",
            regime.name,
            len(instants),
            possible_labels,
            len(kept),
        )
        return [
            TickDescriptor(text=self.formatter.format(regime.pattern, t), x=to_epoch_ms(t))
            for t in kept
        ]
