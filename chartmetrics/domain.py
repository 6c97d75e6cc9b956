"""Running extent accumulator used for domain inference."""

from __future__ import annotations

import math
from typing import Tuple


class DomainTracker:
    """Tracks the minimum and maximum of a stream of values.

    The extent is seeded by the first finite value; until then both ends
    read as NaN. Non-finite values are ignored.
    """

    def __init__(self):
        self._seen = False
        self.min = math.nan
        self.max = math.nan

    @property
    def seen(self) -> bool:
        """Whether any finite value has been recorded."""
        return self._seen

    def update(self, value: float) -> None:
        """Widen the extent to include ``value``."""
        self.update_bounds(value, value)

    def update_bounds(self, low: float, high: float) -> None:
        """Widen the extent to include ``[low, high]``.

        Used for sorted series, where only the first and last values can
        extend the extent.
        """
        low = float(low)
        high = float(high)
        if not (math.isfinite(low) and math.isfinite(high)):
            return
        if not self._seen:
            self.min = low
            self.max = high
            self._seen = True
            return
        if low < self.min:
            self.min = low
        if high > self.max:
            self.max = high

    def merge(self, other: DomainTracker) -> None:
        """Merge another tracker's extent into this one."""
        if other.seen:
            self.update_bounds(other.min, other.max)

    def extent(self) -> Tuple[float, float]:
        return self.min, self.max

    def __repr__(self) -> str:
        return f"DomainTracker(min={self.min}, max={self.max})"
