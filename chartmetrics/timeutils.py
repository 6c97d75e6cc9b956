"""Time bucketing and date formatting collaborators for the axis generator.

The axis generator only needs three calendar ranges and a formatter. They are
described here as protocols so the tick selection logic can be exercised with
fakes, with pandas-backed implementations used by default.
"""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable

import pandas as pd

MS_PER_DAY = 86_400_000

_EPOCH = pd.Timestamp(0, tz="UTC")


def to_timestamp(ms: float, tz: str = "UTC") -> pd.Timestamp:
    """Convert epoch milliseconds to a timezone-aware timestamp."""
    return pd.Timestamp(ms, unit="ms", tz="UTC").tz_convert(tz)


def to_epoch_ms(instant: pd.Timestamp) -> float:
    """Convert a timestamp back to epoch milliseconds."""
    if instant.tzinfo is None:
        instant = instant.tz_localize("UTC")
    return float((instant - _EPOCH) / pd.Timedelta(milliseconds=1))


@runtime_checkable
class TimeBuckets(Protocol):
    """Calendar ranges between two instants.

    Each range starts at ``start`` rounded up to the unit, advances ``step``
    units at a time and stops before ``end``.
    """

    def hour_range(self, start: pd.Timestamp, end: pd.Timestamp, step: int = 1) -> List[pd.Timestamp]: ...

    def day_range(self, start: pd.Timestamp, end: pd.Timestamp, step: int = 1) -> List[pd.Timestamp]: ...

    def month_range(self, start: pd.Timestamp, end: pd.Timestamp, step: int = 1) -> List[pd.Timestamp]: ...


@runtime_checkable
class TimeFormatter(Protocol):
    def format(self, pattern: str, instant: pd.Timestamp) -> str: ...


def _wall_clock(instant: pd.Timestamp) -> pd.Timestamp:
    """Naive local wall time of ``instant``."""
    if instant.tzinfo is None:
        return instant
    return instant.tz_localize(None)


def _localize(wall: pd.Timestamp, tz) -> pd.Timestamp:
    """Attach ``tz`` to a wall time, resolving DST gaps and overlaps.

    A wall time skipped by a spring-forward change moves to the first valid
    instant after the gap; a repeated one resolves to its first occurrence.
    """
    if tz is None:
        return wall
    return wall.tz_localize(tz, ambiguous=True, nonexistent="shift_forward")


class PandasTimeBuckets:
    """:class:`TimeBuckets` built on pandas timestamps.

    Buckets are computed in the timezone of the ``start`` timestamp. Hours
    advance by absolute time, so a fall-back change yields two ticks with
    the same wall-clock hour and a spring-forward change skips one. Days and
    months advance on the local calendar, so a daily bucket stays on
    midnight across DST changes; a midnight that does not exist moves to the
    end of the gap.
    """

    def hour_range(self, start: pd.Timestamp, end: pd.Timestamp, step: int = 1) -> List[pd.Timestamp]:
        if step < 1:
            return []
        # Step back to the local top of the hour in absolute time; ceil() would
        # localize the rounded wall time and raise on ambiguous hours.
        past_hour = pd.Timedelta(
            minutes=start.minute,
            seconds=start.second,
            microseconds=start.microsecond,
            nanoseconds=start.nanosecond,
        )
        first = start if past_hour == pd.Timedelta(0) else start - past_hour + pd.Timedelta(hours=1)

        hours: List[pd.Timestamp] = []
        stride = pd.Timedelta(hours=step)
        current = first
        while current < end:
            hours.append(current)
            current = current + stride
        return hours

    def day_range(self, start: pd.Timestamp, end: pd.Timestamp, step: int = 1) -> List[pd.Timestamp]:
        if step < 1:
            return []
        first = _wall_clock(start).normalize()
        if _localize(first, start.tz) < start:
            first = first + pd.DateOffset(days=1)
        return self._calendar_range(first, end, pd.DateOffset(days=step), start.tz)

    def month_range(self, start: pd.Timestamp, end: pd.Timestamp, step: int = 1) -> List[pd.Timestamp]:
        if step < 1:
            return []
        first = _wall_clock(start).normalize().replace(day=1)
        if _localize(first, start.tz) < start:
            first = first + pd.DateOffset(months=1)
        return self._calendar_range(first, end, pd.DateOffset(months=step), start.tz)

    @staticmethod
    def _calendar_range(first: pd.Timestamp, end: pd.Timestamp, freq, tz) -> List[pd.Timestamp]:
        """Step ``freq`` through naive wall times, localizing each one.

        The naive range runs one day past ``end`` so a DST shift near the end
        cannot drop a bucket; the exclusive end is applied after
        localization.
        """
        last = _wall_clock(end) + pd.Timedelta(days=1)
        if not first < last:
            return []
        walls = pd.date_range(start=first, end=last, freq=freq)
        return [t for t in (_localize(w, tz) for w in walls) if t < end]


class StrftimeFormatter:
    """:class:`TimeFormatter` using ``Timestamp.strftime`` patterns."""

    def format(self, pattern: str, instant: pd.Timestamp) -> str:
        return instant.strftime(pattern)
