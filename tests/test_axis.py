"""Tests for time-axis tick generation."""

import logging
from typing import List

import pandas as pd
import pytest

from chartmetrics.axis import (
    HOURLY,
    MONTHLY,
    WEEKLY,
    AxisGenerator,
    possible_label_count,
    select_regime,
    thin_candidates,
)
from chartmetrics.timeutils import MS_PER_DAY, PandasTimeBuckets, to_epoch_ms


def ms(text: str, tz: str = "UTC") -> float:
    return to_epoch_ms(pd.Timestamp(text, tz=tz))


class RecordingBuckets(PandasTimeBuckets):
    """Pandas buckets that remember which range was asked for."""

    def __init__(self):
        self.calls: List[tuple] = []

    def hour_range(self, start, end, step=1):
        self.calls.append(("hour", step))
        return super().hour_range(start, end, step)

    def day_range(self, start, end, step=1):
        self.calls.append(("day", step))
        return super().day_range(start, end, step)

    def month_range(self, start, end, step=1):
        self.calls.append(("month", step))
        return super().month_range(start, end, step)


class TestSelectRegime:
    """Test regime boundaries at 2 and 65 days."""

    @pytest.mark.parametrize(
        "span_days,expected",
        [
            (0.0, HOURLY),
            (1.999, HOURLY),
            (2.0, WEEKLY),
            (30, WEEKLY),
            (64.999, WEEKLY),
            (65.0, MONTHLY),
            (3650, MONTHLY),
        ],
    )
    def test_boundaries(self, span_days, expected):
        assert select_regime(span_days) is expected

    def test_generator_follows_span_in_days(self):
        """Test the generator picks the regime from the millisecond span."""
        gen = AxisGenerator()
        start = ms("2024-01-01")
        for days, regime in [(1.999, HOURLY), (2.0, WEEKLY), (64.999, WEEKLY), (65.0, MONTHLY)]:
            chosen, _ = gen.candidates(start, start + days * MS_PER_DAY)
            assert chosen is regime


class TestThinning:
    """Test label thinning against a fixed label footprint."""

    def test_possible_label_count(self):
        assert possible_label_count(500, 62.5) == 7
        assert possible_label_count(125, 62.5) == 1
        assert possible_label_count(124, 62.5) == 0
        assert possible_label_count(float("nan"), 62.5) == 0

    def test_everything_fits_keeps_all(self):
        """Test a zero skip count keeps every candidate."""
        assert thin_candidates(list(range(6)), 7) == list(range(6))

    def test_keeps_multiples_and_ends(self):
        assert thin_candidates(list(range(10)), 3) == [0, 3, 6, 9]
        assert thin_candidates(list(range(11)), 3) == [0, 3, 6, 9, 10]

    def test_no_room_keeps_only_ends(self):
        assert thin_candidates(list(range(8)), 0) == [0, 7]
        assert thin_candidates(list(range(8)), -3) == [0, 7]

    def test_small_inputs(self):
        assert thin_candidates([], 4) == []
        assert thin_candidates(["only"], 0) == ["only"]


class TestAxisGenerator:
    """Test candidate construction, formatting and thinning together."""

    def setup_method(self):
        self.gen = AxisGenerator()

    def test_hourly_example(self):
        """Test 10:15 to 14:15: start prepended, whole hours, end appended."""
        ticks = self.gen.generate(ms("2024-01-15 10:15"), ms("2024-01-15 14:15"), 500)

        assert [t.text for t in ticks] == [
            "10:15 AM",
            "11:00 AM",
            "12:00 PM",
            "01:00 PM",
            "02:00 PM",
            "02:15 PM",
        ]
        assert ticks[0].x == ms("2024-01-15 10:15")
        assert ticks[-1].x == ms("2024-01-15 14:15")

    def test_hourly_start_on_the_hour_not_duplicated(self):
        ticks = self.gen.generate(ms("2024-01-15 10:00"), ms("2024-01-15 12:30"), 500)

        assert [t.text for t in ticks] == ["10:00 AM", "11:00 AM", "12:00 PM", "12:30 PM"]

    def test_weekly_from_midnight(self):
        """Test a midnight start is not prepended and days step by 7."""
        ticks = self.gen.generate(ms("2024-01-01"), ms("2024-01-31"), 500)

        assert [t.text for t in ticks] == [
            "Jan 01",
            "Jan 08",
            "Jan 15",
            "Jan 22",
            "Jan 29",
            "Jan 31",
        ]

    def test_weekly_off_midnight_start_prepended(self):
        ticks = self.gen.generate(ms("2024-01-01 06:00"), ms("2024-01-31"), 600)

        assert [t.text for t in ticks] == [
            "Jan 01",
            "Jan 02",
            "Jan 09",
            "Jan 16",
            "Jan 23",
            "Jan 30",
            "Jan 31",
        ]

    def test_monthly_thinned(self):
        """Test 13 monthly candidates in 300px keep every 4th plus the ends."""
        start, end = ms("2023-01-15"), ms("2023-12-31")
        regime, candidates = self.gen.candidates(start, end)
        ticks = self.gen.generate(start, end, 300)

        assert regime is MONTHLY
        assert len(candidates) == 13
        assert [t.text for t in ticks] == ["Jan 2023", "May 2023", "Sep 2023", "Dec 2023"]
        assert ticks[0].x == start
        assert ticks[1].x == ms("2023-05-01")
        assert ticks[-1].x == end

    def test_monthly_first_of_month_not_prepended(self):
        _, candidates = self.gen.candidates(ms("2023-01-01"), ms("2023-06-01"))

        assert [c.month for c in candidates] == [1, 2, 3, 4, 5, 6]

    @pytest.mark.parametrize(
        "start,end",
        [
            ("2024-01-15 10:15", "2024-01-15 14:15"),
            ("2024-01-01", "2024-02-20"),
            ("2015-03-10", "2024-03-10"),
        ],
    )
    @pytest.mark.parametrize("width", [130, 200, 800])
    def test_first_and_last_always_kept(self, start, end, width):
        """Test at least two ticks survive whenever two candidates exist."""
        _, candidates = self.gen.candidates(ms(start), ms(end))
        ticks = self.gen.generate(ms(start), ms(end), width)

        assert len(candidates) >= 2
        assert len(ticks) >= 2
        assert ticks[0].x == ms(start)
        assert ticks[-1].x == ms(end)

    def test_ticks_ascending(self):
        ticks = self.gen.generate(ms("2010-01-01"), ms("2024-06-30"), 900)
        xs = [t.x for t in ticks]

        assert xs == sorted(xs)

    def test_uses_buckets_for_regime(self):
        """Test each regime asks its collaborator for the right unit and step."""
        buckets = RecordingBuckets()
        gen = AxisGenerator(buckets=buckets)
        gen.generate(ms("2024-01-01"), ms("2024-01-01 05:00"), 400)
        gen.generate(ms("2024-01-01"), ms("2024-01-20"), 400)
        gen.generate(ms("2024-01-01"), ms("2024-08-01"), 400)

        assert buckets.calls == [("hour", 1), ("day", 7), ("month", 1)]

    def test_timezone_changes_wall_clock(self):
        """Test labels are rendered in the configured timezone."""
        gen = AxisGenerator(timezone="America/New_York")
        ticks = gen.generate(ms("2024-01-15 15:15"), ms("2024-01-15 17:00"), 500)

        assert [t.text for t in ticks] == ["10:15 AM", "11:00 AM", "12:00 PM"]

    def test_hourly_across_fall_back(self):
        """Test the repeated 1 AM hour is labeled twice at distinct instants."""
        tz = "America/New_York"
        gen = AxisGenerator(timezone=tz)
        ticks = gen.generate(ms("2024-11-03 00:30", tz), ms("2024-11-03 06:30", tz), 800)
        xs = [t.x for t in ticks]

        assert [t.text for t in ticks] == [
            "12:30 AM",
            "01:00 AM",
            "01:00 AM",
            "02:00 AM",
            "03:00 AM",
            "04:00 AM",
            "05:00 AM",
            "06:00 AM",
            "06:30 AM",
        ]
        assert all(a < b for a, b in zip(xs, xs[1:]))

    def test_hourly_across_spring_forward(self):
        tz = "America/New_York"
        gen = AxisGenerator(timezone=tz)
        ticks = gen.generate(ms("2024-03-10 01:30", tz), ms("2024-03-10 06:30", tz), 800)

        assert [t.text for t in ticks] == [
            "01:30 AM",
            "03:00 AM",
            "04:00 AM",
            "05:00 AM",
            "06:00 AM",
            "06:30 AM",
        ]

    def test_monthly_across_dst_stays_on_midnight(self):
        tz = "America/New_York"
        gen = AxisGenerator(timezone=tz)
        _, candidates = gen.candidates(ms("2024-01-15", tz), ms("2024-12-20", tz))

        assert [c.month for c in candidates[1:-1]] == list(range(2, 13))
        assert all(c.hour == 0 and c.day == 1 for c in candidates[1:-1])

    def test_nan_domain_gives_no_ticks(self, caplog):
        with caplog.at_level(logging.WARNING):
            ticks = self.gen.generate(float("nan"), float("nan"), 500)

        assert ticks == []
        assert "x domain is empty" in caplog.text

    def test_narrow_chart_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            ticks = self.gen.generate(ms("2024-01-01"), ms("2024-08-01"), 100)

        assert len(ticks) == 2
        assert "fits no" in caplog.text
