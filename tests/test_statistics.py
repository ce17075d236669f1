# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for access/gap duration statistics."""
from datetime import datetime, timedelta, timezone

import pytest

from orbitaccess.domain.errors import NoMatchingIntervals
from orbitaccess.domain.intervals import Horizon, IntervalSequence, Visibility
from orbitaccess.domain.statistics import (
    DurationStatistics,
    compute_duration_statistics,
    compute_pooled_statistics,
    format_statistics,
)


T0 = datetime(2026, 3, 20, 12, 0, 0, tzinfo=timezone.utc)
HORIZON = Horizon(T0, T0 + timedelta(seconds=3600))


def _windows(*pairs):
    return IntervalSequence.from_windows(
        HORIZON,
        [(T0 + timedelta(seconds=a), T0 + timedelta(seconds=b)) for a, b in pairs],
    )


class TestDurationStatistics:

    def test_access_durations(self):
        # Accesses of 100, 200, 300 s
        seq = _windows((100, 200), (500, 700), (1000, 1300))
        stats = compute_duration_statistics(seq, measure_visible=True)
        assert stats.count == 3
        assert stats.min_s == 100.0
        assert stats.max_s == 300.0
        assert stats.mean_s == pytest.approx(200.0)
        assert stats.p50_s == pytest.approx(200.0)
        # Positions 3.2 and 3.6 of n=3 clamp to the maximum
        assert stats.p80_s == pytest.approx(300.0)
        assert stats.p90_s == pytest.approx(300.0)

    def test_two_samples_clamp_to_maximum(self):
        seq = _windows((100, 200), (500, 700))
        stats = compute_duration_statistics(seq, measure_visible=True)
        assert (stats.p50_s, stats.p80_s, stats.p90_s) == pytest.approx((150.0, 200.0, 200.0))

    def test_interpolates_between_order_statistics(self):
        # Accesses of 10, 20, ..., 100 s: p80 at position 8.8, p90 at 9.9
        pairs = [(k * 200, k * 200 + 10 * (k + 1)) for k in range(10)]
        stats = compute_duration_statistics(_windows(*pairs), measure_visible=True)
        assert stats.p50_s == pytest.approx(55.0)
        assert stats.p80_s == pytest.approx(88.0)
        assert stats.p90_s == pytest.approx(99.0)

    def test_gap_durations_include_edges(self):
        seq = _windows((100, 200), (500, 700))
        stats = compute_duration_statistics(seq, measure_visible=False)
        # Gaps: [0,100) 100 s, [200,500) 300 s, [700,3600] 2900 s
        assert stats.count == 3
        assert stats.min_s == 100.0
        assert stats.max_s == 2900.0

    def test_single_interval(self):
        seq = _windows((100, 400))
        stats = compute_duration_statistics(seq, measure_visible=True)
        assert stats.min_s == stats.max_s == stats.mean_s == stats.p90_s == 300.0

    def test_constant_not_visible_has_no_access(self):
        seq = IntervalSequence.constant(HORIZON, Visibility.NOT_VISIBLE)
        with pytest.raises(NoMatchingIntervals):
            compute_duration_statistics(seq, measure_visible=True)

    def test_constant_not_visible_gap_is_whole_horizon(self):
        seq = IntervalSequence.constant(HORIZON, Visibility.NOT_VISIBLE)
        stats = compute_duration_statistics(seq, measure_visible=False)
        assert stats.count == 1
        assert stats.max_s == 3600.0

    def test_constant_visible_has_no_gap(self):
        seq = IntervalSequence.constant(HORIZON, Visibility.VISIBLE)
        with pytest.raises(NoMatchingIntervals):
            compute_duration_statistics(seq, measure_visible=False)

    def test_frozen(self):
        stats = compute_duration_statistics(_windows((100, 400)), True)
        with pytest.raises(AttributeError):
            stats.max_s = 0.0


class TestPooledStatistics:

    def test_pools_all_sequences(self):
        a = _windows((100, 200))
        b = _windows((1000, 1400))
        stats = compute_pooled_statistics([a, b], measure_visible=True)
        assert stats.count == 2
        assert stats.min_s == 100.0
        assert stats.max_s == 400.0

    def test_skips_sequences_without_matches(self):
        a = IntervalSequence.constant(HORIZON, Visibility.NOT_VISIBLE)
        b = _windows((1000, 1400))
        stats = compute_pooled_statistics([a, b], measure_visible=True)
        assert stats.count == 1

    def test_no_matches_anywhere(self):
        a = IntervalSequence.constant(HORIZON, Visibility.NOT_VISIBLE)
        with pytest.raises(NoMatchingIntervals):
            compute_pooled_statistics([a], measure_visible=True)

    def test_empty_input(self):
        with pytest.raises(NoMatchingIntervals):
            compute_pooled_statistics([], measure_visible=False)


class TestFormatStatistics:

    def test_lines(self):
        stats = DurationStatistics(
            count=3, max_s=300.0, mean_s=200.0, min_s=100.0,
            p50_s=200.0, p80_s=260.0, p90_s=280.0,
        )
        lines = format_statistics("access", stats)
        assert lines[0] == "Max access time 300.0 s"
        assert lines[-1] == "90th access time 280.0 s"
        assert len(lines) == 6
