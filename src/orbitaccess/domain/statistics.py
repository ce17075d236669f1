# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Access and gap duration statistics.

Summarizes the durations of the visible (access) or not-visible (gap)
intervals of one or more sequences: max, mean, min and the 50th, 80th
and 90th percentiles. Percentiles interpolate between order statistics
at position p(n+1)/100 and clamp to min/max outside [1, n], the
estimator classic descriptive-statistics packages report by default.
"""
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from orbitaccess.domain.errors import NoMatchingIntervals
from orbitaccess.domain.intervals import IntervalSequence, Visibility


@dataclass(frozen=True)
class DurationStatistics:
    """Duration summary in seconds."""
    count: int
    max_s: float
    mean_s: float
    min_s: float
    p50_s: float
    p80_s: float
    p90_s: float


def _durations(sequence: IntervalSequence, state: Visibility) -> list[float]:
    return [iv.duration_seconds for iv in sequence.intervals() if iv.state is state]


def _summarize(durations: list[float]) -> DurationStatistics:
    arr = np.asarray(durations, dtype=float)
    # Position p(n+1)/100, clamped to the extremes.
    p50, p80, p90 = np.percentile(arr, [50.0, 80.0, 90.0], method="weibull")
    min_s = float(arr.min())
    max_s = float(arr.max())
    # Summation rounding can push the mean a hair outside [min, max].
    mean_s = min(max(float(arr.mean()), min_s), max_s)
    return DurationStatistics(
        count=int(arr.size),
        max_s=max_s,
        mean_s=mean_s,
        min_s=min_s,
        p50_s=float(p50),
        p80_s=float(p80),
        p90_s=float(p90),
    )


def compute_duration_statistics(
    sequence: IntervalSequence,
    measure_visible: bool,
) -> DurationStatistics:
    """
    Statistics over the intervals of one sequence in the requested state.

    Args:
        sequence: Visibility sequence.
        measure_visible: True for access durations, False for gap durations.

    Returns:
        DurationStatistics over the matching intervals.

    Raises:
        NoMatchingIntervals: If no interval has the requested state.
    """
    state = Visibility.from_bool(measure_visible)
    durations = _durations(sequence, state)
    if not durations:
        raise NoMatchingIntervals(f"Sequence has no {state.value} interval")
    return _summarize(durations)


def compute_pooled_statistics(
    sequences: Iterable[IntervalSequence],
    measure_visible: bool,
) -> DurationStatistics:
    """Statistics over the matching intervals of several sequences pooled together.

    Raises:
        NoMatchingIntervals: If no sequence has an interval in the requested state.
    """
    state = Visibility.from_bool(measure_visible)
    durations: list[float] = []
    for seq in sequences:
        durations.extend(_durations(seq, state))
    if not durations:
        raise NoMatchingIntervals(f"No {state.value} interval in any sequence")
    return _summarize(durations)


def format_statistics(label: str, stats: DurationStatistics) -> list[str]:
    """Report lines, e.g. 'Max access time 612.0 s'."""
    return [
        f"Max {label} time {stats.max_s:.1f} s",
        f"Mean {label} time {stats.mean_s:.1f} s",
        f"Min {label} time {stats.min_s:.1f} s",
        f"50th {label} time {stats.p50_s:.1f} s",
        f"80th {label} time {stats.p80_s:.1f} s",
        f"90th {label} time {stats.p90_s:.1f} s",
    ]
