# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
OR-combination of visibility sequences.

Merges the per-location sequences of one instrument into a single
"instrument sees at least one location" sequence with a sweep line over
all boundaries. Events sharing a timestamp are applied together before
the combined state is evaluated, so a set and a rise at the same
instant leave no gap.

No external dependencies — only stdlib dataclasses/heapq/itertools.
"""
import heapq
from dataclasses import dataclass
from itertools import groupby
from typing import Iterable

from orbitaccess.domain.errors import EmptyMergeSet, HorizonMismatch
from orbitaccess.domain.intervals import Horizon, IntervalSequence, Visibility


@dataclass(frozen=True)
class MergedInstrumentTimeline:
    """OR-combined sequence for one instrument of one satellite."""
    satellite: str
    instrument: str
    sequence: IntervalSequence


def _events(sequence: IntervalSequence):
    """Yield (time, delta) where delta is +1 on rise and -1 on set."""
    delta = 1 if sequence.initial_state is Visibility.NOT_VISIBLE else -1
    for b in sequence.boundaries:
        yield b, delta
        delta = -delta


def merge_sequences(
    sequences: Iterable[IntervalSequence],
    horizon: Horizon,
    require_input: bool = False,
) -> IntervalSequence:
    """
    OR-combine sequences defined over the same horizon.

    Args:
        sequences: Sequences to combine (any iterable, consumed once).
        horizon: Horizon every sequence must be defined over.
        require_input: Raise instead of returning the constant
            NOT_VISIBLE sequence when no sequences are given.

    Returns:
        IntervalSequence that is VISIBLE wherever at least one input is.

    Raises:
        HorizonMismatch: If any sequence has a different horizon.
        EmptyMergeSet: If sequences is empty and require_input is set.
    """
    seqs = list(sequences)
    for seq in seqs:
        if seq.horizon != horizon:
            raise HorizonMismatch(
                f"Sequence horizon {seq.horizon.start}..{seq.horizon.end} "
                f"differs from {horizon.start}..{horizon.end}"
            )
    if not seqs:
        if require_input:
            raise EmptyMergeSet("Merge requires at least one sequence")
        return IntervalSequence.constant(horizon, Visibility.NOT_VISIBLE)

    visible_count = sum(1 for s in seqs if s.initial_state is Visibility.VISIBLE)
    initial = Visibility.from_bool(visible_count > 0)
    combined = initial
    boundaries = []

    merged = heapq.merge(*(_events(s) for s in seqs), key=lambda e: e[0])
    for t, group in groupby(merged, key=lambda e: e[0]):
        visible_count += sum(delta for _, delta in group)
        state = Visibility.from_bool(visible_count > 0)
        if state is not combined:
            boundaries.append(t)
            combined = state

    return IntervalSequence(horizon=horizon, initial_state=initial, boundaries=tuple(boundaries))


def merge_pair(a: IntervalSequence, b: IntervalSequence) -> IntervalSequence:
    """OR-combine two sequences over a's horizon."""
    return merge_sequences([a, b], a.horizon)
