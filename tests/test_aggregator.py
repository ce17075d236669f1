# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the nested access aggregator."""
import threading
from datetime import datetime, timedelta, timezone

import pytest

from orbitaccess.domain.aggregator import AccessAggregator, AggregatorState
from orbitaccess.domain.errors import (
    AggregatorSealed,
    HorizonMismatch,
    NoLocationsRecorded,
)
from orbitaccess.domain.intervals import Horizon, IntervalSequence, Visibility


# ── Helpers ──────────────────────────────────────────────────────────

T0 = datetime(2026, 3, 20, 12, 0, 0, tzinfo=timezone.utc)
HORIZON = Horizon(T0, T0 + timedelta(seconds=3600))


def _t(seconds):
    return T0 + timedelta(seconds=seconds)


def _windows(*pairs):
    return IntervalSequence.from_windows(HORIZON, [(_t(a), _t(b)) for a, b in pairs])


@pytest.fixture
def aggregator():
    agg = AccessAggregator(HORIZON)
    agg.record("SAT-1", "CAM", "Delft", _windows((100, 300)))
    agg.record("SAT-1", "CAM", "Boston", _windows((250, 500)))
    agg.record("SAT-1", "SAR", "Delft", _windows((1000, 1100)))
    agg.record("SAT-2", "CAM", "Delft", _windows())
    return agg


# ── Lifecycle ────────────────────────────────────────────────────────

class TestLifecycle:

    def test_starts_open(self):
        agg = AccessAggregator(HORIZON)
        assert agg.state is AggregatorState.OPEN
        assert not agg.is_sealed

    def test_seal_is_one_way(self, aggregator):
        aggregator.seal()
        assert aggregator.state is AggregatorState.SEALED
        aggregator.seal()
        assert aggregator.is_sealed

    def test_record_after_seal_raises(self, aggregator):
        aggregator.seal()
        with pytest.raises(AggregatorSealed):
            aggregator.record("SAT-1", "CAM", "Delft", _windows())

    def test_declare_after_seal_raises(self, aggregator):
        aggregator.seal()
        with pytest.raises(AggregatorSealed):
            aggregator.declare("SAT-3", ["CAM"])

    def test_discard_after_seal_raises(self, aggregator):
        aggregator.seal()
        with pytest.raises(AggregatorSealed):
            aggregator.discard("SAT-1")

    def test_overwrite_before_seal(self, aggregator):
        replacement = _windows((10, 20))
        aggregator.record("SAT-1", "CAM", "Delft", replacement)
        assert aggregator.get("SAT-1", "CAM", "Delft") == replacement

    def test_reads_allowed_after_seal(self, aggregator):
        aggregator.seal()
        assert aggregator.merged_for("SAT-1", "CAM").boundaries == (_t(100), _t(500))

    def test_horizon_mismatch_rejected(self):
        agg = AccessAggregator(HORIZON)
        other = Horizon(T0, T0 + timedelta(seconds=60))
        with pytest.raises(HorizonMismatch):
            agg.record("SAT-1", "CAM", "Delft", IntervalSequence.constant(other, Visibility.VISIBLE))


# ── Lookup and merge ────────────────────────────────────────────────

class TestMergedFor:

    def test_merges_all_locations(self, aggregator):
        merged = aggregator.merged_for("SAT-1", "CAM")
        assert merged.initial_state is Visibility.NOT_VISIBLE
        assert merged.boundaries == (_t(100), _t(500))

    def test_single_location(self, aggregator):
        merged = aggregator.merged_for("SAT-1", "SAR")
        assert merged == aggregator.get("SAT-1", "SAR", "Delft")

    def test_declared_instrument_without_locations(self):
        agg = AccessAggregator(HORIZON)
        agg.declare("SAT-1", ["CAM"])
        with pytest.raises(NoLocationsRecorded):
            agg.merged_for("SAT-1", "CAM")

    def test_absent_satellite(self, aggregator):
        with pytest.raises(NoLocationsRecorded):
            aggregator.merged_for("SAT-9", "CAM")

    def test_absent_instrument(self, aggregator):
        with pytest.raises(NoLocationsRecorded):
            aggregator.merged_for("SAT-1", "LIDAR")

    def test_get_absent_raises_key_error(self, aggregator):
        with pytest.raises(KeyError):
            aggregator.get("SAT-1", "CAM", "Paris")

    def test_merged_timeline(self, aggregator):
        tl = aggregator.merged_timeline("SAT-1", "CAM")
        assert tl.satellite == "SAT-1"
        assert tl.instrument == "CAM"
        assert tl.sequence == aggregator.merged_for("SAT-1", "CAM")

    def test_merged_timelines_skip_empty_instruments(self, aggregator):
        aggregator.declare("SAT-3", ["CAM"])
        names = [(tl.satellite, tl.instrument) for tl in aggregator.merged_timelines()]
        assert names == [("SAT-1", "CAM"), ("SAT-1", "SAR"), ("SAT-2", "CAM")]


# ── Traversal ────────────────────────────────────────────────────────

class TestTraversal:

    def test_insertion_order(self, aggregator):
        keys = [(s, i, loc) for s, i, loc, _ in aggregator.triples()]
        assert keys == [
            ("SAT-1", "CAM", "Delft"),
            ("SAT-1", "CAM", "Boston"),
            ("SAT-1", "SAR", "Delft"),
            ("SAT-2", "CAM", "Delft"),
        ]

    def test_declaration_order_wins_over_record_order(self):
        agg = AccessAggregator(HORIZON)
        agg.declare("SAT-A", ["X", "Y"])
        agg.declare("SAT-B", ["Z"])
        agg.record("SAT-B", "Z", "Delft", _windows())
        agg.record("SAT-A", "Y", "Delft", _windows())
        agg.record("SAT-A", "X", "Delft", _windows())
        assert agg.satellites() == ["SAT-A", "SAT-B"]
        assert agg.instruments("SAT-A") == ["X", "Y"]

    def test_traversal_is_restartable(self, aggregator):
        first = list(aggregator.triples())
        second = list(aggregator.triples())
        assert first == second
        assert len(aggregator) == 4

    def test_independent_cursors(self, aggregator):
        a = aggregator.triples()
        b = aggregator.triples()
        next(a)
        next(a)
        assert next(b)[:3] == ("SAT-1", "CAM", "Delft")

    def test_for_each_triple_visits_all(self, aggregator):
        seen = []
        aggregator.for_each_triple(lambda s, i, loc, seq: seen.append((s, i, loc)))
        assert len(seen) == 4
        assert seen[0] == ("SAT-1", "CAM", "Delft")

    def test_discard_removes_subtree(self, aggregator):
        aggregator.discard("SAT-1")
        assert aggregator.satellites() == ["SAT-2"]
        with pytest.raises(NoLocationsRecorded):
            aggregator.merged_for("SAT-1", "CAM")

    def test_listing_absent_keys(self, aggregator):
        assert aggregator.instruments("SAT-9") == []
        assert aggregator.locations("SAT-9", "CAM") == []
        assert aggregator.locations("SAT-1", "LIDAR") == []


# ── Concurrency ──────────────────────────────────────────────────────

class TestConcurrentWrites:

    def test_parallel_writers_on_shared_satellite(self):
        agg = AccessAggregator(HORIZON)
        seq = _windows((100, 200))

        def writer(idx):
            for n in range(50):
                agg.record("SAT-1", f"INSTR-{idx}", f"LOC-{n}", seq)

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(8)]
        for th in threads:
            th.start()
        for th in threads:
            th.join()
        agg.seal()

        assert len(agg) == 8 * 50
        assert len(agg.instruments("SAT-1")) == 8

    def test_no_write_lands_after_seal(self):
        agg = AccessAggregator(HORIZON)
        seq = _windows((100, 200))
        started = threading.Barrier(9)
        rejected = []

        def writer(idx):
            started.wait()
            n = 0
            while True:
                try:
                    agg.record(f"SAT-{idx % 3}", f"INSTR-{idx}", f"LOC-{n}", seq)
                except AggregatorSealed:
                    rejected.append(idx)
                    return
                n += 1

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(8)]
        for th in threads:
            th.start()
        started.wait()
        agg.seal()
        count_at_seal = len(agg)
        for th in threads:
            th.join()

        assert sorted(rejected) == list(range(8))
        assert len(agg) == count_at_seal

    def test_blocked_writer_rejected_after_seal(self):
        agg = AccessAggregator(HORIZON)
        agg.declare("SAT-1", ["CAM"])
        entry_lock = agg._satellites["SAT-1"].lock
        outcome = []

        def writer():
            try:
                agg.record("SAT-1", "CAM", "Delft", _windows((100, 200)))
                outcome.append("recorded")
            except AggregatorSealed:
                outcome.append("sealed")

        entry_lock.acquire()
        th = threading.Thread(target=writer)
        th.start()
        # Writer is parked on the entry lock when the state switches.
        th.join(timeout=0.05)
        agg._state = AggregatorState.SEALED
        entry_lock.release()
        th.join()

        assert outcome == ["sealed"]
        assert agg.locations("SAT-1", "CAM") == []
