# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Nested access table: satellite -> instrument -> location -> sequence.

The aggregator has a write phase (OPEN) and a read phase (SEALED); the
transition is one-way. Writers on different satellites never contend:
each satellite entry owns its own lock, and a registry lock guards the
creation of new satellite entries. Sealing takes every lock.

No external dependencies — only stdlib contextlib/enum/threading.
"""
import threading
from contextlib import ExitStack
from enum import Enum
from typing import Callable, Iterable, Iterator

from orbitaccess.domain.errors import (
    AggregatorSealed,
    HorizonMismatch,
    NoLocationsRecorded,
)
from orbitaccess.domain.intervals import Horizon, IntervalSequence
from orbitaccess.domain.merge import MergedInstrumentTimeline, merge_sequences


class AggregatorState(Enum):
    OPEN = "open"
    SEALED = "sealed"


class _SatelliteEntry:
    __slots__ = ("lock", "instruments")

    def __init__(self):
        self.lock = threading.Lock()
        self.instruments: dict[str, dict[str, IntervalSequence]] = {}


class AccessAggregator:
    """Access sequences of one run, keyed by satellite, instrument, location.

    Enumeration follows declaration order, then insertion order, so
    declaring satellites and instruments up front in source order makes
    output independent of worker completion order.

    Args:
        horizon: Horizon every recorded sequence must share.
    """

    def __init__(self, horizon: Horizon):
        self._horizon = horizon
        self._state = AggregatorState.OPEN
        self._registry_lock = threading.Lock()
        self._satellites: dict[str, _SatelliteEntry] = {}

    @property
    def horizon(self) -> Horizon:
        return self._horizon

    @property
    def state(self) -> AggregatorState:
        return self._state

    @property
    def is_sealed(self) -> bool:
        return self._state is AggregatorState.SEALED

    # --- Write phase ---

    def _check_open(self) -> None:
        if self._state is AggregatorState.SEALED:
            raise AggregatorSealed("Aggregator is sealed; no further writes allowed")

    def _entry(self, satellite: str) -> _SatelliteEntry:
        with self._registry_lock:
            self._check_open()
            entry = self._satellites.get(satellite)
            if entry is None:
                entry = _SatelliteEntry()
                self._satellites[satellite] = entry
            return entry

    def declare(self, satellite: str, instruments: Iterable[str] = ()) -> None:
        """Reserve a satellite and its instruments in enumeration order."""
        entry = self._entry(satellite)
        with entry.lock:
            self._check_open()
            for name in instruments:
                entry.instruments.setdefault(name, {})

    def record(
        self,
        satellite: str,
        instrument: str,
        location: str,
        sequence: IntervalSequence,
    ) -> None:
        """
        Insert or overwrite the sequence for one (satellite, instrument, location).

        Raises:
            AggregatorSealed: If the aggregator has been sealed.
            HorizonMismatch: If the sequence horizon differs from the
                aggregator horizon.
        """
        if sequence.horizon != self._horizon:
            raise HorizonMismatch(
                f"Sequence for {satellite}/{instrument}/{location} is defined over "
                f"{sequence.horizon.start}..{sequence.horizon.end}, expected "
                f"{self._horizon.start}..{self._horizon.end}"
            )
        entry = self._entry(satellite)
        with entry.lock:
            self._check_open()
            entry.instruments.setdefault(instrument, {})[location] = sequence

    def discard(self, satellite: str) -> None:
        """Drop a satellite subtree, e.g. after its collection failed."""
        with self._registry_lock:
            self._check_open()
            self._satellites.pop(satellite, None)

    def seal(self) -> None:
        """Finish the write phase. Idempotent.

        Holds every lock while switching state, so a write either lands
        before the seal or raises AggregatorSealed.
        """
        with self._registry_lock, ExitStack() as stack:
            for entry in self._satellites.values():
                stack.enter_context(entry.lock)
            self._state = AggregatorState.SEALED

    # --- Read phase ---

    def satellites(self) -> list[str]:
        return list(self._satellites)

    def instruments(self, satellite: str) -> list[str]:
        entry = self._satellites.get(satellite)
        if entry is None:
            return []
        return list(entry.instruments)

    def locations(self, satellite: str, instrument: str) -> list[str]:
        entry = self._satellites.get(satellite)
        if entry is None:
            return []
        return list(entry.instruments.get(instrument, {}))

    def get(self, satellite: str, instrument: str, location: str) -> IntervalSequence:
        """Recorded sequence for a triple. Raises KeyError if absent."""
        entry = self._satellites.get(satellite)
        if entry is None:
            raise KeyError(satellite)
        return entry.instruments[instrument][location]

    def sequences_for(self, satellite: str, instrument: str) -> list[IntervalSequence]:
        entry = self._satellites.get(satellite)
        if entry is None:
            return []
        return list(entry.instruments.get(instrument, {}).values())

    def merged_for(self, satellite: str, instrument: str) -> IntervalSequence:
        """
        OR-combined sequence over all recorded locations of an instrument.

        Raises:
            NoLocationsRecorded: If nothing was recorded for the instrument,
                including when the satellite itself is absent.
        """
        sequences = self.sequences_for(satellite, instrument)
        if not sequences:
            raise NoLocationsRecorded(
                f"No locations recorded for instrument '{instrument}' "
                f"of satellite '{satellite}'"
            )
        return merge_sequences(sequences, self._horizon)

    def merged_timeline(self, satellite: str, instrument: str) -> MergedInstrumentTimeline:
        return MergedInstrumentTimeline(
            satellite=satellite,
            instrument=instrument,
            sequence=self.merged_for(satellite, instrument),
        )

    def merged_timelines(self) -> Iterator[MergedInstrumentTimeline]:
        """Merged timeline of every instrument with at least one location."""
        for satellite in self.satellites():
            for instrument in self.instruments(satellite):
                if self.locations(satellite, instrument):
                    yield self.merged_timeline(satellite, instrument)

    def triples(self) -> Iterator[tuple[str, str, str, IntervalSequence]]:
        """Fresh traversal of (satellite, instrument, location, sequence)."""
        for satellite, entry in list(self._satellites.items()):
            for instrument, locations in list(entry.instruments.items()):
                for location, sequence in list(locations.items()):
                    yield satellite, instrument, location, sequence

    def for_each_triple(
        self,
        visitor: Callable[[str, str, str, IntervalSequence], None],
    ) -> None:
        for satellite, instrument, location, sequence in self.triples():
            visitor(satellite, instrument, location, sequence)

    def __len__(self) -> int:
        return sum(1 for _ in self.triples())
