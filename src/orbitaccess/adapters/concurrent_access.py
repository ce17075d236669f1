# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Concurrent per-satellite access collection.

Uses ThreadPoolExecutor from stdlib to query the access engine for
every satellite in parallel. Each task owns one satellite subtree of
the aggregator. A failing satellite is logged and dropped; the others
continue unless fail_fast is set. The aggregator is sealed once every
task has finished.
"""
import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass

from orbitaccess.domain.aggregator import AccessAggregator
from orbitaccess.domain.intervals import IntervalSequence
from orbitaccess.domain.mission import Mission, SatelliteSpec
from orbitaccess.ports.access_source import AccessSource


_log = logging.getLogger(__name__)

_ISOLATED_ERRORS = (RuntimeError, ValueError, KeyError, ConnectionError)


@dataclass(frozen=True)
class SatelliteOutcome:
    """Result of collecting one satellite's accesses."""
    satellite: str
    succeeded: bool
    sequence_count: int = 0
    error: str | None = None


@dataclass(frozen=True)
class CollectionResult:
    aggregator: AccessAggregator
    outcomes: tuple[SatelliteOutcome, ...]

    @property
    def succeeded(self) -> list[str]:
        return [o.satellite for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> list[SatelliteOutcome]:
        return [o for o in self.outcomes if not o.succeeded]


class ConcurrentAccessCollector:
    """
    Collects access sequences for a whole mission, one task per satellite.

    Args:
        source: Access engine adapter.
        max_workers: Thread pool size.
            Default: min(32, os.cpu_count() + 4), as ThreadPoolExecutor.
        fail_fast: Re-raise the first satellite failure instead of
            isolating it.
    """

    def __init__(
        self,
        source: AccessSource,
        max_workers: int | None = None,
        fail_fast: bool = False,
    ):
        self._source = source
        self._max_workers = max_workers or min(32, (os.cpu_count() or 1) + 4)
        self._fail_fast = fail_fast

    def collect(
        self,
        mission: Mission,
        satellites: list[SatelliteSpec],
    ) -> CollectionResult:
        """
        Query every (satellite, instrument, location) and aggregate the results.

        Returns:
            CollectionResult with a sealed aggregator and one outcome per
            satellite, in source order.
        """
        aggregator = AccessAggregator(mission.horizon)
        for sat in satellites:
            aggregator.declare(sat.name, sat.instrument_names())

        outcomes: dict[str, SatelliteOutcome] = {}
        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = {
                executor.submit(self._collect_satellite, aggregator, mission, sat): sat
                for sat in satellites
            }
            for future in as_completed(futures):
                sat = futures[future]
                try:
                    count = future.result()
                except _ISOLATED_ERRORS as e:
                    if self._fail_fast:
                        for pending in futures:
                            pending.cancel()
                        raise
                    _log.warning("Skipping satellite %s: %s", sat.name, e)
                    aggregator.discard(sat.name)
                    outcomes[sat.name] = SatelliteOutcome(
                        satellite=sat.name, succeeded=False, error=str(e),
                    )
                    continue
                _log.debug("Collected %d sequences for %s", count, sat.name)
                outcomes[sat.name] = SatelliteOutcome(
                    satellite=sat.name, succeeded=True, sequence_count=count,
                )

        aggregator.seal()
        return CollectionResult(
            aggregator=aggregator,
            outcomes=tuple(outcomes[sat.name] for sat in satellites),
        )

    def _collect_satellite(
        self,
        aggregator: AccessAggregator,
        mission: Mission,
        sat: SatelliteSpec,
    ) -> int:
        """Query all accesses of one satellite, then record them together."""
        results: list[tuple[str, str, IntervalSequence]] = []
        for instrument in sat.instruments:
            for location in mission.locations:
                sequence = self._source.access_sequence(
                    sat, instrument, location, mission.horizon,
                )
                results.append((instrument.name, location.name, sequence))
        for instrument_name, location_name, sequence in results:
            aggregator.record(sat.name, instrument_name, location_name, sequence)
        return len(results)
