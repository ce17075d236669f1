# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Access source backed by a persisted access report.

Replays sequences computed by an earlier run of the access engine, so
visualization and statistics can be regenerated without propagating
again.
"""
from orbitaccess.domain.aggregator import AccessAggregator
from orbitaccess.domain.errors import HorizonMismatch
from orbitaccess.domain.intervals import Horizon, IntervalSequence
from orbitaccess.domain.mission import GroundLocation, Instrument, SatelliteSpec
from orbitaccess.ports.access_source import AccessSource


class ReportAccessSource(AccessSource):
    """Serves sequences from a decoded access report.

    Args:
        report: Aggregator decoded from a persisted report.
    """

    def __init__(self, report: AccessAggregator):
        self._report = report

    def access_sequence(
        self,
        satellite: SatelliteSpec,
        instrument: Instrument,
        location: GroundLocation,
        horizon: Horizon,
    ) -> IntervalSequence:
        try:
            sequence = self._report.get(satellite.name, instrument.name, location.name)
        except KeyError as e:
            raise KeyError(
                f"No access recorded for {satellite.name}/{instrument.name}/{location.name}"
            ) from e
        if sequence.horizon != horizon:
            raise HorizonMismatch(
                f"Recorded access for {satellite.name}/{instrument.name}/{location.name} "
                f"covers {sequence.horizon.start}..{sequence.horizon.end}, "
                f"mission horizon is {horizon.start}..{horizon.end}"
            )
        return sequence
