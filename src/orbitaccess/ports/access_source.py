# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for the external access engine.

Adapters wrap whatever propagates orbits and evaluates field-of-view
access; the core only consumes the resulting sequences.
"""
from typing import Protocol, runtime_checkable

from orbitaccess.domain.intervals import Horizon, IntervalSequence
from orbitaccess.domain.mission import GroundLocation, Instrument, SatelliteSpec


@runtime_checkable
class AccessSource(Protocol):
    """Port for producing the access sequence of one (satellite, instrument, location)."""

    def access_sequence(
        self,
        satellite: SatelliteSpec,
        instrument: Instrument,
        location: GroundLocation,
        horizon: Horizon,
    ) -> IntervalSequence:
        """
        Compute when the instrument can observe the location.

        Implementations raise RuntimeError, ValueError, KeyError or
        ConnectionError on failure; callers isolate such failures per
        satellite.
        """
        ...
