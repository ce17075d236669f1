# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Externally propagated satellite tracks.

Time-tagged inertial positions and attitude quaternions produced by the
access engine's propagator, carried through for visualization only.

No external dependencies — only stdlib dataclasses/datetime.
"""
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SatelliteTrack:
    """Satellite states, time-tagged from epoch.

    Attributes:
        epoch: Reference time for the sample offsets.
        positions: (offset_s, x_m, y_m, z_m) in the inertial frame.
        orientations: (offset_s, qx, qy, qz, qw) body-to-fixed quaternions.
    """
    epoch: datetime
    positions: tuple[tuple[float, float, float, float], ...]
    orientations: tuple[tuple[float, float, float, float, float], ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "positions", tuple(tuple(p) for p in self.positions))
        object.__setattr__(self, "orientations", tuple(tuple(q) for q in self.orientations))
        for sample in self.positions:
            if len(sample) != 4:
                raise ValueError(f"Position sample must be (t, x, y, z), got {sample}")
        for sample in self.orientations:
            if len(sample) != 5:
                raise ValueError(
                    f"Orientation sample must be (t, qx, qy, qz, qw), got {sample}"
                )

    @property
    def has_position(self) -> bool:
        return bool(self.positions)

    @property
    def has_orientation(self) -> bool:
        return bool(self.positions) and bool(self.orientations)
