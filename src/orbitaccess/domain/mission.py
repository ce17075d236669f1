# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Mission description types.

Ground locations, the simulation horizon, and satellites with their
instruments. Field-of-view shapes are a closed set of variants used to
pick the visualization overlay; no FOV geometry is computed here.
TLE lines are carried through as opaque strings for the access engine.

No external dependencies — only stdlib dataclasses.
"""
from dataclasses import dataclass

from orbitaccess.domain.intervals import Horizon


@dataclass(frozen=True)
class GroundLocation:
    """Named ground target (geodetic degrees)."""
    name: str
    lat_deg: float
    lon_deg: float

    def __post_init__(self):
        if not -90.0 <= self.lat_deg <= 90.0:
            raise ValueError(f"lat_deg must be in [-90, 90], got {self.lat_deg}")
        if not -180.0 <= self.lon_deg <= 360.0:
            raise ValueError(f"lon_deg must be in [-180, 360], got {self.lon_deg}")


@dataclass(frozen=True)
class RectangularFov:
    """Double-dihedral FOV, half-angles across and along track."""
    half_angle_x_deg: float
    half_angle_y_deg: float

    def __post_init__(self):
        for value in (self.half_angle_x_deg, self.half_angle_y_deg):
            if not 0.0 < value < 90.0:
                raise ValueError(f"FOV half-angle must be in (0, 90), got {value}")


@dataclass(frozen=True)
class ConicalFov:
    """Circular FOV with a single half-aperture."""
    half_angle_deg: float

    def __post_init__(self):
        if not 0.0 < self.half_angle_deg < 90.0:
            raise ValueError(
                f"FOV half-angle must be in (0, 90), got {self.half_angle_deg}"
            )


FieldOfView = RectangularFov | ConicalFov


@dataclass(frozen=True)
class Instrument:
    name: str
    fov: FieldOfView


@dataclass(frozen=True)
class SatelliteSpec:
    """Satellite as handed to the access engine."""
    name: str
    tle_line1: str
    tle_line2: str
    instruments: tuple[Instrument, ...] = ()

    def instrument_names(self) -> list[str]:
        return [i.name for i in self.instruments]


@dataclass(frozen=True)
class Mission:
    horizon: Horizon
    locations: tuple[GroundLocation, ...]

    def location_names(self) -> list[str]:
        return [loc.name for loc in self.locations]
