# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""CZML exporter adapter for CesiumJS visualization.

Generates CZML JSON packets for ground locations, satellites and their
instrument footprints. Each instrument's sensor intersection color
follows the encoded visibility timeline of its merged accesses, so the
footprint turns red while any location is in view.

Uses only stdlib json/logging/math/datetime + domain imports.
"""

import json
import logging
import math
from datetime import datetime, timezone

from orbitaccess.domain.aggregator import AccessAggregator
from orbitaccess.domain.errors import NoLocationsRecorded
from orbitaccess.domain.intervals import Horizon
from orbitaccess.domain.mission import (
    ConicalFov,
    GroundLocation,
    Instrument,
    Mission,
    RectangularFov,
    SatelliteSpec,
)
from orbitaccess.domain.timeline import (
    DEFAULT_PALETTE,
    TimelineSegment,
    VisibilityPalette,
    encode_timeline,
    segments_to_czml_rgba,
)
from orbitaccess.domain.track import SatelliteTrack

_log = logging.getLogger(__name__)

_LABEL_FONT = "11pt Lucida Console"
_LOCATION_COLOR = [255, 0, 0, 255]
_PATH_COLOR = [255, 255, 255, 255]


def _iso(dt: datetime) -> str:
    if dt.tzinfo is not None and dt.tzinfo.utcoffset(dt) is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _interpolation_degree(num_points: int) -> int:
    """LAGRANGE interpolation degree: min(5, num_points - 1), at least 1."""
    if num_points <= 1:
        return 1
    return min(5, num_points - 1)


def _label(text: str) -> dict:
    return {
        "text": text,
        "font": _LABEL_FONT,
        "horizontalOrigin": "LEFT",
        "verticalOrigin": "CENTER",
        "pixelOffset": {"cartesian2": [12, 0]},
    }


def document_packet(horizon: Horizon, name: str = "Accesses") -> dict:
    return {
        "id": "document",
        "name": name,
        "version": "1.0",
        "clock": {
            "interval": f"{_iso(horizon.start)}/{_iso(horizon.end)}",
            "currentTime": _iso(horizon.start),
            "multiplier": 1,
            "range": "LOOP_STOP",
            "step": "SYSTEM_CLOCK_MULTIPLIER",
        },
    }


def location_packets(locations: list[GroundLocation]) -> list[dict]:
    """One point + label packet per ground location."""
    return [
        {
            "id": loc.name,
            "name": loc.name,
            "position": {"cartographicDegrees": [loc.lon_deg, loc.lat_deg, 0.0]},
            "point": {
                "pixelSize": 15,
                "color": {"rgba": list(_LOCATION_COLOR)},
            },
            "label": _label(loc.name),
        }
        for loc in locations
    ]


def satellite_packet(name: str, track: SatelliteTrack | None = None) -> dict:
    """Satellite point + label; position, path and orientation when a track is given."""
    pkt: dict = {
        "id": name,
        "name": name,
        "point": {"pixelSize": 15},
        "label": _label(name),
    }
    if track is None or not track.has_position:
        return pkt

    coords: list[float] = []
    for sample in track.positions:
        coords.extend(sample)
    pkt["position"] = {
        "epoch": _iso(track.epoch),
        "cartesian": coords,
        "interpolationAlgorithm": "LAGRANGE",
        "interpolationDegree": _interpolation_degree(len(track.positions)),
        "referenceFrame": "INERTIAL",
    }
    pkt["path"] = {
        "leadTime": 3000,
        "trailTime": 3000,
        "resolution": 300,
        "material": {
            "solidColor": {
                "color": {"rgba": list(_PATH_COLOR)},
            },
        },
    }
    if track.has_orientation:
        quats: list[float] = []
        for sample in track.orientations:
            quats.extend(sample)
        pkt["orientation"] = {
            "epoch": _iso(track.epoch),
            "unitQuaternion": quats,
            "interpolationAlgorithm": "LINEAR",
            "interpolationDegree": 1,
        }
    return pkt


def sensor_packet(
    satellite: str,
    instrument: Instrument,
    segments: list[TimelineSegment],
    epoch: datetime,
    track: SatelliteTrack | None = None,
) -> dict:
    """
    Sensor overlay attached to its satellite, colored by the visibility timeline.

    Position and orientation reference the satellite packet only when the
    satellite track supplies them, so every reference resolves.
    """
    intersection_color = {
        "epoch": _iso(epoch),
        "rgba": segments_to_czml_rgba(segments, epoch),
    }
    match instrument.fov:
        case RectangularFov(half_angle_x_deg=x_deg, half_angle_y_deg=y_deg):
            sensor_key = "rectangularSensor"
            sensor = {
                "xHalfAngle": math.radians(x_deg),
                "yHalfAngle": math.radians(y_deg),
            }
        case ConicalFov(half_angle_deg=half_deg):
            sensor_key = "conicSensor"
            sensor = {"outerHalfAngle": math.radians(half_deg)}
        case _:
            raise ValueError(f"Unsupported field of view: {instrument.fov!r}")
    sensor["intersectionColor"] = intersection_color

    pkt: dict = {
        "id": f"{satellite}/{instrument.name}",
        "name": instrument.name,
        "parent": satellite,
    }
    if track is not None and track.has_position:
        pkt["position"] = {"reference": f"{satellite}#position"}
    if track is not None and track.has_orientation:
        pkt["orientation"] = {"reference": f"{satellite}#orientation"}
    pkt[sensor_key] = sensor
    return pkt


def access_packets(
    mission: Mission,
    satellites: list[SatelliteSpec],
    aggregator: AccessAggregator,
    tracks: dict[str, SatelliteTrack] | None = None,
    palette: VisibilityPalette = DEFAULT_PALETTE,
    name: str = "Accesses",
) -> list[dict]:
    """
    Full CZML document: clock, locations, satellites and sensor overlays.

    Satellites missing from the aggregator (failed collection) are
    skipped, as are instruments with no recorded locations.

    Args:
        mission: Horizon and ground locations.
        satellites: Satellites in source order.
        aggregator: Collected access sequences.
        tracks: Optional externally propagated tracks keyed by satellite name.
        palette: Visibility colors for the sensor intersection.
        name: Document name.

    Returns:
        List of CZML packets, document packet first.
    """
    tracks = tracks or {}
    horizon = mission.horizon
    packets: list[dict] = [document_packet(horizon, name)]
    packets.extend(location_packets(list(mission.locations)))

    recorded = set(aggregator.satellites())
    for sat in satellites:
        if sat.name not in recorded:
            _log.warning("No accesses for satellite %s; omitted from CZML", sat.name)
            continue
        track = tracks.get(sat.name)
        packets.append(satellite_packet(sat.name, track))
        for instrument in sat.instruments:
            try:
                merged = aggregator.merged_for(sat.name, instrument.name)
            except NoLocationsRecorded as e:
                _log.warning("Skipping sensor overlay: %s", e)
                continue
            segments = encode_timeline(merged, horizon.start, palette)
            packets.append(sensor_packet(sat.name, instrument, segments, horizon.start, track))

    return packets


def write_czml(packets: list[dict], path: str) -> int:
    """Write JSON array to file. Returns len(packets)."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(packets, f, indent=2, ensure_ascii=False)
    return len(packets)
