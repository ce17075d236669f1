# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
JSON I/O adapter.

Reads the mission and satellite descriptions and externally propagated
satellite tracks, and reads/writes the persisted access report:

    {satellite: {instrument: {location: {
        "start": ISO-8601, "end": ISO-8601,
        "initial_state": "visible" | "not_visible",
        "rise_set_times": [{"time": seconds_from_start, "rise": bool}, ...]
    }}}}
"""
import json
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any

from orbitaccess.domain.aggregator import AccessAggregator
from orbitaccess.domain.errors import MalformedIntervalSequence
from orbitaccess.domain.intervals import Horizon, IntervalSequence, Visibility
from orbitaccess.domain.mission import (
    ConicalFov,
    GroundLocation,
    Instrument,
    Mission,
    RectangularFov,
    SatelliteSpec,
)
from orbitaccess.domain.track import SatelliteTrack

_log = logging.getLogger(__name__)


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC.

    Raises:
        ValueError: If text is not a string or not ISO-8601.
    """
    if not isinstance(text, str):
        raise ValueError(f"Timestamp must be an ISO-8601 string, got {text!r}")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


# --- Access report codec ---

def encode_sequence(sequence: IntervalSequence) -> dict[str, Any]:
    """Encode a sequence as boundary offsets with a leading state."""
    start = sequence.horizon.start
    events = []
    is_rise = sequence.initial_state is Visibility.NOT_VISIBLE
    for b in sequence.boundaries:
        events.append({"time": (b - start).total_seconds(), "rise": is_rise})
        is_rise = not is_rise
    return {
        "start": start.isoformat(),
        "end": sequence.horizon.end.isoformat(),
        "initial_state": sequence.initial_state.value,
        "rise_set_times": events,
    }


def decode_sequence(data: Any) -> IntervalSequence:
    """
    Decode an encoded sequence, validating every invariant.

    Raises:
        MalformedIntervalSequence: On missing fields, bad types, boundaries
            not strictly increasing or outside the horizon, or rise flags
            that do not alternate from the initial state.
    """
    if not isinstance(data, dict):
        raise MalformedIntervalSequence(f"Expected an object, got {type(data).__name__}")
    try:
        horizon = Horizon(parse_timestamp(data["start"]), parse_timestamp(data["end"]))
        initial = Visibility(data["initial_state"])
        events = data["rise_set_times"]
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedIntervalSequence(f"Invalid interval sequence header: {e}") from e
    if not isinstance(events, list):
        raise MalformedIntervalSequence("rise_set_times must be a list")

    boundaries: list[datetime] = []
    expect_rise = initial is Visibility.NOT_VISIBLE
    for event in events:
        if not isinstance(event, dict):
            raise MalformedIntervalSequence(f"Invalid rise/set event: {event!r}")
        offset = event.get("time")
        rise = event.get("rise")
        if isinstance(offset, bool) or not isinstance(offset, (int, float)) or not math.isfinite(offset):
            raise MalformedIntervalSequence(f"Invalid event time: {offset!r}")
        if not isinstance(rise, bool):
            raise MalformedIntervalSequence(f"Invalid rise flag: {rise!r}")
        if not 0.0 < offset < horizon.duration_seconds:
            raise MalformedIntervalSequence(
                f"Event offset {offset} s lies outside the horizon "
                f"(0, {horizon.duration_seconds}) s"
            )
        if rise != expect_rise:
            raise MalformedIntervalSequence(
                f"Rise/set events do not alternate at offset {offset} s"
            )
        boundaries.append(horizon.start + timedelta(seconds=offset))
        expect_rise = not expect_rise

    return IntervalSequence(horizon=horizon, initial_state=initial, boundaries=tuple(boundaries))


def encode_report(aggregator: AccessAggregator) -> dict[str, Any]:
    """Nested report of every declared satellite and instrument."""
    report: dict[str, Any] = {}
    for satellite in aggregator.satellites():
        sat_out: dict[str, Any] = {}
        for instrument in aggregator.instruments(satellite):
            sat_out[instrument] = {
                location: encode_sequence(aggregator.get(satellite, instrument, location))
                for location in aggregator.locations(satellite, instrument)
            }
        report[satellite] = sat_out
    return report


def decode_report(data: Any, horizon: Horizon | None = None) -> AccessAggregator:
    """
    Decode a nested report into a sealed aggregator.

    Args:
        data: Parsed report JSON.
        horizon: Expected horizon. Defaults to the horizon of the first
            encoded sequence.

    Raises:
        MalformedIntervalSequence: If the structure or any sequence is invalid.
        HorizonMismatch: If sequences disagree on the horizon.
        ValueError: If the report holds no sequence and no horizon is given.
    """
    if not isinstance(data, dict):
        raise MalformedIntervalSequence("Access report must be an object")

    decoded: list[tuple[str, str, str, IntervalSequence]] = []
    layout: list[tuple[str, list[str]]] = []
    for satellite, instruments in data.items():
        if not isinstance(instruments, dict):
            raise MalformedIntervalSequence(f"Satellite '{satellite}' must map instruments")
        layout.append((satellite, list(instruments)))
        for instrument, locations in instruments.items():
            if not isinstance(locations, dict):
                raise MalformedIntervalSequence(
                    f"Instrument '{satellite}/{instrument}' must map locations"
                )
            for location, encoded in locations.items():
                decoded.append((satellite, instrument, location, decode_sequence(encoded)))

    if horizon is None:
        if not decoded:
            raise ValueError("Cannot infer horizon from an access report with no sequences")
        horizon = decoded[0][3].horizon

    aggregator = AccessAggregator(horizon)
    for satellite, instruments in layout:
        aggregator.declare(satellite, instruments)
    for satellite, instrument, location, sequence in decoded:
        aggregator.record(satellite, instrument, location, sequence)
    aggregator.seal()
    return aggregator


def write_access_report(aggregator: AccessAggregator, path: str) -> int:
    """Write the access report. Returns the number of sequences written."""
    report = encode_report(aggregator)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, ensure_ascii=False)
    count = len(aggregator)
    _log.info("Wrote %d access sequences to %s", count, path)
    return count


def read_access_report(path: str, horizon: Horizon | None = None) -> AccessAggregator:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return decode_report(data, horizon)


# --- Mission / satellite configuration ---

def _parse_instrument(sensor: dict[str, Any]) -> Instrument:
    geometry = sensor["geometry_type"]
    if geometry == "rectangular":
        fov = RectangularFov(
            half_angle_x_deg=float(sensor["across_fov"]),
            half_angle_y_deg=float(sensor["along_fov"]),
        )
    elif geometry == "conical":
        fov = ConicalFov(half_angle_deg=float(sensor["conical_fov"]))
    else:
        raise ValueError(f"Unexpected FOV type: {geometry!r}")
    return Instrument(name=sensor["name"], fov=fov)


class JsonMissionReader:
    """Reads mission and satellite descriptions from JSON files."""

    def read_mission(self, path: str) -> Mission:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return self.parse_mission(data)

    def parse_mission(self, data: dict[str, Any]) -> Mission:
        """Horizon from the first observation, plus the ground locations.

        Raises:
            ValueError: On missing keys or invalid values.
        """
        try:
            observation = data["observations"][0]
            horizon = Horizon(
                parse_timestamp(observation["startDate"]),
                parse_timestamp(observation["endDate"]),
            )
            locations = tuple(
                GroundLocation(
                    name=loc["name"],
                    lat_deg=float(loc["latitude"]),
                    lon_deg=float(loc["longitude"]),
                )
                for loc in data["locations"]
            )
        except (KeyError, IndexError, TypeError) as e:
            raise ValueError(f"Invalid mission description: missing {e}") from e
        names = [loc.name for loc in locations]
        if len(set(names)) != len(names):
            raise ValueError("Location names must be unique")
        return Mission(horizon=horizon, locations=locations)

    def read_satellites(self, path: str) -> list[SatelliteSpec]:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return self.parse_satellites(data)

    def parse_satellites(self, data: list[dict[str, Any]]) -> list[SatelliteSpec]:
        """Satellites in source order.

        Raises:
            ValueError: On missing keys, unknown FOV types or duplicate names.
        """
        satellites: list[SatelliteSpec] = []
        try:
            for sat in data:
                instruments = tuple(_parse_instrument(s) for s in sat["sensors"])
                names = [i.name for i in instruments]
                if len(set(names)) != len(names):
                    raise ValueError(f"Duplicate instrument names on satellite '{sat['name']}'")
                satellites.append(SatelliteSpec(
                    name=sat["name"],
                    tle_line1=sat["line1"],
                    tle_line2=sat["line2"],
                    instruments=instruments,
                ))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid satellite description: missing {e}") from e
        names = [s.name for s in satellites]
        if len(set(names)) != len(names):
            raise ValueError("Satellite names must be unique")
        return satellites

    def read_tracks(self, path: str) -> dict[str, SatelliteTrack]:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return self.parse_tracks(data)

    def parse_tracks(self, data: dict[str, Any]) -> dict[str, SatelliteTrack]:
        """Externally propagated tracks keyed by satellite name.

        Each entry is {"epoch": ISO-8601, "positions": [[t, x, y, z], ...],
        "orientations": [[t, qx, qy, qz, qw], ...]} with offsets in seconds
        from epoch and positions in meters; orientations are optional.

        Raises:
            ValueError: On missing keys or malformed samples.
        """
        if not isinstance(data, dict):
            raise ValueError("Track file must map satellite names to tracks")
        tracks: dict[str, SatelliteTrack] = {}
        try:
            for name, entry in data.items():
                tracks[name] = SatelliteTrack(
                    epoch=parse_timestamp(entry["epoch"]),
                    positions=tuple(
                        tuple(float(v) for v in sample) for sample in entry["positions"]
                    ),
                    orientations=tuple(
                        tuple(float(v) for v in sample)
                        for sample in entry.get("orientations", ())
                    ),
                )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid satellite track: missing {e}") from e
        return tracks
