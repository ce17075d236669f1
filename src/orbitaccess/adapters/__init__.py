# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Adapters for report I/O, CZML export and access collection.

External dependencies (json, file I/O, thread pools) are confined to this layer.
"""
from orbitaccess.adapters.json_io import (
    JsonMissionReader,
    decode_report,
    decode_sequence,
    encode_report,
    encode_sequence,
    read_access_report,
    write_access_report,
)
from orbitaccess.adapters.czml_exporter import (
    SatelliteTrack,
    access_packets,
    write_czml,
)
from orbitaccess.adapters.concurrent_access import (
    CollectionResult,
    ConcurrentAccessCollector,
    SatelliteOutcome,
)
from orbitaccess.adapters.report_source import ReportAccessSource

__all__ = [
    "JsonMissionReader",
    "decode_report",
    "decode_sequence",
    "encode_report",
    "encode_sequence",
    "read_access_report",
    "write_access_report",
    "SatelliteTrack",
    "access_packets",
    "write_czml",
    "CollectionResult",
    "ConcurrentAccessCollector",
    "SatelliteOutcome",
    "ReportAccessSource",
]
