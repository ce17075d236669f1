"""
Orbit Access

Aggregate, merge and visualize satellite instrument visibility intervals.
Collects per-location access sequences from an external access engine,
OR-combines them per instrument, encodes the result as a color timeline
for CZML sensor overlays, and reports access/gap duration statistics.
"""

from orbitaccess.domain.errors import (
    AccessError,
    HorizonMismatch,
    EmptyMergeSet,
    AggregatorSealed,
    NoLocationsRecorded,
    NoMatchingIntervals,
    MalformedIntervalSequence,
)
from orbitaccess.domain.intervals import (
    Visibility,
    Horizon,
    Interval,
    IntervalSequence,
)
from orbitaccess.domain.merge import (
    MergedInstrumentTimeline,
    merge_sequences,
    merge_pair,
)
from orbitaccess.domain.aggregator import (
    AggregatorState,
    AccessAggregator,
)
from orbitaccess.domain.timeline import (
    VisibilityPalette,
    DEFAULT_PALETTE,
    TimelineSegment,
    encode_timeline,
    segments_to_czml_rgba,
)
from orbitaccess.domain.statistics import (
    DurationStatistics,
    compute_duration_statistics,
    compute_pooled_statistics,
    format_statistics,
)
from orbitaccess.domain.mission import (
    GroundLocation,
    RectangularFov,
    ConicalFov,
    FieldOfView,
    Instrument,
    SatelliteSpec,
    Mission,
)
from orbitaccess.domain.track import SatelliteTrack

__version__ = "1.0.0"

__all__ = [
    "AccessError",
    "HorizonMismatch",
    "EmptyMergeSet",
    "AggregatorSealed",
    "NoLocationsRecorded",
    "NoMatchingIntervals",
    "MalformedIntervalSequence",
    "Visibility",
    "Horizon",
    "Interval",
    "IntervalSequence",
    "MergedInstrumentTimeline",
    "merge_sequences",
    "merge_pair",
    "AggregatorState",
    "AccessAggregator",
    "VisibilityPalette",
    "DEFAULT_PALETTE",
    "TimelineSegment",
    "encode_timeline",
    "segments_to_czml_rgba",
    "DurationStatistics",
    "compute_duration_statistics",
    "compute_pooled_statistics",
    "format_statistics",
    "GroundLocation",
    "RectangularFov",
    "ConicalFov",
    "FieldOfView",
    "Instrument",
    "SatelliteSpec",
    "Mission",
    "SatelliteTrack",
]
