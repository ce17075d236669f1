# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Visibility timeline encoding.

Turns a merged IntervalSequence into an alternating step function of
colors, one segment at the simulation start and one per boundary.
Renderers consume the segments as a time-tagged color property.

No external dependencies — only stdlib dataclasses/datetime.
"""
from dataclasses import dataclass
from datetime import datetime

from orbitaccess.domain.errors import HorizonMismatch
from orbitaccess.domain.intervals import IntervalSequence, Visibility

RGBA = tuple[int, int, int, int]


@dataclass(frozen=True)
class VisibilityPalette:
    """Colors for the two visibility states (RGBA, 0-255)."""
    not_visible: RGBA = (255, 255, 255, 255)
    visible: RGBA = (255, 0, 0, 255)

    def __post_init__(self):
        for rgba in (self.not_visible, self.visible):
            if len(rgba) != 4 or any(not 0 <= c <= 255 for c in rgba):
                raise ValueError(f"RGBA components must be four values in 0..255, got {rgba}")
        if tuple(self.not_visible) == tuple(self.visible):
            raise ValueError("Palette must use distinct colors for the two states")

    def color_for(self, state: Visibility) -> RGBA:
        if state is Visibility.VISIBLE:
            return tuple(self.visible)
        return tuple(self.not_visible)


DEFAULT_PALETTE = VisibilityPalette()


@dataclass(frozen=True)
class TimelineSegment:
    """Color in force from start until the next segment."""
    start: datetime
    state: Visibility
    rgba: RGBA


def encode_timeline(
    sequence: IntervalSequence,
    simulation_start: datetime,
    palette: VisibilityPalette = DEFAULT_PALETTE,
) -> list[TimelineSegment]:
    """
    Encode a sequence as alternating color segments.

    Args:
        sequence: Merged visibility sequence.
        simulation_start: Start of the run; must be the sequence horizon start.
        palette: State-to-color mapping.

    Returns:
        Segments with strictly increasing start times, alternating state.
        A constant sequence yields exactly one segment.

    Raises:
        HorizonMismatch: If simulation_start is not the sequence horizon start.
    """
    if simulation_start != sequence.horizon.start:
        raise HorizonMismatch(
            f"Simulation start {simulation_start} differs from sequence "
            f"horizon start {sequence.horizon.start}"
        )
    state = sequence.initial_state
    segments = [TimelineSegment(simulation_start, state, palette.color_for(state))]
    for b in sequence.boundaries:
        state = state.flipped()
        segments.append(TimelineSegment(b, state, palette.color_for(state)))
    return segments


def segments_to_czml_rgba(
    segments: list[TimelineSegment],
    epoch: datetime,
) -> list[float]:
    """Flatten segments to CZML [seconds, r, g, b, a, ...] relative to epoch."""
    flat: list[float] = []
    for seg in segments:
        flat.append((seg.start - epoch).total_seconds())
        flat.extend(seg.rgba)
    return flat
