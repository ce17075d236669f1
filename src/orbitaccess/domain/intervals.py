# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Visibility interval types.

An IntervalSequence is the leading state plus the ordered state-change
timestamps over a fixed horizon. Every instant of the horizon is
classified VISIBLE or NOT_VISIBLE; intervals are closed-open, so at a
boundary the new state already holds.

No external dependencies — only stdlib bisect/dataclasses/datetime/enum.
"""
from bisect import bisect_right
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from orbitaccess.domain.errors import MalformedIntervalSequence


class Visibility(Enum):
    VISIBLE = "visible"
    NOT_VISIBLE = "not_visible"

    @property
    def is_visible(self) -> bool:
        return self is Visibility.VISIBLE

    def flipped(self) -> "Visibility":
        if self is Visibility.VISIBLE:
            return Visibility.NOT_VISIBLE
        return Visibility.VISIBLE

    @classmethod
    def from_bool(cls, visible: bool) -> "Visibility":
        return cls.VISIBLE if visible else cls.NOT_VISIBLE


@dataclass(frozen=True)
class Horizon:
    """Simulation time window [start, end]."""
    start: datetime
    end: datetime

    def __post_init__(self):
        for t in (self.start, self.end):
            if t.tzinfo is None or t.tzinfo.utcoffset(t) is None:
                raise ValueError(f"Horizon times must be timezone-aware, got {t}")
        if self.start >= self.end:
            raise ValueError(
                f"Horizon start must precede end, got {self.start} >= {self.end}"
            )

    @property
    def duration_seconds(self) -> float:
        return (self.end - self.start).total_seconds()

    def contains(self, t: datetime) -> bool:
        return self.start <= t <= self.end


@dataclass(frozen=True)
class Interval:
    """A single window [start, end) with a constant visibility state."""
    start: datetime
    end: datetime
    state: Visibility

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(
                f"Interval start must precede end, got {self.start} >= {self.end}"
            )

    @property
    def duration_seconds(self) -> float:
        return (self.end - self.start).total_seconds()


@dataclass(frozen=True)
class IntervalSequence:
    """Alternating visibility states over a horizon.

    Attributes:
        horizon: Window the sequence is defined over.
        initial_state: State in force at horizon.start.
        boundaries: Strictly increasing state-change times, each strictly
            inside the horizon. The state flips at every boundary.
    """
    horizon: Horizon
    initial_state: Visibility
    boundaries: tuple[datetime, ...] = ()

    def __post_init__(self):
        # Accept any iterable for convenience; store an immutable tuple.
        object.__setattr__(self, "boundaries", tuple(self.boundaries))
        previous = self.horizon.start
        for b in self.boundaries:
            if b <= previous:
                if previous == self.horizon.start:
                    raise MalformedIntervalSequence(
                        f"Boundary {b} is not after horizon start {self.horizon.start}"
                    )
                raise MalformedIntervalSequence(
                    f"Boundaries not strictly increasing: {b} after {previous}"
                )
            previous = b
        if self.boundaries and self.boundaries[-1] >= self.horizon.end:
            raise MalformedIntervalSequence(
                f"Boundary {self.boundaries[-1]} is not before horizon end {self.horizon.end}"
            )

    # --- Constructors ---

    @classmethod
    def constant(cls, horizon: Horizon, state: Visibility) -> "IntervalSequence":
        return cls(horizon=horizon, initial_state=state, boundaries=())

    @classmethod
    def from_windows(
        cls,
        horizon: Horizon,
        windows: list[tuple[datetime, datetime]],
    ) -> "IntervalSequence":
        """Build a sequence from visible (rise, set) windows.

        Windows are clipped to the horizon and sorted; overlapping or
        abutting windows are coalesced. A window starting at or before
        the horizon start sets the initial state, and a set at or after
        the horizon end is dropped.

        Raises:
            MalformedIntervalSequence: If a window has rise >= set.
        """
        clipped: list[tuple[datetime, datetime]] = []
        for rise, set_ in windows:
            if rise >= set_:
                raise MalformedIntervalSequence(
                    f"Window rise {rise} is not before set {set_}"
                )
            rise = max(rise, horizon.start)
            set_ = min(set_, horizon.end)
            if rise < set_:
                clipped.append((rise, set_))
        clipped.sort()

        coalesced: list[list[datetime]] = []
        for rise, set_ in clipped:
            if coalesced and rise <= coalesced[-1][1]:
                if set_ > coalesced[-1][1]:
                    coalesced[-1][1] = set_
            else:
                coalesced.append([rise, set_])

        initial = Visibility.NOT_VISIBLE
        boundaries: list[datetime] = []
        for rise, set_ in coalesced:
            if rise == horizon.start:
                initial = Visibility.VISIBLE
            else:
                boundaries.append(rise)
            if set_ < horizon.end:
                boundaries.append(set_)
        return cls(horizon=horizon, initial_state=initial, boundaries=tuple(boundaries))

    @classmethod
    def from_rise_set_times(
        cls,
        horizon: Horizon,
        events: list[tuple[datetime, bool]],
    ) -> "IntervalSequence":
        """Build a sequence from chronological (time, is_rise) events.

        The initial state is inferred from the first event: a leading set
        means the location was visible at the horizon start. A set and a
        rise at the identical instant cancel out. Events at the horizon
        edges are absorbed into the initial state or dropped.

        Raises:
            MalformedIntervalSequence: If events are out of order or two
                consecutive events have the same direction.
        """
        if not events:
            return cls.constant(horizon, Visibility.NOT_VISIBLE)

        initial = Visibility.NOT_VISIBLE if events[0][1] else Visibility.VISIBLE
        state = initial
        previous: datetime | None = None
        boundaries: list[datetime] = []
        for t, is_rise in events:
            if previous is not None and t < previous:
                raise MalformedIntervalSequence(
                    f"Rise/set events out of order: {t} after {previous}"
                )
            if is_rise == state.is_visible:
                kind = "rise" if is_rise else "set"
                raise MalformedIntervalSequence(
                    f"Consecutive {kind} events at {t}"
                )
            if not horizon.contains(t):
                raise MalformedIntervalSequence(
                    f"Event at {t} lies outside horizon {horizon.start}..{horizon.end}"
                )
            previous = t
            state = state.flipped()
            if t == horizon.start:
                initial = state
            elif t == horizon.end:
                continue
            elif boundaries and boundaries[-1] == t:
                boundaries.pop()
            else:
                boundaries.append(t)
        return cls(horizon=horizon, initial_state=initial, boundaries=tuple(boundaries))

    # --- Queries ---

    @property
    def is_constant(self) -> bool:
        return not self.boundaries

    @property
    def final_state(self) -> Visibility:
        if len(self.boundaries) % 2:
            return self.initial_state.flipped()
        return self.initial_state

    def state_at(self, t: datetime) -> Visibility:
        """State in force at instant t (the new state holds at a boundary)."""
        if not self.horizon.contains(t):
            raise ValueError(
                f"{t} lies outside horizon {self.horizon.start}..{self.horizon.end}"
            )
        flips = bisect_right(self.boundaries, t)
        if flips % 2:
            return self.initial_state.flipped()
        return self.initial_state

    def intervals(self) -> list[Interval]:
        """Intervals tiling the whole horizon, alternating in state."""
        result: list[Interval] = []
        state = self.initial_state
        start = self.horizon.start
        for b in self.boundaries:
            result.append(Interval(start=start, end=b, state=state))
            state = state.flipped()
            start = b
        result.append(Interval(start=start, end=self.horizon.end, state=state))
        return result

    def windows(self) -> list[tuple[datetime, datetime]]:
        """Visible intervals as (start, end) pairs."""
        return [
            (iv.start, iv.end)
            for iv in self.intervals()
            if iv.state is Visibility.VISIBLE
        ]

    def rise_times(self) -> list[datetime]:
        start = 0 if self.initial_state is Visibility.NOT_VISIBLE else 1
        return list(self.boundaries[start::2])

    def set_times(self) -> list[datetime]:
        start = 0 if self.initial_state is Visibility.VISIBLE else 1
        return list(self.boundaries[start::2])

    def total_duration_seconds(self, state: Visibility) -> float:
        return sum(
            iv.duration_seconds for iv in self.intervals() if iv.state is state
        )

    @property
    def duty_cycle(self) -> float:
        """Fraction of the horizon spent visible."""
        visible = self.total_duration_seconds(Visibility.VISIBLE)
        return visible / self.horizon.duration_seconds
