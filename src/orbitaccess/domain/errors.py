# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Error taxonomy for interval aggregation.

Every error is a ValueError so boundary code catching ValueError
(the CLI, config loaders) reports it the same way as bad input.
"""


class AccessError(ValueError):
    """Base class for all access/interval errors."""


class HorizonMismatch(AccessError):
    """A sequence is defined over a different horizon than required."""


class EmptyMergeSet(AccessError):
    """A merge that requires at least one input received none."""


class AggregatorSealed(AccessError):
    """A write was attempted on a sealed aggregator."""


class NoLocationsRecorded(AccessError):
    """An instrument has no recorded location sequences."""


class NoMatchingIntervals(AccessError):
    """A sequence has no interval in the requested state."""


class MalformedIntervalSequence(AccessError):
    """Boundaries are out of order, outside the horizon, or do not alternate."""
