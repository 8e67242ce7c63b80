"""Timeline primitives: instants, interval indexes, clock and navigation."""

from flight_timeline.timeline.clock import Clock
from flight_timeline.timeline.instant import TimeInstant, format_local
from flight_timeline.timeline.intervals import (
    Found,
    InsertResult,
    Interval,
    IntervalIndex,
    Lookup,
    NotFound,
    decode_lookup,
)
from flight_timeline.timeline.navigator import (
    EDGE_SECONDS,
    JUMP_SECONDS,
    JumpOptions,
    JumpResult,
    Navigator,
    compute_jump,
)

__all__ = [
    "Clock",
    "EDGE_SECONDS",
    "Found",
    "InsertResult",
    "Interval",
    "IntervalIndex",
    "JUMP_SECONDS",
    "JumpOptions",
    "JumpResult",
    "Lookup",
    "Navigator",
    "NotFound",
    "TimeInstant",
    "compute_jump",
    "decode_lookup",
    "format_local",
]
