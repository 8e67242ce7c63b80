"""Cursor jumps across the merged interval timeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar

from flight_timeline.timeline.clock import Clock
from flight_timeline.timeline.instant import TimeInstant
from flight_timeline.timeline.intervals import Found, Interval, IntervalIndex, Lookup, NotFound

logger = logging.getLogger(__name__)

# Seconds to jump when seeking at unit rate.
JUMP_SECONDS = 10.0

# Seconds, scaled by the playback rate, treated as "on" an interval boundary.
EDGE_SECONDS = 2.0


@dataclass(frozen=True, slots=True)
class JumpOptions:
    """How a jump travels.

    reverse: jump backwards.
    edge: snap to the next start/stop of a track or clip.
    small: a unit-rate step regardless of the playback multiplier.
    collapse: skip the gaps between intervals.
    """

    reverse: bool = False
    edge: bool = False
    small: bool = False
    collapse: bool = False

    REVERSE: ClassVar[int] = 0x01
    EDGE: ClassVar[int] = 0x02
    SMALL: ClassVar[int] = 0x04
    COLLAPSE: ClassVar[int] = 0x08

    @staticmethod
    def from_flags(flags: int = 0) -> JumpOptions:
        return JumpOptions(
            reverse=bool(flags & JumpOptions.REVERSE),
            edge=bool(flags & JumpOptions.EDGE),
            small=bool(flags & JumpOptions.SMALL),
            collapse=bool(flags & JumpOptions.COLLAPSE),
        )

    @property
    def flags(self) -> int:
        value = 0
        if self.reverse:
            value |= JumpOptions.REVERSE
        if self.edge:
            value |= JumpOptions.EDGE
        if self.small:
            value |= JumpOptions.SMALL
        if self.collapse:
            value |= JumpOptions.COLLAPSE
        return value


@dataclass(frozen=True, slots=True)
class JumpResult:
    origin: TimeInstant
    target: TimeInstant
    reason: str
    clamped: bool = False


def jump_step_seconds(multiplier: float, options: JumpOptions, jump_seconds: float = JUMP_SECONDS) -> float:
    direction = -1.0 if options.reverse else 1.0
    scale = 1.0 if options.small else max(1.0, abs(multiplier))
    return jump_seconds * direction * scale


def edge_epsilon(multiplier: float, edge_seconds: float = EDGE_SECONDS) -> float:
    return edge_seconds * abs(multiplier)


def compute_jump(
    current: TimeInstant,
    index: IntervalIndex,
    bounds_start: TimeInstant,
    bounds_stop: TimeInstant,
    multiplier: float,
    options: JumpOptions,
    jump_seconds: float = JUMP_SECONDS,
    edge_seconds: float = EDGE_SECONDS,
) -> JumpResult:
    forward = not options.reverse
    seconds = jump_step_seconds(multiplier, options, jump_seconds)
    epsilon = edge_epsilon(multiplier, edge_seconds)

    lookup: Lookup = index.index_of(current)

    # Sitting on a boundary counts as being on the far side of it.
    if isinstance(lookup, Found):
        interval = index.get(lookup.index)
        assert interval is not None
        if not forward and current.equals_epsilon(interval.start, epsilon):
            lookup = NotFound(lookup.index)
        elif forward and current.equals_epsilon(interval.stop, epsilon):
            lookup = NotFound(lookup.index + 1)

    # Sitting just outside a boundary counts as being inside.
    if isinstance(lookup, NotFound):
        if forward:
            neighbour = index.get(lookup.insertion_index)
            if neighbour is not None and current.equals_epsilon(neighbour.start, epsilon):
                lookup = Found(lookup.insertion_index)
        else:
            neighbour = index.get(lookup.insertion_index - 1)
            if neighbour is not None and current.equals_epsilon(neighbour.stop, epsilon):
                lookup = Found(lookup.insertion_index - 1)

    target: TimeInstant | None = None
    reason = ""

    if isinstance(lookup, Found):
        position = lookup.index
        interval = index.get(position)
        assert interval is not None

        if options.edge and not forward and position == 0 and current.equals_epsilon(interval.start, epsilon):
            target, reason = bounds_start, "beginning"
        elif options.edge and forward and position == len(index) - 1 and current.equals_epsilon(interval.stop, epsilon):
            target, reason = bounds_stop, "ending"
        elif options.edge and not forward:
            target, reason = interval.start, f"start of {_name(interval, position)}"
        elif options.edge:
            if options.collapse:
                following = index.get(position + 1)
                if following is not None:
                    target, reason = following.start, f"start of later {_name(following, position + 1)}"
                else:
                    target, reason = bounds_stop, "ending"
            else:
                target, reason = interval.stop, f"stop of {_name(interval, position)}"
        else:
            candidate = current.add_seconds(seconds)
            # Leaving the interval falls through to the gap handling below.
            if index.index_of(candidate) == lookup:
                direction = "forwards" if forward else "backwards"
                target, reason = candidate, f"{seconds:g}s {direction} in {_name(interval, position)}"

    if target is None:
        if options.edge and isinstance(lookup, NotFound):
            if forward:
                following = index.get(lookup.insertion_index)
                if following is not None:
                    edge_name = "stop" if options.collapse else "start"
                    target = following.stop if options.collapse else following.start
                    reason = f"{edge_name} of next {_name(following, lookup.insertion_index)}"
                else:
                    target, reason = bounds_stop, "ending"
            else:
                previous = index.get(lookup.insertion_index - 1)
                if previous is not None:
                    edge_name = "start" if options.collapse else "stop"
                    target = previous.start if options.collapse else previous.stop
                    reason = f"{edge_name} of previous {_name(previous, lookup.insertion_index - 1)}"
                else:
                    target, reason = bounds_start, "beginning"
        elif not options.edge:
            target, reason = current.add_seconds(seconds), f"{seconds:g}s {'forwards' if forward else 'backwards'}"

    if target is None and isinstance(lookup, Found):
        interval = index.get(lookup.index)
        assert interval is not None
        target = interval.stop if forward else interval.start
        reason = f"{'stop' if forward else 'start'} of {_name(interval, lookup.index)}"

    assert target is not None, "jump produced no target"

    clamped = False
    if forward and target > bounds_stop:
        target, clamped = bounds_stop, True
    elif not forward and target < bounds_start:
        target, clamped = bounds_start, True

    return JumpResult(origin=current, target=target, reason=reason, clamped=clamped)


def _name(interval: Interval, position: int) -> str:
    name = getattr(interval.payload, "name", None)
    return str(name) if name else f"interval {position}"


class Navigator:
    """Applies jumps to a clock against a (possibly merged) interval index."""

    def __init__(
        self,
        clock: Clock,
        index: IntervalIndex,
        jump_seconds: float = JUMP_SECONDS,
        edge_seconds: float = EDGE_SECONDS,
    ) -> None:
        self._clock = clock
        self._index = index
        self.jump_seconds = jump_seconds
        self.edge_seconds = edge_seconds

    def jump(self, options: JumpOptions | None = None) -> JumpResult | None:
        clock = self._clock
        if not len(self._index) or clock.current is None or clock.start is None or clock.stop is None:
            logger.debug("Nothing to jump across")
            return None

        result = compute_jump(
            current=clock.current,
            index=self._index,
            bounds_start=clock.start,
            bounds_stop=clock.stop,
            multiplier=clock.multiplier,
            options=options or JumpOptions(),
            jump_seconds=self.jump_seconds,
            edge_seconds=self.edge_seconds,
        )
        logger.debug(
            "Jumping to %s (%s) from %s%s",
            result.target,
            result.reason,
            result.origin,
            ", limited to timeline bounds" if result.clamped else "",
        )
        clock.current = result.target
        return result
