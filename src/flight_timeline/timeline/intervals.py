"""Sorted collections of half-open time intervals."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from flight_timeline.timeline.instant import TimeInstant


@dataclass(eq=False, slots=True)
class Interval:
    """Half-open span ``[start, stop)`` carrying an opaque payload."""

    start: TimeInstant
    stop: TimeInstant
    payload: Any = None

    def __post_init__(self) -> None:
        if self.stop < self.start:
            raise ValueError(f"interval stop {self.stop} precedes start {self.start}")

    @property
    def duration(self) -> float:
        return self.stop.seconds_difference(self.start)

    def contains(self, instant: TimeInstant) -> bool:
        return self.start <= instant < self.stop

    def overlaps(self, other: Interval) -> bool:
        return self.start < other.stop and other.start < self.stop

    def clone(self) -> Interval:
        return Interval(start=self.start, stop=self.stop, payload=self.payload)


@dataclass(frozen=True, slots=True)
class Found:
    index: int

    @property
    def encoded(self) -> int:
        return self.index


@dataclass(frozen=True, slots=True)
class NotFound:
    insertion_index: int

    @property
    def encoded(self) -> int:
        return ~self.insertion_index


Lookup = Found | NotFound


def decode_lookup(encoded: int) -> Lookup:
    """Turn the one's-complement binary search encoding into a lookup result."""
    if encoded >= 0:
        return Found(encoded)
    return NotFound(~encoded)


@dataclass(frozen=True, slots=True)
class InsertResult:
    ok: bool
    index: int | None = None
    conflict: Interval | None = None


def _start_key(interval: Interval) -> TimeInstant:
    return interval.start


class IntervalIndex:
    """Intervals kept sorted ascending by start.

    The collection never overlaps: ``insert`` rejects a conflicting interval
    while ``overlay`` cuts existing intervals around the new one, which wins
    wherever they overlap.
    """

    def __init__(self, intervals: list[Interval] | None = None) -> None:
        self._intervals: list[Interval] = []
        for interval in intervals or []:
            self.overlay(interval)

    def __len__(self) -> int:
        return len(self._intervals)

    def __iter__(self) -> Iterator[Interval]:
        return iter(list(self._intervals))

    @property
    def length(self) -> int:
        return len(self._intervals)

    @property
    def bounds_start(self) -> TimeInstant | None:
        if not self._intervals:
            return None
        return self._intervals[0].start

    @property
    def bounds_stop(self) -> TimeInstant | None:
        if not self._intervals:
            return None
        return max(interval.stop for interval in self._intervals)

    def insert(self, interval: Interval) -> InsertResult:
        position = bisect_right(self._intervals, interval.start, key=_start_key)
        for neighbour in (self.get(position - 1), self.get(position)):
            if neighbour is not None and neighbour.overlaps(interval):
                return InsertResult(ok=False, conflict=neighbour)
        self._intervals.insert(position, interval)
        return InsertResult(ok=True, index=position)

    def overlay(self, interval: Interval) -> None:
        """Insert ``interval``, trimming or splitting whatever it overlaps.

        Empty intervals cover no instant and are ignored.
        """
        if interval.stop <= interval.start:
            return
        kept: list[Interval] = []
        for item in self._intervals:
            if not item.overlaps(interval):
                kept.append(item)
                continue
            if item.start < interval.start:
                kept.append(Interval(start=item.start, stop=interval.start, payload=item.payload))
            if interval.stop < item.stop:
                kept.append(Interval(start=interval.stop, stop=item.stop, payload=item.payload))
        kept.sort(key=_start_key)
        position = bisect_right(kept, interval.start, key=_start_key)
        kept.insert(position, interval)
        self._intervals = kept

    def remove(self, interval: Interval) -> bool:
        for position, item in enumerate(self._intervals):
            if item is interval:
                del self._intervals[position]
                return True
        if interval.payload is None:
            return False
        return self.remove_payload(interval.payload)

    def remove_payload(self, payload: Any) -> bool:
        """Remove every interval carrying ``payload``, split pieces included."""
        kept = [item for item in self._intervals if item.payload is not payload]
        removed = len(kept) != len(self._intervals)
        self._intervals = kept
        return removed

    def find_by_payload(self, payload: Any) -> Interval | None:
        for item in self._intervals:
            if item.payload is payload:
                return item
        return None

    def index_of(self, instant: TimeInstant) -> Lookup:
        insertion = bisect_right(self._intervals, instant, key=_start_key)
        if insertion and self._intervals[insertion - 1].contains(instant):
            return Found(insertion - 1)
        return NotFound(insertion)

    def get(self, index: int) -> Interval | None:
        if 0 <= index < len(self._intervals):
            return self._intervals[index]
        return None

    def find_interval_containing_date(self, instant: TimeInstant) -> Interval | None:
        lookup = self.index_of(instant)
        if isinstance(lookup, Found):
            return self._intervals[lookup.index]
        return None

    def find_payload_containing_date(self, instant: TimeInstant) -> Any:
        interval = self.find_interval_containing_date(instant)
        return interval.payload if interval is not None else None

    def payloads(self) -> list[Any]:
        return [interval.payload for interval in self._intervals]

    def clear(self) -> None:
        self._intervals.clear()
