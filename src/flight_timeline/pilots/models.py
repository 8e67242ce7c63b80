"""Tracks and clips: the payloads registered on the timeline."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from flight_timeline.timeline.instant import TimeInstant
from flight_timeline.timeline.intervals import Interval


class PayloadKind(str, Enum):
    TRACK = "track"
    CLIP = "clip"


class ClipMedia(str, Enum):
    VIDEO = "video"
    IMAGE = "image"


@dataclass(frozen=True, slots=True)
class Position:
    latitude: float
    longitude: float
    altitude: float

    def validate(self) -> None:
        if abs(self.longitude) > 180:
            raise ValueError(f"longitude {self.longitude} out of range [-180,180]")
        if abs(self.latitude) > 90:
            raise ValueError(f"latitude {self.latitude} out of range [-90,90]")
        if self.altitude < 0:
            raise ValueError("altitude must be >= 0")


@dataclass(frozen=True, slots=True)
class Fix:
    time: TimeInstant
    latitude: float
    longitude: float
    altitude: float


def _fix_time(fix: Fix) -> TimeInstant:
    return fix.time


@dataclass(eq=False, slots=True)
class Track:
    """A flight log; its interval spans the first to the last fix."""

    name: str
    fixes: list[Fix] = field(default_factory=list)
    pilot: str = ""
    owner: str | None = field(default=None, init=False)
    interval: Interval | None = field(default=None, init=False)

    kind: ClassVar[PayloadKind] = PayloadKind.TRACK

    def __post_init__(self) -> None:
        self.fixes = sorted(self.fixes, key=_fix_time)
        self.refresh()

    def refresh(self) -> Interval | None:
        if not self.fixes:
            self.interval = None
        else:
            self.interval = Interval(start=self.fixes[0].time, stop=self.fixes[-1].time, payload=self)
        return self.interval

    @property
    def is_empty(self) -> bool:
        return self.interval is None

    def position_at(self, instant: TimeInstant) -> Position | None:
        if not self.fixes or instant < self.fixes[0].time or instant > self.fixes[-1].time:
            return None
        position = bisect_right(self.fixes, instant, key=_fix_time)
        before = self.fixes[position - 1]
        if before.time == instant or position >= len(self.fixes):
            return Position(before.latitude, before.longitude, before.altitude)
        after = self.fixes[position]
        span = after.time.seconds_difference(before.time)
        ratio = instant.seconds_difference(before.time) / span if span > 0 else 0.0
        return Position(
            latitude=before.latitude + (after.latitude - before.latitude) * ratio,
            longitude=before.longitude + (after.longitude - before.longitude) * ratio,
            altitude=before.altitude + (after.altitude - before.altitude) * ratio,
        )

    def save(self) -> str:
        return self.name


@dataclass(eq=False, slots=True)
class Clip:
    """A video or photo shown from ``start`` for ``duration * rate`` timeline seconds."""

    name: str
    start: TimeInstant
    duration: float
    media: ClipMedia = ClipMedia.VIDEO
    rate: float = 1.0
    position: Position | None = None
    descriptor: dict[str, Any] = field(default_factory=dict)
    owner: str | None = field(default=None, init=False)
    interval: Interval | None = field(default=None, init=False)

    kind: ClassVar[PayloadKind] = PayloadKind.CLIP

    def __post_init__(self) -> None:
        self.validate()
        self.refresh()

    def validate(self) -> None:
        if self.duration < 0:
            raise ValueError("duration must be >= 0")
        if self.rate <= 0:
            raise ValueError("rate must be > 0")
        if self.position is not None:
            self.position.validate()

    def refresh(self) -> Interval:
        self.interval = Interval(start=self.start, stop=self.stop, payload=self)
        return self.interval

    def update(self, start: TimeInstant | None = None, duration: float | None = None, rate: float | None = None) -> Interval:
        """Apply new metadata; the caller re-registers the returned interval."""
        if start is not None:
            self.start = start
            self.descriptor["timestamp"] = start.to_iso8601()
        if duration is not None:
            self.duration = duration
            self.descriptor["duration"] = duration
        if rate is not None:
            self.rate = rate
            self.descriptor["rate"] = rate
        self.validate()
        return self.refresh()

    @property
    def stop(self) -> TimeInstant:
        return self.start.add_seconds(self.duration * self.rate)

    def media_offset(self, instant: TimeInstant) -> float:
        """Position in the media element, in media seconds, for a timeline instant."""
        return instant.seconds_difference(self.start) / self.rate

    def save(self) -> dict[str, Any]:
        data = dict(self.descriptor)
        data.setdefault("filename", self.name)
        data.setdefault("timestamp", self.start.to_iso8601())
        data.setdefault("duration", self.duration)
        if self.rate != 1.0:
            data.setdefault("rate", self.rate)
        return data


Payload = Track | Clip
