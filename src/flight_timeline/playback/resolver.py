"""Which track and clip are active at an instant."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from flight_timeline.pilots.models import Clip, Track
from flight_timeline.pilots.registry import Owner, OwnerRegistry
from flight_timeline.timeline.instant import TimeInstant


class TimelineListener(Protocol):
    def on_track_activated(self, track: Track) -> None: ...

    def on_track_deactivated(self, track: Track) -> None: ...

    def on_clip_activated(self, clip: Clip) -> None: ...

    def on_clip_deactivated(self, clip: Clip) -> None: ...


class NullListener:
    def on_track_activated(self, track: Track) -> None:
        return None

    def on_track_deactivated(self, track: Track) -> None:
        return None

    def on_clip_activated(self, clip: Clip) -> None:
        return None

    def on_clip_deactivated(self, clip: Clip) -> None:
        return None


@dataclass(frozen=True, slots=True)
class ActiveEntities:
    track: Track | None
    clip: Clip | None
    found: bool


def resolve(instant: TimeInstant, owner: Owner, registry: OwnerRegistry) -> ActiveEntities:
    unassigned = registry.unassigned

    # Any pilot: every clip on the timeline applies, no track follows.
    if owner is unassigned:
        interval = registry.global_index.find_interval_containing_date(instant)
        if interval is None:
            return ActiveEntities(track=None, clip=None, found=False)
        clip = interval.payload if isinstance(interval.payload, Clip) else None
        return ActiveEntities(track=None, clip=clip, found=True)

    track = owner.track_at(instant)
    clip = owner.clip_at(instant)
    if clip is None:
        clip = unassigned.clip_at(instant)
    return ActiveEntities(track=track, clip=clip, found=track is not None or clip is not None)


class ActiveState:
    """The track and clip active after the previous tick."""

    def __init__(self) -> None:
        self.track: Track | None = None
        self.clip: Clip | None = None

    def reconcile(self, entities: ActiveEntities, listener: TimelineListener) -> bool:
        changed = False
        if entities.track is not self.track:
            previous, self.track = self.track, entities.track
            if previous is not None:
                listener.on_track_deactivated(previous)
            if entities.track is not None:
                listener.on_track_activated(entities.track)
            changed = True
        if entities.clip is not self.clip:
            previous_clip, self.clip = self.clip, entities.clip
            if previous_clip is not None:
                listener.on_clip_deactivated(previous_clip)
            if entities.clip is not None:
                listener.on_clip_activated(entities.clip)
            changed = True
        return changed

    def forget(self, payload: Track | Clip) -> None:
        if payload is self.track:
            self.track = None
        if payload is self.clip:
            self.clip = None
