"""Pilots owning track and clip intervals, plus the merged global index."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from flight_timeline.pilots.models import Clip, Payload, PayloadKind, Track
from flight_timeline.timeline.instant import TimeInstant
from flight_timeline.timeline.intervals import IntervalIndex

logger = logging.getLogger(__name__)

UNASSIGNED = ""

# https://htmlcolorcodes.com/color-chart/
PALETTE: tuple[str, ...] = (
    "#3498db",
    "#F1C40F",
    "#E67E22",
    "#2ecc71",
    "#27AE60",
    "#16A085",
    "#1ABC9C",
    "#3498DB",
    "#8E44AD",
    "#9B59B6",
    "#E74C3C",
    "#C0392B",
    "#F39C12",
    "#D35400",
)


@dataclass(eq=False, slots=True)
class Owner:
    key: str
    color_id: int
    tracks: IntervalIndex = field(default_factory=IntervalIndex)
    clips: IntervalIndex = field(default_factory=IntervalIndex)

    @property
    def color(self) -> str:
        return PALETTE[self.color_id % len(PALETTE)]

    @property
    def is_unassigned(self) -> bool:
        return self.key == UNASSIGNED

    @property
    def display_name(self) -> str:
        return self.key or "Any pilot"

    def collection(self, kind: PayloadKind) -> IntervalIndex:
        return self.tracks if kind == PayloadKind.TRACK else self.clips

    def track_at(self, instant: TimeInstant) -> Track | None:
        return self.tracks.find_payload_containing_date(instant)

    def clip_at(self, instant: TimeInstant) -> Clip | None:
        return self.clips.find_payload_containing_date(instant)


class OwnerRegistry:
    """Owners in first-registration order; the unassigned owner always comes first."""

    def __init__(self) -> None:
        self._owners: list[Owner] = []
        self._by_key: dict[str, Owner] = {}
        self.global_index = IntervalIndex()
        self.unassigned = self.ensure(UNASSIGNED)

    def ensure(self, key: str) -> Owner:
        if not isinstance(key, str):
            raise TypeError(f"owner key must be a string, not {type(key).__name__}")
        owner = self._by_key.get(key)
        if owner is None:
            owner = Owner(key=key, color_id=len(self._owners))
            self._owners.append(owner)
            self._by_key[key] = owner
            logger.debug("Registered owner %r with color %s", owner.display_name, owner.color)
        return owner

    def get(self, key: str) -> Owner:
        owner = self._by_key.get(key)
        if owner is None:
            raise KeyError(f"owner '{key}' not found")
        return owner

    def owners(self) -> list[Owner]:
        return list(self._owners)

    def next_owner(self, owner: Owner) -> Owner:
        position = self._position(owner)
        return self._owners[(position + 1) % len(self._owners)]

    def previous_owner(self, owner: Owner) -> Owner:
        position = self._position(owner)
        return self._owners[(position - 1) % len(self._owners)]

    def add(self, owner: Owner, payload: Payload) -> bool:
        """Register ``payload`` with ``owner``; False when its interval conflicts."""
        interval = payload.interval
        assert interval is not None, f"{payload.name} has no interval to register"
        assert interval.payload is payload, "interval does not reference its payload"
        assert payload.owner in (None, owner.key), f"{payload.name} already belongs to {payload.owner!r}"

        intervals = owner.collection(payload.kind)
        stale = intervals.find_by_payload(payload)
        if stale is not None:
            intervals.remove(stale)

        result = intervals.insert(interval)
        if not result.ok:
            if stale is not None:
                intervals.insert(stale)
            conflict = result.conflict.payload if result.conflict is not None else None
            logger.warning(
                "Could not add %s %r to %r: overlaps %r",
                payload.kind.value,
                payload.name,
                owner.display_name,
                getattr(conflict, "name", conflict),
            )
            return False

        payload.owner = owner.key
        # Clips overlay tracks, so only a fresh clip can go straight on top.
        if stale is None and payload.kind == PayloadKind.CLIP:
            self.global_index.overlay(interval.clone())
        else:
            self.rebuild_global()
        return True

    def remove(self, owner: Owner, payload: Payload) -> None:
        assert payload.owner in (None, owner.key), f"{payload.name} belongs to {payload.owner!r}"
        if payload.interval is not None:
            owner.collection(payload.kind).remove(payload.interval)
        else:
            owner.collection(payload.kind).remove_payload(payload)
        payload.owner = None

    def owner_of(self, payload: Payload) -> Owner | None:
        if payload.owner is None:
            return None
        return self._by_key.get(payload.owner)

    def rebuild_global(self) -> IntervalIndex:
        """Recreate the global index: every owner's tracks, then every owner's clips on top."""
        self.global_index.clear()
        for owner in self._owners:
            for interval in owner.tracks:
                self.global_index.overlay(interval.clone())
        for owner in self._owners:
            for interval in owner.clips:
                self.global_index.overlay(interval.clone())
        return self.global_index

    def bounds(self) -> tuple[TimeInstant, TimeInstant] | None:
        start = self.global_index.bounds_start
        stop = self.global_index.bounds_stop
        if start is None or stop is None:
            return None
        return start, stop

    def _position(self, owner: Owner) -> int:
        for position, item in enumerate(self._owners):
            if item is owner:
                return position
        raise KeyError(f"owner '{owner.key}' is not registered")
