"""Per-tick reconciliation of the active track and clip."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from flight_timeline.pilots.models import Clip, Payload, Track
from flight_timeline.pilots.registry import Owner
from flight_timeline.playback.resolver import ActiveEntities, ActiveState, NullListener, TimelineListener, resolve
from flight_timeline.session import TimelineSession
from flight_timeline.timeline.navigator import JumpOptions, JumpResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TickReport:
    active: ActiveEntities
    advanced: JumpResult | None = None


class PlaybackDriver:
    def __init__(self, session: TimelineSession, listener: TimelineListener | None = None) -> None:
        self._session = session
        self._listener = listener or NullListener()
        self._state = ActiveState()
        self._base_multiplier: float | None = None

    @property
    def session(self) -> TimelineSession:
        return self._session

    @property
    def active_track(self) -> Track | None:
        return self._state.track

    @property
    def active_clip(self) -> Clip | None:
        return self._state.clip

    def tick(self) -> TickReport:
        active = self._reconcile()
        clock = self._session.clock
        if (
            active.found
            or not clock.should_animate
            or not self._session.settings.seamless
            or not len(self._session.registry.global_index)
        ):
            return TickReport(active=active)

        # Seamless: skip the dead zone towards the next interval, once per tick.
        advanced = self._session.jump(JumpOptions(edge=True, reverse=clock.multiplier <= 0))
        if advanced is None:
            return TickReport(active=active)
        logger.debug("Seamless advance to %s", advanced.target)
        return TickReport(active=self._reconcile(), advanced=advanced)

    def jump(self, options: JumpOptions | None = None) -> JumpResult | None:
        return self._session.jump(options)

    def change_owner(self, owner: Owner) -> None:
        self._session.selected = owner
        logger.info("Pilot %s", owner.display_name)

    def next_owner(self) -> Owner:
        owner = self._session.registry.next_owner(self._session.selected)
        self.change_owner(owner)
        return owner

    def previous_owner(self) -> Owner:
        owner = self._session.registry.previous_owner(self._session.selected)
        self.change_owner(owner)
        return owner

    def select(self, payload: Payload) -> bool:
        """Focus an entity: its pilot becomes selected and the cursor moves onto it."""
        interval = payload.interval
        owner = self._session.registry.owner_of(payload)
        if interval is None or owner is None:
            return False

        clock = self._session.clock
        changed = False
        if self._session.selected is not owner:
            self.change_owner(owner)
            changed = True
        if isinstance(payload, Clip) or clock.current is None or not interval.contains(clock.current):
            clock.set_current(interval.start)
            changed = True
        if changed:
            clock.should_animate = True
        return changed

    def delete_active(self) -> Payload | None:
        """Delete the active clip, or the active track when no clip is active."""
        payload: Payload | None = self._state.clip or self._state.track
        if payload is None:
            return None
        if isinstance(payload, Clip):
            self.on_clip_deactivated(payload)
        else:
            self.on_track_deactivated(payload)
        self._state.forget(payload)
        self._session.delete(payload)
        return payload

    def _reconcile(self) -> ActiveEntities:
        session = self._session
        if session.clock.current is None:
            active = ActiveEntities(track=None, clip=None, found=False)
        else:
            active = resolve(session.clock.current, session.selected, session.registry)
        self._state.reconcile(active, self)
        return active

    # TimelineListener, wrapping the external one with clip rate handling.

    def on_track_activated(self, track: Track) -> None:
        logger.debug("Track %s active", track.name)
        self._listener.on_track_activated(track)

    def on_track_deactivated(self, track: Track) -> None:
        self._listener.on_track_deactivated(track)

    def on_clip_activated(self, clip: Clip) -> None:
        clock = self._session.clock
        if self._base_multiplier is None:
            self._base_multiplier = clock.multiplier
        clock.multiplier = clip.rate * clock.direction
        logger.debug("Clip %s active at rate %g", clip.name, clock.multiplier)
        self._listener.on_clip_activated(clip)

    def on_clip_deactivated(self, clip: Clip) -> None:
        self._listener.on_clip_deactivated(clip)
        if self._base_multiplier is not None:
            clock = self._session.clock
            clock.multiplier = abs(self._base_multiplier) * clock.direction
            self._base_multiplier = None
