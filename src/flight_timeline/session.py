"""The owning context for registry, clock and navigation state."""

from __future__ import annotations

import logging

from flight_timeline.pilots.models import Payload
from flight_timeline.pilots.registry import Owner, OwnerRegistry
from flight_timeline.settings import TimelineSettings
from flight_timeline.timeline.clock import Clock
from flight_timeline.timeline.instant import TimeInstant
from flight_timeline.timeline.navigator import JumpOptions, JumpResult, Navigator

logger = logging.getLogger(__name__)


class TimelineSession:
    def __init__(self, settings: TimelineSettings | None = None) -> None:
        self.settings = settings or TimelineSettings.from_env()
        self.registry = OwnerRegistry()
        self.clock = Clock(multiplier=self.settings.default_rate)
        self.selected: Owner = self.registry.unassigned
        self.navigator = Navigator(
            self.clock,
            self.registry.global_index,
            jump_seconds=self.settings.jump_seconds,
            edge_seconds=self.settings.edge_seconds,
        )
        self.timezone_offset: float | None = None
        self.trailing_sec: float | None = None

    @property
    def bounds(self) -> tuple[TimeInstant, TimeInstant] | None:
        return self.registry.bounds()

    def add(self, payload: Payload, owner_key: str = "") -> bool:
        owner = self.registry.ensure(owner_key)
        return self.registry.add(owner, payload)

    def delete(self, payload: Payload) -> None:
        """Detach ``payload`` from its owner and from the global index."""
        owner = self.registry.owner_of(payload)
        if owner is not None:
            self.registry.remove(owner, payload)
        # Track pieces cut by the payload grow back.
        self.registry.rebuild_global()
        logger.info("Deleted %s %r", payload.kind.value, payload.name)

    def loaded(self, last: Payload | None = None) -> None:
        """Rebuild the global index and fit the clock to it."""
        self.registry.rebuild_global()
        bounds = self.registry.bounds()
        if bounds is not None:
            self.clock.current = None
            self.clock.reset_bounds(*bounds)
        if last is not None and last.interval is not None:
            self.clock.set_current(last.interval.start)
            owner = self.registry.owner_of(last)
            if owner is not None:
                self.selected = owner
        logger.info(
            "Timeline has %d intervals across %d owners",
            len(self.registry.global_index),
            len(self.registry.owners()),
        )

    def jump(self, options: JumpOptions | None = None) -> JumpResult | None:
        return self.navigator.jump(options)
