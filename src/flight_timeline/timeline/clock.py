"""Playback clock shared by the navigator and the tick driver."""

from __future__ import annotations

from dataclasses import dataclass

from flight_timeline.timeline.instant import TimeInstant


@dataclass(slots=True)
class Clock:
    start: TimeInstant | None = None
    stop: TimeInstant | None = None
    current: TimeInstant | None = None
    multiplier: float = 1.0
    should_animate: bool = False

    @property
    def has_bounds(self) -> bool:
        return self.start is not None and self.stop is not None

    @property
    def direction(self) -> int:
        return -1 if self.multiplier < 0 else 1

    def reset_bounds(self, start: TimeInstant, stop: TimeInstant) -> None:
        if stop < start:
            raise ValueError("clock stop must not precede start")
        self.start = start
        self.stop = stop
        if self.current is None:
            self.current = start
        else:
            self.current = self.clamp(self.current)

    def clamp(self, instant: TimeInstant) -> TimeInstant:
        if self.start is not None and instant < self.start:
            return self.start
        if self.stop is not None and instant > self.stop:
            return self.stop
        return instant

    def set_current(self, instant: TimeInstant) -> None:
        self.current = self.clamp(instant)

    def advance(self, elapsed_sec: float) -> TimeInstant | None:
        """Move the cursor by wall-clock ``elapsed_sec`` scaled by the multiplier."""
        if self.current is None:
            return None
        self.current = self.clamp(self.current.add_seconds(elapsed_sec * self.multiplier))
        return self.current

    def toggle_animation(self) -> bool:
        self.should_animate = not self.should_animate
        return self.should_animate
