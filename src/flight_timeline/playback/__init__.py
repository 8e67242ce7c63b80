"""Playback exports: resolver, tick driver and key bindings."""

from flight_timeline.playback.driver import PlaybackDriver, TickReport
from flight_timeline.playback.keymap import DEFAULT_KEYMAP, KeyAction, dispatch
from flight_timeline.playback.resolver import (
    ActiveEntities,
    ActiveState,
    NullListener,
    TimelineListener,
    resolve,
)

__all__ = [
    "ActiveEntities",
    "ActiveState",
    "DEFAULT_KEYMAP",
    "KeyAction",
    "NullListener",
    "PlaybackDriver",
    "TickReport",
    "TimelineListener",
    "dispatch",
    "resolve",
]
