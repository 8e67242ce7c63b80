"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from flight_timeline.timeline.navigator import EDGE_SECONDS, JUMP_SECONDS

DEFAULT_CLIP_DURATION_SEC = 5.0
DEFAULT_PROBE_TIMEOUT_SEC = 5.0

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(slots=True)
class TimelineSettings:
    jump_seconds: float = JUMP_SECONDS
    edge_seconds: float = EDGE_SECONDS
    default_clip_duration_sec: float = DEFAULT_CLIP_DURATION_SEC
    probe_timeout_sec: float = DEFAULT_PROBE_TIMEOUT_SEC
    default_rate: float = 1.0
    seamless: bool = True
    collapse: bool = True
    log_level: str = "INFO"

    @staticmethod
    def from_env() -> TimelineSettings:
        return TimelineSettings(
            jump_seconds=_env_float("FLIGHT_TIMELINE_JUMP_SECONDS", JUMP_SECONDS, minimum=0.1),
            edge_seconds=_env_float("FLIGHT_TIMELINE_EDGE_SECONDS", EDGE_SECONDS, minimum=0.0),
            default_clip_duration_sec=_env_float(
                "FLIGHT_TIMELINE_DEFAULT_DURATION_SEC", DEFAULT_CLIP_DURATION_SEC, minimum=0.1
            ),
            probe_timeout_sec=_env_float("FLIGHT_TIMELINE_PROBE_TIMEOUT_SEC", DEFAULT_PROBE_TIMEOUT_SEC, minimum=0.01),
            default_rate=_env_float("FLIGHT_TIMELINE_DEFAULT_RATE", 1.0, minimum=0.01),
            seamless=_env_bool("FLIGHT_TIMELINE_SEAMLESS", True),
            collapse=_env_bool("FLIGHT_TIMELINE_COLLAPSE", True),
            log_level=os.getenv("FLIGHT_TIMELINE_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )


def _env_float(name: str, default: float, minimum: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return max(value, minimum)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    return default
