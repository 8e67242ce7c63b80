"""Lenient parsers for values found in timeline documents and media metadata."""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from typing import Any

from flight_timeline.timeline.instant import TimeInstant

logger = logging.getLogger(__name__)

_TIMEZONE_RE = re.compile(r"^(?P<sign>[+-])(?P<hours>\d{2}):?(?P<minutes>\d{2})$")
_DURATION_RE = re.compile(r"^(?P<hours>\d{1,2}):(?P<minutes>\d{2}):(?P<seconds>\d{2}(?:\.\d+)?)$")

_MIME_TYPES: tuple[tuple[tuple[str, ...], str], ...] = (
    ((".igc",), "application/x-igc"),
    ((".jpeg", ".jpg"), "image/jpeg"),
    ((".png",), "image/png"),
    ((".mp4",), "video/mp4"),
    ((".mov",), "video/quicktime"),
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_timestamp(value: Any) -> TimeInstant | None:
    """Numbers are milliseconds since the epoch; strings are ISO 8601."""
    try:
        if _is_number(value):
            return TimeInstant.from_datetime(datetime.fromtimestamp(max(0, value) / 1000, tz=UTC))
        if isinstance(value, datetime):
            return TimeInstant.from_datetime(value)
        if isinstance(value, str):
            return TimeInstant.from_iso8601(value)
    except (OverflowError, OSError, ValueError):
        pass
    logger.warning("Couldn't parse timestamp: %s", value)
    return None


def parse_timezone(value: Any) -> float | None:
    """Offset of a timezone in seconds; numbers are already seconds."""
    if _is_number(value):
        return float(value)
    if not value:
        return None
    if isinstance(value, str):
        text = value.strip()
        if text.upper() == "Z":
            return 0.0
        match = _TIMEZONE_RE.match(text)
        if match:
            seconds = int(match.group("hours")) * 3600 + int(match.group("minutes")) * 60
            return float(-seconds if match.group("sign") == "-" else seconds)
    logger.warning("Couldn't parse timezone: %s", value)
    return None


def parse_duration(value: Any) -> float | None:
    """Duration in seconds; numbers are already seconds, strings are HH:MM:SS."""
    if _is_number(value):
        return float(value)
    if not value:
        return None
    if isinstance(value, str):
        match = _DURATION_RE.match(value.strip())
        if match:
            return int(match.group("hours")) * 3600 + int(match.group("minutes")) * 60 + float(match.group("seconds"))
    logger.warning("Couldn't parse duration: %s", value)
    return None


def guess_mime_type(filename: str, mime_type: str | None = None) -> str:
    if mime_type:
        return mime_type
    lowered = filename.lower()
    for extensions, guessed in _MIME_TYPES:
        if lowered.endswith(extensions):
            return guessed
    return "application/binary"
