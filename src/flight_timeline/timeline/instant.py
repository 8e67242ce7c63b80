"""Split day/seconds time representation used by every timeline interval."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

SECONDS_PER_DAY = 86400
MICROSECOND_DIGITS = 6

# Julian day number of proleptic Gregorian ordinal 0.
_ORDINAL_TO_JULIAN_DAY = 1721425

_FRACTION_RE = re.compile(r"^(?P<base>.*T\d{2}:\d{2}:\d{2})(?P<fraction>\.\d+)?(?P<zone>.*)$")


@dataclass(frozen=True, slots=True, order=True)
class TimeInstant:
    """A UTC instant as Julian day number plus seconds since midnight.

    The day component carries every overflow or underflow of the seconds
    component, so arithmetic spanning months keeps sub-millisecond precision.
    """

    day_number: int
    seconds_of_day: float

    def __post_init__(self) -> None:
        days, seconds = divmod(float(self.seconds_of_day), SECONDS_PER_DAY)
        if seconds >= SECONDS_PER_DAY:
            days += 1
            seconds -= SECONDS_PER_DAY
        object.__setattr__(self, "day_number", int(self.day_number) + int(days))
        object.__setattr__(self, "seconds_of_day", seconds)

    @staticmethod
    def from_datetime(value: datetime) -> TimeInstant:
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        value = value.astimezone(UTC)
        seconds = value.hour * 3600 + value.minute * 60 + value.second + value.microsecond / 1_000_000
        return TimeInstant(value.toordinal() + _ORDINAL_TO_JULIAN_DAY, seconds)

    @staticmethod
    def from_iso8601(text: str) -> TimeInstant:
        """Parse an ISO 8601 timestamp, keeping fractional digits beyond microseconds."""
        text = text.strip()
        match = _FRACTION_RE.match(text)
        if match is None:
            return TimeInstant.from_datetime(datetime.fromisoformat(text))
        base = datetime.fromisoformat(match.group("base") + match.group("zone"))
        fraction = match.group("fraction")
        instant = TimeInstant.from_datetime(base)
        if fraction:
            instant = instant.add_seconds(float(fraction))
        return instant

    def to_datetime(self) -> datetime:
        midnight = datetime.combine(self.calendar_date(), datetime.min.time(), tzinfo=UTC)
        return midnight + timedelta(seconds=self.seconds_of_day)

    def calendar_date(self) -> date:
        return date.fromordinal(self.day_number - _ORDINAL_TO_JULIAN_DAY)

    def to_iso8601(self, precision: int | None = None) -> str:
        """Render as ``YYYY-MM-DDTHH:MM:SS[.fff]Z``.

        Without a precision, trailing zeros of the fractional part are dropped
        (at most microsecond digits are kept); with one, exactly that many
        fractional digits are written.
        """
        digits = MICROSECOND_DIGITS if precision is None else max(0, precision)
        scale = 10**digits
        units = round(self.seconds_of_day * scale)
        day_number = self.day_number
        if units >= SECONDS_PER_DAY * scale:
            units -= SECONDS_PER_DAY * scale
            day_number += 1
        whole, fraction = divmod(units, scale)
        hours, remainder = divmod(whole, 3600)
        minutes, seconds = divmod(remainder, 60)
        day = date.fromordinal(day_number - _ORDINAL_TO_JULIAN_DAY)

        text = f"{day.isoformat()}T{hours:02d}:{minutes:02d}:{seconds:02d}"
        fraction_text = f"{fraction:0{digits}d}" if digits else ""
        if precision is None:
            fraction_text = fraction_text.rstrip("0")
        if fraction_text:
            text = f"{text}.{fraction_text}"
        return text + "Z"

    def add_seconds(self, seconds: float) -> TimeInstant:
        return TimeInstant(self.day_number, self.seconds_of_day + seconds)

    def seconds_difference(self, other: TimeInstant) -> float:
        """Seconds from ``other`` to ``self`` (positive when self is later)."""
        return (self.day_number - other.day_number) * SECONDS_PER_DAY + (self.seconds_of_day - other.seconds_of_day)

    def equals_epsilon(self, other: TimeInstant, epsilon: float) -> bool:
        return math.fabs(self.seconds_difference(other)) <= epsilon

    def __str__(self) -> str:
        return self.to_iso8601()


def format_local(instant: TimeInstant, offset_seconds: float | None) -> str:
    """Render an instant shifted into a display timezone, whole seconds only."""
    shifted = instant.add_seconds(offset_seconds or 0.0)
    return shifted.to_iso8601(precision=0)[:-1]
