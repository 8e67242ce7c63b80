"""Media duration probing raced against a timeout."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, InvalidStateError
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProbeOutcome:
    duration: float | None
    timed_out: bool = False


class DurationProbe:
    """Single-resolution completion signal paired with a cancellable timer.

    Whichever of ``resolve`` or the timer settles first wins; later attempts
    are ignored. A timeout settles with an unknown duration.
    """

    def __init__(self, timeout_sec: float, label: str = "") -> None:
        self._future: Future[ProbeOutcome] = Future()
        self._timer = threading.Timer(timeout_sec, self._expire)
        self._timer.daemon = True
        self._label = label
        self._timeout_sec = timeout_sec

    def start(self) -> DurationProbe:
        self._timer.start()
        return self

    @property
    def done(self) -> bool:
        return self._future.done()

    def resolve(self, duration: float | None) -> bool:
        return self._settle(ProbeOutcome(duration=duration))

    def cancel(self) -> None:
        self._timer.cancel()

    def result(self, timeout: float | None = None) -> ProbeOutcome:
        return self._future.result(timeout)

    def _expire(self) -> None:
        if self._settle(ProbeOutcome(duration=None, timed_out=True)):
            logger.info("Duration probe for %s timed out after %gs", self._label or "media", self._timeout_sec)

    def _settle(self, outcome: ProbeOutcome) -> bool:
        try:
            self._future.set_result(outcome)
        except InvalidStateError:
            return False
        self._timer.cancel()
        return True
