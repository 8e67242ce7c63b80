from __future__ import annotations

import pytest
from scenario import build_scenario

from flight_timeline.session import TimelineSession


@pytest.fixture
def scenario() -> TimelineSession:
    return build_scenario()
