"""FastAPI request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TimelineStateResponse(BaseModel):
    cursor: str | None
    start: str | None
    stop: str | None
    local_cursor: str | None = None
    multiplier: float
    animating: bool
    selected_owner: str
    active_track: str | None = None
    active_clip: str | None = None


class CursorRequest(BaseModel):
    cursor: str = Field(min_length=1)


class JumpRequest(BaseModel):
    reverse: bool = False
    edge: bool = False
    small: bool = False
    collapse: bool = False


class JumpResponse(BaseModel):
    origin: str
    target: str
    reason: str
    clamped: bool


class OwnerResponse(BaseModel):
    key: str
    display_name: str
    color: str
    tracks: int
    clips: int
    selected: bool


class SelectOwnerRequest(BaseModel):
    key: str


class KeyRequest(BaseModel):
    key: str = Field(min_length=1)
    ctrl: bool = False
    shift: bool = False


class KeymapPayload(BaseModel):
    bindings: dict[str, str]
