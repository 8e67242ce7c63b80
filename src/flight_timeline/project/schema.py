"""Timeline document schema, format version 2."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ClipDescriptor(BaseModel):
    model_config = ConfigDict(extra="allow")

    filename: str
    person: str | None = None
    timestamp: str | float | None = None
    duration: str | float | None = None
    type: str | None = None
    rate: float | None = None
    latitude: float | None = None
    longitude: float | None = None
    altitude: float | None = None

    def metadata(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class TimelineDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    format_version: int = 2
    tracks: list[str] = Field(default_factory=list)
    clips: list[ClipDescriptor] = Field(default_factory=list)
    timezone: str | float | None = None
    trailing: str | float | None = None
