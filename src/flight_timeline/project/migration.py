"""Timeline document migration helpers."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from flight_timeline.project.schema import TimelineDocument


def migrate_to_v2(document_data: dict[str, Any]) -> TimelineDocument:
    """Validate a saved timeline, upgrading the legacy ``flights``/``videos`` layout."""
    original = deepcopy(document_data)
    format_version = int(original.get("format_version", 1))

    if format_version == 2:
        return TimelineDocument.model_validate(original)
    if format_version != 1:
        raise ValueError(f"Unsupported format_version={format_version}")

    tracks = original.pop("flights", None)
    if tracks is None:
        tracks = original.pop("tracks", [])
    clips = original.pop("videos", None)
    if clips is None:
        clips = original.pop("clips", [])

    original["format_version"] = 2
    original["tracks"] = [str(item) for item in tracks if isinstance(item, str)]
    original["clips"] = [item for item in clips if isinstance(item, dict) and item.get("filename")]

    return TimelineDocument.model_validate(original)
