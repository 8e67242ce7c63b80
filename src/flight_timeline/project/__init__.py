"""Timeline document schema, migration and loading exports."""

from flight_timeline.project.loader import LoadReport, TrackData, load_document, save_document
from flight_timeline.project.migration import migrate_to_v2
from flight_timeline.project.schema import ClipDescriptor, TimelineDocument

__all__ = [
    "ClipDescriptor",
    "LoadReport",
    "TimelineDocument",
    "TrackData",
    "load_document",
    "migrate_to_v2",
    "save_document",
]
