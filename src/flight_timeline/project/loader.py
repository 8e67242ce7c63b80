"""Load a timeline document into a session, and save one back out."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from flight_timeline.pilots.models import Clip, ClipMedia, Fix, Position, Track
from flight_timeline.project.parsing import guess_mime_type, parse_duration, parse_timestamp, parse_timezone
from flight_timeline.project.probe import DurationProbe
from flight_timeline.project.schema import ClipDescriptor, TimelineDocument
from flight_timeline.session import TimelineSession

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TrackData:
    pilot: str = ""
    fixes: list[Fix] = field(default_factory=list)


class TrackSource(Protocol):
    def read_track(self, filename: str) -> TrackData:
        """Parse a flight log; raises on missing or malformed data."""


class MediaProbe(Protocol):
    def extract_metadata(self, descriptor: ClipDescriptor) -> dict[str, Any]:
        """Metadata hints (timestamp, person, position...) read from the media."""

    def probe_duration(self, descriptor: ClipDescriptor, completion: DurationProbe) -> None:
        """Start measuring the media duration and resolve ``completion`` when known."""


class NullMediaProbe:
    def extract_metadata(self, descriptor: ClipDescriptor) -> dict[str, Any]:
        return {}

    def probe_duration(self, descriptor: ClipDescriptor, completion: DurationProbe) -> None:
        completion.resolve(None)


@dataclass(slots=True)
class LoadReport:
    tracks: list[Track] = field(default_factory=list)
    clips: list[Clip] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    rejected: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)


def load_document(
    session: TimelineSession,
    document: TimelineDocument,
    track_source: TrackSource,
    media_probe: MediaProbe | None = None,
) -> LoadReport:
    """Register every track, then every clip, then fit the clock to the result."""
    report = LoadReport()
    probe = media_probe or NullMediaProbe()

    session.timezone_offset = parse_timezone(document.timezone)
    session.trailing_sec = parse_duration(document.trailing)

    # Clips may be positioned from track geometry, so all tracks come first.
    for filename in document.tracks:
        track = load_track(session, filename, track_source, report)
        report.tracks.append(track)

    for descriptor in document.clips:
        clip = load_clip(session, descriptor, probe, report)
        if clip is not None:
            report.clips.append(clip)

    session.loaded()
    return report


def load_track(session: TimelineSession, filename: str, source: TrackSource, report: LoadReport) -> Track:
    try:
        data = source.read_track(filename)
    except FileNotFoundError:
        report.warn(f"Track log file not found: {filename}")
        data = TrackData()
    except Exception as exc:
        report.warn(f"Failure to parse track log file {filename}: {exc}")
        data = TrackData()

    track = Track(name=filename, fixes=list(data.fixes), pilot=data.pilot or "")
    session.registry.ensure(track.pilot)
    if track.is_empty:
        return track
    if not session.add(track, track.pilot):
        report.rejected.append(filename)
    return track


def load_clip(
    session: TimelineSession,
    descriptor: ClipDescriptor,
    media_probe: MediaProbe,
    report: LoadReport,
) -> Clip | None:
    settings = session.settings
    hints = media_probe.extract_metadata(descriptor)
    metadata: dict[str, Any] = {**hints, **descriptor.metadata()}
    filename = descriptor.filename

    start = parse_timestamp(metadata.get("timestamp"))
    if start is None:
        report.warn(f"Clip {filename} has no usable timestamp")
        return None
    metadata["timestamp"] = start.to_iso8601()

    owner_key = str(metadata.get("person") or "")
    owner = session.registry.ensure(owner_key)

    mime_type = guess_mime_type(filename, metadata.get("type"))
    media = ClipMedia.IMAGE if mime_type.startswith("image/") else ClipMedia.VIDEO

    rate = 1.0
    raw_rate = metadata.get("rate")
    if raw_rate is not None:
        if isinstance(raw_rate, (int, float)) and not isinstance(raw_rate, bool) and raw_rate > 0:
            rate = float(raw_rate)
        else:
            report.warn(f"Invalid rate for clip {filename}: {raw_rate}")

    position: Position | None = None
    if any(metadata.get(key) for key in ("longitude", "latitude", "altitude")):
        candidate = Position(
            latitude=metadata.get("latitude") or 0.0,
            longitude=metadata.get("longitude") or 0.0,
            altitude=metadata.get("altitude") or 0.0,
        )
        try:
            candidate.validate()
        except (TypeError, ValueError) as exc:
            report.warn(f"Invalid latitude/longitude/altitude position for clip {filename}: {exc}")
        else:
            position = candidate
    if position is None:
        track = owner.track_at(start)
        if track is not None:
            position = track.position_at(start)

    duration = parse_duration(metadata.get("duration"))
    if not duration and media is ClipMedia.VIDEO:
        completion = DurationProbe(settings.probe_timeout_sec, label=filename).start()
        media_probe.probe_duration(descriptor, completion)
        outcome = completion.result()
        duration = outcome.duration
        if duration:
            metadata["duration"] = duration
    if not duration:
        duration = settings.default_clip_duration_sec

    clip = Clip(
        name=filename,
        start=start,
        duration=duration,
        media=media,
        rate=rate,
        position=position,
        descriptor=metadata,
    )
    if not session.add(clip, owner_key):
        report.rejected.append(filename)
    return clip


def save_document(session: TimelineSession) -> TimelineDocument:
    """Tracks and clips grouped by owner, in registration order."""
    tracks: list[str] = []
    clips: list[ClipDescriptor] = []
    for owner in session.registry.owners():
        for track in owner.tracks.payloads():
            tracks.append(track.save())
        for clip in owner.clips.payloads():
            data = clip.save()
            if not owner.is_unassigned:
                data["person"] = owner.key
            clips.append(ClipDescriptor.model_validate(data))
    return TimelineDocument(
        tracks=tracks,
        clips=clips,
        timezone=session.timezone_offset,
        trailing=session.trailing_sec,
    )
