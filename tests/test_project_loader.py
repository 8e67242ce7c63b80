import logging

import pytest
from scenario import at

from flight_timeline.pilots.models import ClipMedia, Fix
from flight_timeline.project.loader import TrackData, load_document, save_document
from flight_timeline.project.migration import migrate_to_v2
from flight_timeline.project.probe import DurationProbe
from flight_timeline.project.schema import ClipDescriptor, TimelineDocument
from flight_timeline.session import TimelineSession
from flight_timeline.settings import TimelineSettings


class FakeTrackSource:
    def __init__(self, tracks: dict[str, TrackData]) -> None:
        self._tracks = tracks

    def read_track(self, filename: str) -> TrackData:
        if filename == "corrupt.igc":
            raise ValueError("bad B record")
        if filename not in self._tracks:
            raise FileNotFoundError(filename)
        return self._tracks[filename]


class FakeMediaProbe:
    def __init__(self, durations: dict[str, float | None] | None = None) -> None:
        self._durations = durations or {}
        self.probed: list[str] = []

    def extract_metadata(self, descriptor: ClipDescriptor) -> dict:
        if descriptor.filename == "gopro.mp4":
            return {"timestamp": "2024-10-03T10:20:00Z", "person": "alice"}
        return {}

    def probe_duration(self, descriptor: ClipDescriptor, completion: DurationProbe) -> None:
        self.probed.append(descriptor.filename)
        if descriptor.filename in self._durations:
            completion.resolve(self._durations[descriptor.filename])


def _alice_track() -> TrackData:
    return TrackData(
        pilot="alice",
        fixes=[
            Fix(time=at("2024-10-03T10:00:00Z"), latitude=45.0, longitude=6.0, altitude=1000.0),
            Fix(time=at("2024-10-03T11:00:00Z"), latitude=46.0, longitude=7.0, altitude=2000.0),
        ],
    )


def _session() -> TimelineSession:
    return TimelineSession(TimelineSettings(probe_timeout_sec=0.05))


def test_tracks_load_before_clips_and_position_clips() -> None:
    session = _session()
    document = TimelineDocument(
        tracks=["alice.igc"],
        clips=[ClipDescriptor(filename="photo.jpg", person="alice", timestamp="2024-10-03T10:30:00Z")],
    )

    report = load_document(session, document, FakeTrackSource({"alice.igc": _alice_track()}))

    clip = report.clips[0]
    assert clip.media is ClipMedia.IMAGE
    assert clip.duration == 5.0
    assert clip.owner == "alice"
    assert clip.position is not None
    assert clip.position.latitude == pytest.approx(45.5)
    assert session.clock.start == at("2024-10-03T10:00:00Z")
    assert session.clock.current == session.clock.start


def test_failing_track_source_yields_warning_and_empty_track() -> None:
    session = _session()
    document = TimelineDocument(tracks=["corrupt.igc", "missing.igc"])

    report = load_document(session, document, FakeTrackSource({}))

    assert [track.is_empty for track in report.tracks] == [True, True]
    assert len(report.warnings) == 2
    assert "bad B record" in report.warnings[0]
    assert len(session.registry.global_index) == 0


def test_metadata_hints_are_overridden_by_descriptor() -> None:
    session = _session()
    document = TimelineDocument(
        clips=[ClipDescriptor(filename="gopro.mp4", person="bob", duration=12)],
    )

    report = load_document(session, document, FakeTrackSource({}), FakeMediaProbe())

    clip = report.clips[0]
    assert clip.start == at("2024-10-03T10:20:00Z")
    assert clip.owner == "bob"
    assert clip.duration == 12.0


def test_video_duration_comes_from_probe_or_default() -> None:
    session = _session()
    probe = FakeMediaProbe({"known.mp4": 42.0})
    document = TimelineDocument(
        clips=[
            ClipDescriptor(filename="known.mp4", timestamp="2024-10-03T10:00:00Z"),
            ClipDescriptor(filename="silent.mp4", timestamp="2024-10-03T11:00:00Z"),
        ],
    )

    report = load_document(session, document, FakeTrackSource({}), probe)

    assert [clip.duration for clip in report.clips] == [42.0, 5.0]
    assert probe.probed == ["known.mp4", "silent.mp4"]
    assert report.clips[0].descriptor["duration"] == 42.0


def test_invalid_clip_fields_warn(caplog: pytest.LogCaptureFixture) -> None:
    session = _session()
    document = TimelineDocument(
        clips=[
            ClipDescriptor(filename="nowhen.mp4"),
            ClipDescriptor(filename="far.jpg", timestamp="2024-10-03T10:00:00Z", latitude=120.0, rate=-1),
        ],
    )

    with caplog.at_level(logging.WARNING):
        report = load_document(session, document, FakeTrackSource({}))

    assert [clip.name for clip in report.clips] == ["far.jpg"]
    assert report.clips[0].position is None
    assert report.clips[0].rate == 1.0
    assert len(report.warnings) == 3
    assert "no usable timestamp" in caplog.text


def test_conflicting_clips_are_rejected() -> None:
    session = _session()
    document = TimelineDocument(
        clips=[
            ClipDescriptor(filename="a.jpg", timestamp="2024-10-03T10:00:00Z"),
            ClipDescriptor(filename="b.jpg", timestamp="2024-10-03T10:00:02Z"),
        ],
    )

    report = load_document(session, document, FakeTrackSource({}))

    assert report.rejected == ["b.jpg"]
    assert session.registry.unassigned.clips.payloads() == [report.clips[0]]


def test_save_keeps_owner_grouping_order() -> None:
    session = _session()
    document = TimelineDocument(
        tracks=["alice.igc"],
        clips=[
            ClipDescriptor(filename="alice.jpg", person="alice", timestamp="2024-10-03T10:30:00Z"),
            ClipDescriptor(filename="any.jpg", timestamp="2024-10-03T09:00:00Z"),
        ],
        timezone="+02:00",
    )
    load_document(session, document, FakeTrackSource({"alice.igc": _alice_track()}))

    saved = save_document(session)

    assert saved.tracks == ["alice.igc"]
    assert [clip.filename for clip in saved.clips] == ["any.jpg", "alice.jpg"]
    assert saved.clips[1].person == "alice"
    assert saved.timezone == 7200.0


def test_migrate_legacy_flights_and_videos() -> None:
    legacy = {
        "flights": ["alice.igc", 7],
        "videos": [{"filename": "a.mp4", "person": "alice"}, {"person": "nobody"}],
        "timezone": "Z",
    }

    migrated = migrate_to_v2(legacy)

    assert migrated.format_version == 2
    assert migrated.tracks == ["alice.igc"]
    assert [clip.filename for clip in migrated.clips] == ["a.mp4"]
    assert "flights" not in migrated.model_dump()


def test_migrate_rejects_unknown_versions() -> None:
    assert migrate_to_v2({"format_version": 2, "tracks": ["x.igc"]}).tracks == ["x.igc"]
    with pytest.raises(ValueError):
        migrate_to_v2({"format_version": 7})
