import pytest
from scenario import at

from flight_timeline.pilots.models import Clip, Fix, Track
from flight_timeline.pilots.registry import PALETTE, UNASSIGNED, OwnerRegistry


def _track(name: str, start: str, stop: str) -> Track:
    return Track(
        name=name,
        fixes=[
            Fix(time=at(start), latitude=45.0, longitude=6.0, altitude=1200.0),
            Fix(time=at(stop), latitude=45.1, longitude=6.1, altitude=1800.0),
        ],
    )


def test_unassigned_owner_is_created_first() -> None:
    registry = OwnerRegistry()

    assert registry.owners()[0] is registry.unassigned
    assert registry.unassigned.key == UNASSIGNED
    assert registry.unassigned.display_name == "Any pilot"


def test_ensure_is_idempotent_and_assigns_palette_colors() -> None:
    registry = OwnerRegistry()
    alice = registry.ensure("alice")
    bob = registry.ensure("bob")

    assert registry.ensure("alice") is alice
    assert alice.color == PALETTE[1]
    assert bob.color == PALETTE[2]
    assert [owner.key for owner in registry.owners()] == ["", "alice", "bob"]


def test_palette_wraps_around() -> None:
    registry = OwnerRegistry()
    owners = [registry.ensure(f"pilot-{n}") for n in range(len(PALETTE))]

    assert owners[-1].color == PALETTE[0]


def test_ensure_rejects_non_string_keys() -> None:
    with pytest.raises(TypeError):
        OwnerRegistry().ensure(42)  # type: ignore[arg-type]


def test_get_unknown_owner_raises_key_error() -> None:
    with pytest.raises(KeyError):
        OwnerRegistry().get("nobody")


def test_owner_cycling_wraps() -> None:
    registry = OwnerRegistry()
    alice = registry.ensure("alice")
    bob = registry.ensure("bob")

    assert registry.next_owner(registry.unassigned) is alice
    assert registry.next_owner(bob) is registry.unassigned
    assert registry.previous_owner(registry.unassigned) is bob
    assert registry.previous_owner(alice) is registry.unassigned


def test_add_registers_with_owner_and_global_index() -> None:
    registry = OwnerRegistry()
    alice = registry.ensure("alice")
    track = _track("alice.igc", "2024-10-03T10:00:00Z", "2024-10-03T11:00:00Z")

    assert registry.add(alice, track)
    assert track.owner == "alice"
    assert registry.owner_of(track) is alice
    assert alice.tracks.payloads() == [track]
    assert registry.global_index.payloads() == [track]


def test_conflict_leaves_entity_unattached() -> None:
    registry = OwnerRegistry()
    alice = registry.ensure("alice")
    first = Clip(name="a.mp4", start=at("2024-10-03T10:00:00Z"), duration=30)
    second = Clip(name="b.mp4", start=at("2024-10-03T10:00:10Z"), duration=30)

    assert registry.add(alice, first)
    assert not registry.add(alice, second)
    assert second.owner is None
    assert alice.clips.payloads() == [first]
    assert registry.global_index.payloads() == [first]


def test_same_interval_for_other_owner_is_accepted() -> None:
    registry = OwnerRegistry()
    clip = Clip(name="a.mp4", start=at("2024-10-03T10:00:00Z"), duration=30)
    other = Clip(name="b.mp4", start=at("2024-10-03T10:00:00Z"), duration=30)

    assert registry.add(registry.ensure("alice"), clip)
    assert registry.add(registry.ensure("bob"), other)
    assert registry.get("alice").clips.payloads() == [clip]
    assert registry.global_index.payloads() == [other]


def test_reregistration_replaces_the_stale_interval() -> None:
    registry = OwnerRegistry()
    alice = registry.ensure("alice")
    clip = Clip(name="a.mp4", start=at("2024-10-03T10:00:00Z"), duration=30)
    registry.add(alice, clip)

    clip.update(start=at("2024-10-03T10:00:20Z"))
    assert registry.add(alice, clip)

    assert len(alice.clips) == 1
    assert alice.clips.get(0).start == at("2024-10-03T10:00:20Z")
    assert registry.global_index.payloads() == [clip]


def test_failed_reregistration_restores_the_previous_interval() -> None:
    registry = OwnerRegistry()
    alice = registry.ensure("alice")
    blocker = Clip(name="blocker.mp4", start=at("2024-10-03T10:05:00Z"), duration=30)
    clip = Clip(name="a.mp4", start=at("2024-10-03T10:00:00Z"), duration=30)
    registry.add(alice, blocker)
    registry.add(alice, clip)
    previous = clip.interval

    clip.update(start=at("2024-10-03T10:05:10Z"))
    assert not registry.add(alice, clip)

    assert alice.clips.find_by_payload(clip) is previous


def test_rebuild_global_lays_clips_over_tracks() -> None:
    registry = OwnerRegistry()
    alice = registry.ensure("alice")
    clip = Clip(name="a.mp4", start=at("2024-10-03T10:00:00Z"), duration=30)
    track = _track("alice.igc", "2024-10-03T10:00:00Z", "2024-10-03T11:00:00Z")
    registry.add(registry.unassigned, clip)
    registry.add(alice, track)

    registry.rebuild_global()

    assert registry.global_index.payloads() == [clip, track]
    assert registry.global_index.get(1).start == at("2024-10-03T10:00:30Z")
    assert registry.bounds() == (at("2024-10-03T10:00:00Z"), at("2024-10-03T11:00:00Z"))


def test_remove_detaches_the_payload() -> None:
    registry = OwnerRegistry()
    alice = registry.ensure("alice")
    clip = Clip(name="a.mp4", start=at("2024-10-03T10:00:00Z"), duration=30)
    registry.add(alice, clip)

    registry.remove(alice, clip)

    assert clip.owner is None
    assert len(alice.clips) == 0


def test_track_position_is_interpolated_between_fixes() -> None:
    track = _track("alice.igc", "2024-10-03T10:00:00Z", "2024-10-03T10:10:00Z")

    position = track.position_at(at("2024-10-03T10:05:00Z"))

    assert position is not None
    assert position.latitude == pytest.approx(45.05)
    assert position.altitude == pytest.approx(1500.0)
    assert track.position_at(at("2024-10-03T11:00:00Z")) is None


def test_clip_interval_is_scaled_by_rate() -> None:
    clip = Clip(name="slow.mp4", start=at("2024-10-03T10:00:00Z"), duration=10, rate=2.0)

    assert clip.stop == at("2024-10-03T10:00:20Z")
    assert clip.media_offset(at("2024-10-03T10:00:10Z")) == pytest.approx(5.0)
    with pytest.raises(ValueError):
        Clip(name="bad.mp4", start=at("2024-10-03T10:00:00Z"), duration=10, rate=0)


def test_track_sorts_a_copy_of_the_fixes() -> None:
    late = Fix(time=at("2024-10-03T10:10:00Z"), latitude=45.1, longitude=6.1, altitude=1500.0)
    early = Fix(time=at("2024-10-03T10:00:00Z"), latitude=45.0, longitude=6.0, altitude=1200.0)
    fixes = [late, early]

    track = Track(name="unordered.igc", fixes=fixes)

    assert fixes == [late, early]
    assert track.fixes == [early, late]
    assert track.interval.start == early.time
