"""HTTP endpoints for driving a timeline session."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from flight_timeline.api.schemas import (
    CursorRequest,
    JumpRequest,
    JumpResponse,
    KeymapPayload,
    KeyRequest,
    OwnerResponse,
    SelectOwnerRequest,
    TimelineStateResponse,
)
from flight_timeline.logs import configure_logging
from flight_timeline.pilots.registry import Owner
from flight_timeline.playback.driver import PlaybackDriver
from flight_timeline.playback.keymap import DEFAULT_KEYMAP, KeyAction, deserialize_keymap, dispatch, serialize_keymap
from flight_timeline.project.loader import save_document
from flight_timeline.session import TimelineSession
from flight_timeline.timeline.instant import TimeInstant, format_local
from flight_timeline.timeline.navigator import JumpOptions


def _iso(instant: TimeInstant | None) -> str | None:
    return instant.to_iso8601() if instant is not None else None


def create_app(
    session: TimelineSession | None = None,
    driver: PlaybackDriver | None = None,
) -> FastAPI:
    app = FastAPI(title="flight-timeline API", version="0.1.0")
    timeline = session or (driver.session if driver is not None else TimelineSession())
    playback = driver or PlaybackDriver(timeline)
    keymap: dict[str, KeyAction] = dict(DEFAULT_KEYMAP)
    configure_logging(timeline.settings.log_level)

    def state() -> TimelineStateResponse:
        clock = timeline.clock
        local_cursor = None
        if clock.current is not None and timeline.timezone_offset is not None:
            local_cursor = format_local(clock.current, timeline.timezone_offset)
        return TimelineStateResponse(
            cursor=_iso(clock.current),
            start=_iso(clock.start),
            stop=_iso(clock.stop),
            local_cursor=local_cursor,
            multiplier=clock.multiplier,
            animating=clock.should_animate,
            selected_owner=timeline.selected.key,
            active_track=playback.active_track.name if playback.active_track is not None else None,
            active_clip=playback.active_clip.name if playback.active_clip is not None else None,
        )

    def owner_response(owner: Owner) -> OwnerResponse:
        return OwnerResponse(
            key=owner.key,
            display_name=owner.display_name,
            color=owner.color,
            tracks=len(owner.tracks),
            clips=len(owner.clips),
            selected=owner is timeline.selected,
        )

    @app.get("/")
    def root() -> dict[str, str]:
        return {
            "service": "flight-timeline API",
            "status": "ok",
            "docs": "/docs",
        }

    @app.get("/favicon.ico", include_in_schema=False)
    def favicon() -> Response:
        return Response(status_code=204)

    @app.get("/v1/timeline", response_model=TimelineStateResponse)
    def get_timeline() -> TimelineStateResponse:
        return state()

    @app.put("/v1/timeline/cursor", response_model=TimelineStateResponse)
    def set_cursor(payload: CursorRequest) -> TimelineStateResponse:
        try:
            instant = TimeInstant.from_iso8601(payload.cursor)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        if not timeline.clock.has_bounds:
            raise HTTPException(status_code=400, detail="timeline is empty")
        timeline.clock.set_current(instant)
        playback.tick()
        return state()

    @app.post("/v1/timeline/jump", response_model=JumpResponse)
    def jump(payload: JumpRequest) -> JumpResponse:
        options = JumpOptions(
            reverse=payload.reverse,
            edge=payload.edge,
            small=payload.small,
            collapse=payload.collapse,
        )
        result = playback.jump(options)
        if result is None:
            raise HTTPException(status_code=400, detail="timeline is empty")
        playback.tick()
        return JumpResponse(
            origin=result.origin.to_iso8601(),
            target=result.target.to_iso8601(),
            reason=result.reason,
            clamped=result.clamped,
        )

    @app.post("/v1/timeline/tick", response_model=TimelineStateResponse)
    def tick() -> TimelineStateResponse:
        playback.tick()
        return state()

    @app.post("/v1/timeline/key", response_model=TimelineStateResponse)
    def press_key(payload: KeyRequest) -> TimelineStateResponse:
        if not dispatch(playback, payload.key, ctrl=payload.ctrl, shift=payload.shift, keymap=keymap):
            raise HTTPException(status_code=400, detail=f"key '{payload.key}' is not bound")
        return state()

    @app.get("/v1/keymap", response_model=KeymapPayload)
    def get_keymap() -> KeymapPayload:
        return KeymapPayload(bindings=serialize_keymap(keymap))

    @app.put("/v1/keymap", response_model=KeymapPayload)
    def set_keymap(payload: KeymapPayload) -> KeymapPayload:
        try:
            bindings = deserialize_keymap(payload.bindings)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        keymap.clear()
        keymap.update(bindings)
        return KeymapPayload(bindings=serialize_keymap(keymap))

    @app.get("/v1/owners", response_model=list[OwnerResponse])
    def list_owners() -> list[OwnerResponse]:
        return [owner_response(owner) for owner in timeline.registry.owners()]

    @app.put("/v1/owners/selected", response_model=OwnerResponse)
    def select_owner(payload: SelectOwnerRequest) -> OwnerResponse:
        try:
            owner = timeline.registry.get(payload.key)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        playback.change_owner(owner)
        playback.tick()
        return owner_response(owner)

    @app.post("/v1/owners/next", response_model=OwnerResponse)
    def next_owner() -> OwnerResponse:
        owner = playback.next_owner()
        playback.tick()
        return owner_response(owner)

    @app.post("/v1/owners/previous", response_model=OwnerResponse)
    def previous_owner() -> OwnerResponse:
        owner = playback.previous_owner()
        playback.tick()
        return owner_response(owner)

    @app.get("/v1/project")
    def get_project() -> dict[str, Any]:
        return save_document(timeline).model_dump(exclude_none=True)

    return app


app = create_app()
