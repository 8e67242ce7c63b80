"""Keyboard bindings for timeline navigation."""

from __future__ import annotations

import logging
from enum import Enum

from flight_timeline.playback.driver import PlaybackDriver
from flight_timeline.timeline.navigator import JumpOptions

logger = logging.getLogger(__name__)


class KeyAction(str, Enum):
    GO_TO_START = "go_to_start"
    GO_TO_END = "go_to_end"
    PREVIOUS_OWNER = "previous_owner"
    NEXT_OWNER = "next_owner"
    JUMP_BACKWARD = "jump_backward"
    JUMP_FORWARD = "jump_forward"
    TOGGLE_PLAY = "toggle_play"
    DELETE = "delete"


DEFAULT_KEYMAP: dict[str, KeyAction] = {
    "home": KeyAction.GO_TO_START,
    "end": KeyAction.GO_TO_END,
    "pageup": KeyAction.PREVIOUS_OWNER,
    "pagedown": KeyAction.NEXT_OWNER,
    "left": KeyAction.JUMP_BACKWARD,
    "right": KeyAction.JUMP_FORWARD,
    "space": KeyAction.TOGGLE_PLAY,
    "delete": KeyAction.DELETE,
}


def normalize_key(name: str) -> str:
    return name.strip().lower().replace("_", "").replace(" ", "")


def serialize_keymap(keymap: dict[str, KeyAction]) -> dict[str, str]:
    return {key: action.value for key, action in keymap.items()}


def deserialize_keymap(data: dict[str, str]) -> dict[str, KeyAction]:
    keymap: dict[str, KeyAction] = {}
    for key, action in data.items():
        keymap[normalize_key(str(key))] = KeyAction(action)
    return keymap


def dispatch(
    driver: PlaybackDriver,
    key: str,
    ctrl: bool = False,
    shift: bool = False,
    keymap: dict[str, KeyAction] | None = None,
) -> bool:
    """Run the action bound to ``key`` followed by one tick; False when unbound.

    Ctrl turns an arrow jump into an edge jump, Shift into a small one.
    """
    action = (DEFAULT_KEYMAP if keymap is None else keymap).get(normalize_key(key))
    if action is None:
        return False

    session = driver.session
    clock = session.clock
    if action is KeyAction.GO_TO_START:
        if clock.start is not None:
            clock.current = clock.start
    elif action is KeyAction.GO_TO_END:
        if clock.stop is not None:
            clock.current = clock.stop
    elif action is KeyAction.PREVIOUS_OWNER:
        driver.previous_owner()
    elif action is KeyAction.NEXT_OWNER:
        driver.next_owner()
    elif action in (KeyAction.JUMP_BACKWARD, KeyAction.JUMP_FORWARD):
        if len(session.registry.global_index):
            driver.jump(
                JumpOptions(
                    reverse=action is KeyAction.JUMP_BACKWARD,
                    edge=ctrl,
                    small=shift,
                    collapse=ctrl and session.settings.collapse,
                )
            )
    elif action is KeyAction.TOGGLE_PLAY:
        clock.toggle_animation()
    elif action is KeyAction.DELETE:
        deleted = driver.delete_active()
        if deleted is None:
            logger.info("Nothing active to delete")

    driver.tick()
    return True
