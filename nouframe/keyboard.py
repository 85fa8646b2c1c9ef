"""Per-frame keyboard state tracking."""

from __future__ import annotations

from enum import IntEnum


class KeyAction(IntEnum):
    """Key event actions as reported by the windowing layer."""

    RELEASE = 0
    PRESS = 1
    REPEAT = 2


class KeyFlag(IntEnum):
    """What happened to a key during the current frame."""

    PASSIVE = 0
    PRESSED = 1
    RELEASED = 2


class Keyboard:
    """Tracks which keys are held and which changed this frame."""

    KEY_LAST = 348
    MAX_KEYS = KEY_LAST + 1

    def __init__(self) -> None:
        self._states = [False] * self.MAX_KEYS
        self._flags = [KeyFlag.PASSIVE] * self.MAX_KEYS

    def _in_range(self, key: int) -> bool:
        return 0 <= key < self.MAX_KEYS

    def handle_key(self, key: int, action: int) -> None:
        """Record a key event; unknown keys and repeat events are ignored."""
        if not self._in_range(key):
            return
        if action == KeyAction.PRESS:
            self._flags[key] = KeyFlag.PRESSED
            self._states[key] = True
        elif action == KeyAction.RELEASE:
            self._flags[key] = KeyFlag.RELEASED
            self._states[key] = False

    def reset(self) -> None:
        """Forget all key states and flags."""
        self._states = [False] * self.MAX_KEYS
        self._flags = [KeyFlag.PASSIVE] * self.MAX_KEYS

    def frame_start(self) -> None:
        """Clear this frame's press/release flags; held keys stay held."""
        self._flags = [KeyFlag.PASSIVE] * self.MAX_KEYS

    def is_held(self, key: int) -> bool:
        return self._in_range(key) and self._states[key]

    def was_pressed(self, key: int) -> bool:
        return self._in_range(key) and self._flags[key] is KeyFlag.PRESSED

    def was_released(self, key: int) -> bool:
        return self._in_range(key) and self._flags[key] is KeyFlag.RELEASED