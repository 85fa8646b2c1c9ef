"""Keyboard, mouse button and mouse wheel state with per-frame history."""

from __future__ import annotations

from enum import IntEnum
from typing import Optional


class ButtonState(IntEnum):
    """Bit 0: down now; bit 1: down at the last poll."""

    UP = 0
    PRESSED = 1
    RELEASED = 2
    DOWN = 3


class InputNotInitializedError(RuntimeError):
    """Raised when the shared input state is used before ``init``."""


class InputState:
    """Current and previous-frame state of keys, mouse buttons and the wheel."""

    def __init__(self) -> None:
        self._keys: set[int] = set()
        self._prev_keys: set[int] = set()
        self._mouse: set[int] = set()
        self._prev_mouse: set[int] = set()
        self._mouse_pos = (0.0, 0.0)
        self._scroll = (0.0, 0.0)
        self._scroll_delta = (0.0, 0.0)

    def set_key(self, key: int, down: bool) -> None:
        """Record whether ``key`` is currently down."""
        if down:
            self._keys.add(key)
        else:
            self._keys.discard(key)

    def set_mouse_button(self, button: int, down: bool) -> None:
        """Record whether mouse ``button`` is currently down."""
        if down:
            self._mouse.add(button)
        else:
            self._mouse.discard(button)

    def set_mouse_pos(self, x: float, y: float) -> None:
        self._mouse_pos = (float(x), float(y))

    def handle_scroll(self, dx: float, dy: float) -> None:
        """Accumulate a scroll wheel event."""
        self._scroll = (self._scroll[0] + dx, self._scroll[1] + dy)
        self._scroll_delta = (self._scroll_delta[0] + dx, self._scroll_delta[1] + dy)

    def poll(self) -> None:
        """Remember the current state as the previous frame's and reset the wheel delta."""
        self._prev_keys = set(self._keys)
        self._prev_mouse = set(self._mouse)
        self._scroll_delta = (0.0, 0.0)

    @staticmethod
    def _state(now: bool, before: bool) -> ButtonState:
        return ButtonState(int(now) | (int(before) << 1))

    def key_state(self, key: int) -> ButtonState:
        return self._state(key in self._keys, key in self._prev_keys)

    def key_down(self, key: int) -> bool:
        """Whether the key is held now."""
        return bool(self.key_state(key) & ButtonState.PRESSED)

    def key_pressed(self, key: int) -> bool:
        """Whether the key went down since the last poll."""
        return self.key_state(key) is ButtonState.PRESSED

    def key_released(self, key: int) -> bool:
        """Whether the key went up since the last poll."""
        return self.key_state(key) is ButtonState.RELEASED

    def mouse_state(self, button: int) -> ButtonState:
        return self._state(button in self._mouse, button in self._prev_mouse)

    def mouse_down(self, button: int) -> bool:
        return bool(self.mouse_state(button) & ButtonState.PRESSED)

    def mouse_pressed(self, button: int) -> bool:
        return self.mouse_state(button) is ButtonState.PRESSED

    def mouse_released(self, button: int) -> bool:
        return self.mouse_state(button) is ButtonState.RELEASED

    @property
    def mouse_pos(self) -> tuple[float, float]:
        return self._mouse_pos

    @property
    def mouse_scroll(self) -> tuple[float, float]:
        """Total wheel movement since creation."""
        return self._scroll

    @property
    def mouse_scroll_delta(self) -> tuple[float, float]:
        """Wheel movement since the last poll."""
        return self._scroll_delta


_instance: Optional[InputState] = None


def init() -> InputState:
    """Create the shared input state, replacing any previous one."""
    global _instance
    _instance = InputState()
    return _instance


def instance() -> InputState:
    """The shared input state."""
    if _instance is None:
        raise InputNotInitializedError("Input has not been initialized!")
    return _instance


def uninitialize() -> None:
    """Drop the shared input state."""
    global _instance
    if _instance is None:
        raise InputNotInitializedError("Input has not been initialized!")
    _instance = None