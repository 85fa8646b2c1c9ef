import pytest

from nouframe import devices
from nouframe.devices import ButtonState, InputNotInitializedError, InputState


def test_key_lifecycle():
    state = InputState()
    state.set_key(65, True)
    assert state.key_state(65) is ButtonState.PRESSED
    assert state.key_pressed(65) and state.key_down(65)
    state.poll()
    assert state.key_state(65) is ButtonState.DOWN
    assert state.key_down(65) and not state.key_pressed(65)
    state.set_key(65, False)
    assert state.key_released(65) and not state.key_down(65)
    state.poll()
    assert state.key_state(65) is ButtonState.UP


def test_mouse_lifecycle():
    state = InputState()
    state.set_mouse_button(0, True)
    assert state.mouse_pressed(0)
    state.poll()
    assert state.mouse_state(0) is ButtonState.DOWN
    state.set_mouse_button(0, False)
    assert state.mouse_released(0)
    assert not state.mouse_down(0)


def test_scroll_accumulates_and_delta_resets():
    state = InputState()
    state.handle_scroll(1.0, 2.0)
    state.handle_scroll(0.5, -1.0)
    assert state.mouse_scroll_delta == (1.5, 1.0)
    state.poll()
    assert state.mouse_scroll_delta == (0.0, 0.0)
    assert state.mouse_scroll == (1.5, 1.0)


def test_mouse_pos():
    state = InputState()
    state.set_mouse_pos(10, 20)
    assert state.mouse_pos == (10.0, 20.0)


def test_shared_instance_lifecycle():
    created = devices.init()
    assert devices.instance() is created
    devices.uninitialize()
    with pytest.raises(InputNotInitializedError):
        devices.instance()
    with pytest.raises(InputNotInitializedError):
        devices.uninitialize()