import struct

import pytest

from yaffe.gamepad import (
    BUTTON_A,
    BUTTON_START,
    JS_EVENT_AXIS,
    JS_EVENT_BUTTON,
    JS_EVENT_INIT,
    LEFT_THUMB_DEADZONE,
    GamepadState,
    GamepadTracker,
    JsEvent,
    LinuxJoystick,
    apply_js_event,
    parse_js_events,
)
from yaffe.input import ControllerInput


def _pack(*events):
    return b"".join(struct.pack("=IhBB", *e) for e in events)


def test_parse_round_trip():
    data = _pack((10, 1, JS_EVENT_BUTTON, 0), (20, -300, JS_EVENT_AXIS, 1))
    assert parse_js_events(data) == [
        JsEvent(10, 1, JS_EVENT_BUTTON, 0),
        JsEvent(20, -300, JS_EVENT_AXIS, 1),
    ]


def test_parse_ignores_partial_event():
    data = _pack((1, 1, JS_EVENT_BUTTON, 0)) + b"\x01\x02\x03"
    assert len(parse_js_events(data)) == 1


def test_button_press_and_release():
    pressed = apply_js_event(GamepadState(), JsEvent(0, 1, JS_EVENT_BUTTON, 0))
    assert pressed.buttons == BUTTON_A
    released = apply_js_event(pressed, JsEvent(0, 0, JS_EVENT_BUTTON, 0))
    assert released.buttons == 0


def test_start_button_with_init_flag():
    state = apply_js_event(GamepadState(), JsEvent(0, 1, JS_EVENT_BUTTON | JS_EVENT_INIT, 7))
    assert state.buttons == BUTTON_START


def test_axes():
    state = apply_js_event(GamepadState(), JsEvent(0, 500, JS_EVENT_AXIS, 0))
    assert state.thumb_lx == 500
    state = apply_js_event(state, JsEvent(0, 500, JS_EVENT_AXIS, 1))
    assert state.thumb_ly == -500
    assert apply_js_event(state, JsEvent(0, 900, JS_EVENT_AXIS, 2)) == state


@pytest.mark.parametrize(
    "event",
    [
        JsEvent(0, 1, JS_EVENT_AXIS, 9),
        JsEvent(0, 1, JS_EVENT_BUTTON, 20),
        JsEvent(0, 1, 0x04, 0),
    ],
)
def test_unknown_events_raise(event):
    with pytest.raises(ValueError):
        apply_js_event(GamepadState(), event)


def test_tracker_reports_new_press_once():
    tracker = GamepadTracker(now=0.0)
    tracker.push_state(GamepadState(buttons=BUTTON_A))
    assert tracker.pressed_inputs(1.0) == [ControllerInput.BUTTON_SOUTH]
    tracker.push_state(GamepadState(buttons=BUTTON_A))
    assert tracker.pressed_inputs(2.0) == []


def test_tracker_respects_repeat_delay():
    tracker = GamepadTracker(now=0.0)
    tracker.push_state(GamepadState(buttons=BUTTON_A))
    assert tracker.pressed_inputs(0.05) == []


def test_tracker_button_order():
    tracker = GamepadTracker(now=0.0)
    tracker.push_state(GamepadState(buttons=BUTTON_A | BUTTON_START))
    assert tracker.pressed_inputs(1.0) == [ControllerInput.BUTTON_START, ControllerInput.BUTTON_SOUTH]


def test_tracker_stick_directions():
    tracker = GamepadTracker(now=0.0)
    tracker.push_state(GamepadState(thumb_lx=-20000))
    assert tracker.pressed_inputs(1.0) == [ControllerInput.DIRECTION_LEFT]
    assert tracker.pressed_inputs(1.05) == []
    tracker.push_state(GamepadState(thumb_ly=20000))
    assert tracker.pressed_inputs(2.0) == [ControllerInput.DIRECTION_UP]


def test_tracker_stick_dead_zone():
    tracker = GamepadTracker(now=0.0)
    tracker.push_state(GamepadState(thumb_lx=LEFT_THUMB_DEADZONE))
    assert tracker.pressed_inputs(1.0) == []


def test_linux_joystick_reads_device(tmp_path):
    (tmp_path / "js0").write_bytes(_pack((0, 1, JS_EVENT_BUTTON, 0), (0, 20000, JS_EVENT_AXIS, 0)))
    clock = iter([0.0, 1.0])
    with LinuxJoystick(tmp_path, clock=lambda: next(clock)) as pad:
        pad.update(0)
        assert pad.get_gamepad() == [ControllerInput.BUTTON_SOUTH, ControllerInput.DIRECTION_RIGHT]
        assert pad.tracker.current.buttons == BUTTON_A


def test_linux_joystick_without_device(tmp_path):
    clock = iter([0.0, 1.0])
    pad = LinuxJoystick(tmp_path, clock=lambda: next(clock))
    pad.update(0)
    assert pad.get_gamepad() == []
    assert pad.tracker.current == GamepadState()