"""Gamepad state tracking and the Linux joystick device reader."""

from __future__ import annotations

import dataclasses
import os
import struct
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from .input import ControllerInput

BUTTON_START = 0x0010
BUTTON_BACK = 0x0020
BUTTON_GUIDE = 0x0400
BUTTON_A = 0x1000
BUTTON_B = 0x2000
BUTTON_X = 0x4000
BUTTON_Y = 0x8000
LEFT_THUMB_DEADZONE = 7849

REPEAT_DELAY_MS = 100

JS_EVENT_BUTTON = 0x01
JS_EVENT_AXIS = 0x02
JS_EVENT_INIT = 0x80

_JS_EVENT = struct.Struct("=IhBB")

_BUTTON_ORDER = (
    (BUTTON_START, ControllerInput.BUTTON_START),
    (BUTTON_BACK, ControllerInput.BUTTON_BACK),
    (BUTTON_GUIDE, ControllerInput.BUTTON_GUIDE),
    (BUTTON_A, ControllerInput.BUTTON_SOUTH),
    (BUTTON_B, ControllerInput.BUTTON_EAST),
    (BUTTON_X, ControllerInput.BUTTON_WEST),
    (BUTTON_Y, ControllerInput.BUTTON_NORTH),
)

# Joystick button numbers; shoulders and thumb clicks are not used.
_JS_BUTTONS = {
    0: BUTTON_A,
    1: BUTTON_B,
    2: BUTTON_X,
    3: BUTTON_Y,
    4: 0,
    5: 0,
    6: BUTTON_BACK,
    7: BUTTON_START,
    8: BUTTON_GUIDE,
    9: 0,
    10: 0,
}


def _negate_i16(value: int) -> int:
    return max(-32768, min(32767, -value))


@dataclass(frozen=True)
class GamepadState:
    """Pressed buttons as a bit set, and the thumb stick positions."""

    buttons: int = 0
    thumb_lx: int = 0
    thumb_ly: int = 0
    thumb_rx: int = 0
    thumb_ry: int = 0


@dataclass(frozen=True)
class JsEvent:
    """One event from a Linux joystick device."""

    time: int
    value: int
    event_type: int
    number: int


def parse_js_events(data: bytes) -> List[JsEvent]:
    """Decode whole joystick events from ``data``; a trailing partial event is ignored."""
    usable = len(data) - len(data) % _JS_EVENT.size
    return [JsEvent(*fields) for fields in _JS_EVENT.iter_unpack(data[:usable])]


def apply_js_event(state: GamepadState, event: JsEvent) -> GamepadState:
    """Return ``state`` updated by ``event``.

    Raises ``ValueError`` for an axis, button or event type that is not known.
    """
    kind = event.event_type & ~JS_EVENT_INIT & 0xFF
    if kind == JS_EVENT_AXIS:
        if event.number == 0:
            return dataclasses.replace(state, thumb_lx=event.value)
        if event.number == 1:
            return dataclasses.replace(state, thumb_ly=_negate_i16(event.value))
        if event.number == 3:
            return dataclasses.replace(state, thumb_rx=event.value)
        if event.number == 4:
            return dataclasses.replace(state, thumb_ry=_negate_i16(event.value))
        if event.number in (2, 5):  # triggers
            return state
        raise ValueError(f"Unknown joystick axis {event.number}")
    if kind == JS_EVENT_BUTTON:
        try:
            button = _JS_BUTTONS[event.number]
        except KeyError:
            raise ValueError(f"Unknown joystick button {event.number}") from None
        if event.value != 0:
            buttons = state.buttons | button
        else:
            buttons = state.buttons ^ button
        return dataclasses.replace(state, buttons=buttons)
    raise ValueError(f"Unknown joystick event {event.event_type:#x}")


def _elapsed_ms(now: float, since: float) -> int:
    return int((now - since) * 1000)


class GamepadTracker:
    """Turns successive gamepad states into newly pressed inputs.

    Buttons report on the state where they go down; the left stick reports
    a direction while pushed past the dead zone. Each repeats at most every
    100 ms. Times are in seconds.
    """

    def __init__(self, now: Optional[float] = None) -> None:
        start = time.monotonic() if now is None else now
        self.previous = GamepadState()
        self.current = GamepadState()
        self.last_button_time = start
        self.last_stick_time = start

    def push_state(self, state: GamepadState) -> None:
        self.previous = self.current
        self.current = state

    def _is_pressed(self, button: int) -> bool:
        return bool(self.current.buttons & button) and not self.previous.buttons & button

    def pressed_inputs(self, now: float) -> List[ControllerInput]:
        result: List[ControllerInput] = []

        if _elapsed_ms(now, self.last_button_time) > REPEAT_DELAY_MS:
            result.extend(inp for button, inp in _BUTTON_ORDER if self._is_pressed(button))
            if result:
                self.last_button_time = now

        x = self.current.thumb_lx
        y = self.current.thumb_ly
        if (
            x * x + y * y > LEFT_THUMB_DEADZONE * LEFT_THUMB_DEADZONE
            and _elapsed_ms(now, self.last_stick_time) > REPEAT_DELAY_MS
        ):
            count = len(result)
            if x < 0 and abs(x) > abs(y):
                result.append(ControllerInput.DIRECTION_LEFT)
            if y > 0 and abs(y) > abs(x):
                result.append(ControllerInput.DIRECTION_UP)
            if y < 0 and abs(y) > abs(x):
                result.append(ControllerInput.DIRECTION_DOWN)
            if x > 0 and abs(x) > abs(y):
                result.append(ControllerInput.DIRECTION_RIGHT)
            if len(result) > count:
                self.last_stick_time = now

        return result


class LinuxJoystick:
    """Reads a ``js<N>`` joystick device without blocking."""

    def __init__(
        self,
        device_dir: Union[str, os.PathLike] = "/dev/input",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._device_dir = Path(device_dir)
        self._clock = clock
        self._fd: Optional[int] = None
        self._pending = b""
        self.tracker = GamepadTracker(clock())

    def _open(self, path: Path) -> bool:
        if self._fd is None:
            try:
                self._fd = os.open(path, os.O_RDONLY | getattr(os, "O_NONBLOCK", 0))
            except OSError:
                return False
        return True

    def _read_available(self) -> bytes:
        chunks = [self._pending]
        while self._fd is not None:
            try:
                chunk = os.read(self._fd, 4096)
            except BlockingIOError:
                break
            except OSError:
                self.close()
                break
            if not chunk:
                break
            chunks.append(chunk)
        data = b"".join(chunks)
        usable = len(data) - len(data) % _JS_EVENT.size
        self._pending = data[usable:]
        return data[:usable]

    def update(self, controller_index: int) -> None:
        """Read every pending event from device ``js<controller_index>``."""
        state = self.tracker.current
        if self._open(self._device_dir / f"js{controller_index}"):
            for event in parse_js_events(self._read_available()):
                state = apply_js_event(state, event)
        self.tracker.push_state(state)

    def get_gamepad(self) -> List[ControllerInput]:
        return self.tracker.pressed_inputs(self._clock())

    def close(self) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None
        self._pending = b""

    def __enter__(self) -> "LinuxJoystick":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()