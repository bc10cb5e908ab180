"""Mapping keyboard keys and controller buttons to user actions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Dict, Generic, Hashable, Iterable, Optional, Set, TypeVar, Union

K = TypeVar("K", bound=Hashable)
B = TypeVar("B", bound=Hashable)
T = TypeVar("T")


class Action(Enum):
    INFO = auto()
    ACCEPT = auto()
    BACK = auto()
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    FILTER = auto()
    TOGGLE_OVERLAY = auto()
    SHOW_MENU = auto()


class ControllerInput(IntEnum):
    BUTTON_NORTH = 0
    BUTTON_SOUTH = 1
    BUTTON_EAST = 2
    BUTTON_WEST = 3
    BUTTON_START = 4
    BUTTON_BACK = 5
    BUTTON_GUIDE = 6
    DIRECTION_LEFT = 7
    DIRECTION_RIGHT = 8
    DIRECTION_UP = 9
    DIRECTION_DOWN = 10


class InputKind(Enum):
    CHAR = auto()
    KEY = auto()
    PASTE = auto()


@dataclass(frozen=True)
class KeyPress:
    """Raw input that has no mapped action: a character, a key or pasted text."""

    kind: InputKind
    value: str


UserAction = Union[Action, KeyPress]


class InputMap(Generic[K, B, T]):
    """Looks up an action by keyboard key or by controller button."""

    def __init__(self) -> None:
        self._keys: Dict[K, T] = {}
        self._buttons: Dict[B, T] = {}

    def insert(self, key: K, button: B, action: T) -> None:
        self._keys[key] = action
        self._buttons[button] = action

    def get(self, key: Optional[K] = None, button: Optional[B] = None) -> Optional[T]:
        """The action for ``key`` if one is given, otherwise for ``button``."""
        if key is not None:
            return self._keys.get(key)
        if button is not None:
            return self._buttons.get(button)
        return None


def default_input_map() -> InputMap[str, ControllerInput, Action]:
    """Key names and controller buttons bound to the standard actions."""
    m: InputMap[str, ControllerInput, Action] = InputMap()
    m.insert("Key1", ControllerInput.BUTTON_WEST, Action.INFO)
    m.insert("Key2", ControllerInput.BUTTON_NORTH, Action.FILTER)
    m.insert("Return", ControllerInput.BUTTON_SOUTH, Action.ACCEPT)
    m.insert("Escape", ControllerInput.BUTTON_EAST, Action.BACK)
    m.insert("Up", ControllerInput.DIRECTION_UP, Action.UP)
    m.insert("Down", ControllerInput.DIRECTION_DOWN, Action.DOWN)
    m.insert("Right", ControllerInput.DIRECTION_RIGHT, Action.RIGHT)
    m.insert("Left", ControllerInput.DIRECTION_LEFT, Action.LEFT)
    m.insert("F1", ControllerInput.BUTTON_START, Action.SHOW_MENU)
    m.insert("F2", ControllerInput.BUTTON_GUIDE, Action.TOGGLE_OVERLAY)
    return m


def input_to_actions(input_map: InputMap, gamepad) -> Set[UserAction]:
    """The actions for every controller input the gamepad reports.

    Unmapped inputs become character key presses of the input's number.
    """
    inputs: Iterable[ControllerInput] = gamepad.get_gamepad()
    result: Set[UserAction] = set()
    for g in inputs:
        action = input_map.get(None, g)
        if action is not None:
            result.add(action)
        else:
            result.add(KeyPress(InputKind.CHAR, chr(int(g) & 0xFF)))
    return result