"""Restricted mode: a passcode that locks actions until it is entered again."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from .state import YaffeState

PIN_SIZE = 8


@dataclass
class RestrictedPasscode:
    """Up to ``PIN_SIZE`` entered characters."""

    code: List[str] = field(default_factory=list)

    def add_digit(self, digit: str) -> None:
        """Append ``digit``; ignored once the passcode is full."""
        if len(self.code) < PIN_SIZE:
            self.code.append(digit)

    def __len__(self) -> int:
        return len(self.code)

    def matches(self, other: "RestrictedPasscode") -> bool:
        """Whether ``other`` starts with every character of this passcode.

        Positions ``other`` has not filled count as the NUL character.
        """
        padded = other.code + ["\0"] * (PIN_SIZE - len(other.code))
        return all(a == b for a, b in zip(self.code, padded))


def apply_passcode(state: "YaffeState", passcode: RestrictedPasscode) -> bool:
    """Turn restricted mode on with ``passcode``, or off if it matches the stored one.

    Returns whether restricted mode is on afterwards.
    """
    current = state.restricted_mode
    if current is None:
        state.restricted_mode = RestrictedPasscode(list(passcode.code))
    elif passcode.matches(current):
        state.restricted_mode = None
    return state.restricted_mode is not None


def verify_restricted_action(state: "YaffeState") -> bool:
    """Whether restricted actions are currently allowed."""
    return state.restricted_mode is None