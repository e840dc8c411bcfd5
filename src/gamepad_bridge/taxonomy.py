"""Event taxonomy.

Closed enumerations of the input events the bridge accepts:
- EventType: the five event categories
- One code enum per category (ButtonCode, AxisCode, TriggerCode,
  MouseButtonCode, KeyboardCode)
- Value domains for the continuous categories

Every table is fixed at import time. There is no dynamic registration.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum
from typing import Any


class EventType(str, Enum):
    """All event categories."""

    BUTTON = "button"
    AXIS = "axis"
    TRIGGER = "trigger"
    MOUSE_BUTTON = "mouseButton"
    KEYBOARD = "keyboard"

    @property
    def is_discrete(self) -> bool:
        """True for boolean-valued (press/release) categories."""
        return self in _DISCRETE_TYPES

    @property
    def is_continuous(self) -> bool:
        """True for number-valued (sampled) categories."""
        return not self.is_discrete


_DISCRETE_TYPES = frozenset({EventType.BUTTON, EventType.MOUSE_BUTTON, EventType.KEYBOARD})


class ButtonCode(str, Enum):
    """Gamepad buttons."""

    A = "A"
    B = "B"
    X = "X"
    Y = "Y"
    LEFT_SHOULDER = "LEFT_SHOULDER"
    RIGHT_SHOULDER = "RIGHT_SHOULDER"
    LEFT_THUMB = "LEFT_THUMB"
    RIGHT_THUMB = "RIGHT_THUMB"
    BACK = "BACK"
    START = "START"
    GUIDE = "GUIDE"
    DPAD_UP = "DPAD_UP"
    DPAD_DOWN = "DPAD_DOWN"
    DPAD_LEFT = "DPAD_LEFT"
    DPAD_RIGHT = "DPAD_RIGHT"
    LEFT_STICK_UP = "LEFT_STICK_UP"
    LEFT_STICK_DOWN = "LEFT_STICK_DOWN"
    LEFT_STICK_LEFT = "LEFT_STICK_LEFT"
    LEFT_STICK_RIGHT = "LEFT_STICK_RIGHT"
    RIGHT_STICK_UP = "RIGHT_STICK_UP"
    RIGHT_STICK_DOWN = "RIGHT_STICK_DOWN"
    RIGHT_STICK_LEFT = "RIGHT_STICK_LEFT"
    RIGHT_STICK_RIGHT = "RIGHT_STICK_RIGHT"


class AxisCode(str, Enum):
    """Analog stick and d-pad axes."""

    LEFT_X = "leftX"
    LEFT_Y = "leftY"
    RIGHT_X = "rightX"
    RIGHT_Y = "rightY"
    DPAD_HORZ = "dpadHorz"
    DPAD_VERT = "dpadVert"


class TriggerCode(str, Enum):
    """Analog triggers."""

    LEFT_TRIGGER = "leftTrigger"
    RIGHT_TRIGGER = "rightTrigger"


class MouseButtonCode(str, Enum):
    """Mouse buttons."""

    LEFT_CLICK = "leftClick"
    RIGHT_CLICK = "rightClick"
    MIDDLE_CLICK = "middleClick"


def _keyboard_members() -> list[tuple[str, str]]:
    members = [(letter, letter) for letter in string.ascii_lowercase]
    members += [(f"num{digit}", digit) for digit in string.digits]
    members += [(f"numpad_{digit}", f"numpad_{digit}") for digit in string.digits]
    members += [
        (name, name)
        for name in (
            "backspace",
            "delete",
            "enter",
            "tab",
            "escape",
            "up",
            "down",
            "left",
            "right",
            "home",
            "end",
            "pageup",
            "pagedown",
        )
    ]
    members += [(f"f{n}", f"f{n}") for n in range(1, 13)]
    members += [
        (name, name)
        for name in ("alt", "control", "shift", "space", "windows", "play", "pause", "mute", "fn")
    ]
    return members


KeyboardCode = Enum("KeyboardCode", _keyboard_members(), type=str, module=__name__)
KeyboardCode.__doc__ = "Keyboard keys: letters, digits, numpad, navigation, F-keys, modifiers."


# Code table per event type. Keep in sync with EventType.
CODE_TABLES: dict[EventType, type[Enum]] = {
    EventType.BUTTON: ButtonCode,
    EventType.AXIS: AxisCode,
    EventType.TRIGGER: TriggerCode,
    EventType.MOUSE_BUTTON: MouseButtonCode,
    EventType.KEYBOARD: KeyboardCode,
}


@dataclass(frozen=True)
class ValueDomain:
    """Closed numeric interval for continuous events."""

    minimum: float
    maximum: float

    def contains(self, value: float) -> bool:
        # NaN fails both comparisons
        return self.minimum <= value <= self.maximum

    def describe(self) -> str:
        return f"between {self.minimum:g} and {self.maximum:g}"


SYMMETRIC_DOMAIN = ValueDomain(-1.0, 1.0)
UNIT_DOMAIN = ValueDomain(0.0, 1.0)


class TriggerRange(str, Enum):
    """Accepted interval for trigger values."""

    SYMMETRIC = "symmetric"  # [-1, 1], same rule as axes
    UNIT = "unit"  # [0, 1]

    @property
    def domain(self) -> ValueDomain:
        return UNIT_DOMAIN if self is TriggerRange.UNIT else SYMMETRIC_DOMAIN


def parse_event_type(value: str) -> EventType | None:
    """Look up an event type by its wire name."""
    try:
        return EventType(value)
    except ValueError:
        return None


def parse_event_code(event_type: EventType, value: str) -> Enum | None:
    """Look up a code in the table of ``event_type``.

    Codes from other tables are not found, even when the string matches.
    """
    try:
        return CODE_TABLES[event_type](value)
    except ValueError:
        return None


def codes_for(event_type: EventType) -> list[str]:
    """Wire names of every code legal for ``event_type``, in table order."""
    return [member.value for member in CODE_TABLES[event_type]]


def _listing(discrete: bool) -> list[dict[str, Any]]:
    return [
        {"type": event_type.value, "code": code}
        for event_type in EventType
        if event_type.is_discrete == discrete
        for code in codes_for(event_type)
    ]


def button_events() -> list[dict[str, Any]]:
    """All (type, code) pairs of the discrete categories."""
    return _listing(discrete=True)


def slider_events() -> list[dict[str, Any]]:
    """All (type, code) pairs of the continuous categories."""
    return _listing(discrete=False)


def valid_events() -> dict[str, list[dict[str, Any]]]:
    """The full taxonomy as exposed by the ``gamepad://valid-events`` resource."""
    return {"buttonEvents": button_events(), "sliderEvents": slider_events()}
