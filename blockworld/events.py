"""Keyboard, mouse and gamepad input events."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar


class EventCategory(enum.Flag):
    """Categories an event can belong to; an event may be in several."""

    NONE = 0
    INPUT = enum.auto()
    KEYBOARD = enum.auto()
    MOUSE = enum.auto()
    GAMEPAD = enum.auto()


def _num(value: float) -> str:
    return f"{value:g}"


class Event:
    """Base of all events."""

    event_type: ClassVar[str] = ""
    categories: ClassVar[EventCategory] = EventCategory.NONE

    def in_category(self, category: EventCategory) -> bool:
        """True when the event belongs to any of the given categories."""
        return bool(self.categories & category)

    def __str__(self) -> str:
        return self.event_type


def _reject_direct(instance: object, base: type) -> None:
    if type(instance) is base:
        raise TypeError(f"{base.__name__} is a base class and cannot be created directly")


@dataclass(frozen=True)
class KeyEvent(Event):
    """Base of keyboard events."""

    key_code: int

    categories: ClassVar[EventCategory] = EventCategory.KEYBOARD | EventCategory.INPUT

    def __post_init__(self) -> None:
        _reject_direct(self, KeyEvent)


@dataclass(frozen=True)
class KeyPressEvent(KeyEvent):
    repeat: bool

    event_type: ClassVar[str] = "KeyPress"

    def __str__(self) -> str:
        return f"KeyPressEvent: Key={self.key_code}, Repeat={'true' if self.repeat else 'false'}"


@dataclass(frozen=True)
class KeyReleaseEvent(KeyEvent):
    event_type: ClassVar[str] = "KeyRelease"

    def __str__(self) -> str:
        return f"KeyReleaseEvent: Key={self.key_code}"


@dataclass(frozen=True)
class MouseMoveEvent(Event):
    x: float
    y: float
    delta_x: float
    delta_y: float

    event_type: ClassVar[str] = "MouseMove"
    categories: ClassVar[EventCategory] = EventCategory.MOUSE | EventCategory.INPUT

    def __str__(self) -> str:
        return (
            f"MouseMoveEvent: ({_num(self.x)}, {_num(self.y)}), "
            f"Delta=({_num(self.delta_x)}, {_num(self.delta_y)})"
        )


@dataclass(frozen=True)
class MouseButtonEvent(Event):
    """Base of mouse button events."""

    button: int

    categories: ClassVar[EventCategory] = EventCategory.MOUSE | EventCategory.INPUT

    def __post_init__(self) -> None:
        _reject_direct(self, MouseButtonEvent)


@dataclass(frozen=True)
class MouseButtonPressEvent(MouseButtonEvent):
    event_type: ClassVar[str] = "MouseButtonPress"

    def __str__(self) -> str:
        return f"MouseButtonPressEvent: Button={self.button}"


@dataclass(frozen=True)
class MouseButtonReleaseEvent(MouseButtonEvent):
    event_type: ClassVar[str] = "MouseButtonRelease"

    def __str__(self) -> str:
        return f"MouseButtonReleaseEvent: Button={self.button}"


@dataclass(frozen=True)
class MouseScrollEvent(Event):
    x_offset: float
    y_offset: float

    event_type: ClassVar[str] = "MouseScroll"
    categories: ClassVar[EventCategory] = EventCategory.MOUSE | EventCategory.INPUT

    def __str__(self) -> str:
        return f"MouseScrollEvent: ({_num(self.x_offset)}, {_num(self.y_offset)})"


@dataclass(frozen=True)
class GamepadButtonEvent(Event):
    gamepad_id: int
    button: int
    pressed: bool

    event_type: ClassVar[str] = "GamepadButton"
    categories: ClassVar[EventCategory] = EventCategory.GAMEPAD | EventCategory.INPUT

    def __str__(self) -> str:
        state = "Pressed" if self.pressed else "Released"
        return f"GamepadButtonEvent: Gamepad={self.gamepad_id}, Button={self.button}, {state}"


@dataclass(frozen=True)
class GamepadAxisEvent(Event):
    gamepad_id: int
    axis: int
    value: float

    event_type: ClassVar[str] = "GamepadAxis"
    categories: ClassVar[EventCategory] = EventCategory.GAMEPAD | EventCategory.INPUT

    def __str__(self) -> str:
        return f"GamepadAxisEvent: Gamepad={self.gamepad_id}, Axis={self.axis}, Value={_num(self.value)}"