"""Keyboard events and their short textual names."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class KeyCode(enum.Enum):
    """The key that was pressed, independent of modifiers."""

    BACKSPACE = enum.auto()
    ENTER = enum.auto()
    LEFT = enum.auto()
    RIGHT = enum.auto()
    UP = enum.auto()
    DOWN = enum.auto()
    HOME = enum.auto()
    END = enum.auto()
    PAGE_UP = enum.auto()
    PAGE_DOWN = enum.auto()
    TAB = enum.auto()
    BACK_TAB = enum.auto()
    DELETE = enum.auto()
    INSERT = enum.auto()
    F = enum.auto()
    CHAR = enum.auto()
    NULL = enum.auto()
    ESC = enum.auto()
    CAPS_LOCK = enum.auto()
    SCROLL_LOCK = enum.auto()
    NUM_LOCK = enum.auto()
    PRINT_SCREEN = enum.auto()
    PAUSE = enum.auto()
    MENU = enum.auto()
    KEYPAD_BEGIN = enum.auto()
    MEDIA = enum.auto()
    MODIFIER = enum.auto()


class KeyModifiers(enum.Flag):
    """Modifier keys held while a key was pressed."""

    NONE = 0
    SHIFT = 1
    CONTROL = 2
    ALT = 4
    SUPER = 8
    HYPER = 16
    META = 32


_CODE_NAMES = {
    KeyCode.BACKSPACE: "backspace",
    KeyCode.ENTER: "enter",
    KeyCode.LEFT: "left",
    KeyCode.RIGHT: "right",
    KeyCode.UP: "up",
    KeyCode.DOWN: "down",
    KeyCode.HOME: "home",
    KeyCode.END: "end",
    KeyCode.PAGE_UP: "pageup",
    KeyCode.PAGE_DOWN: "pagedown",
    KeyCode.TAB: "tab",
    KeyCode.BACK_TAB: "backtab",
    KeyCode.DELETE: "delete",
    KeyCode.INSERT: "insert",
    KeyCode.ESC: "esc",
}

_MODIFIER_NAMES = (
    (KeyModifiers.CONTROL, "ctrl"),
    (KeyModifiers.SHIFT, "shift"),
    (KeyModifiers.ALT, "alt"),
)


@dataclass(frozen=True)
class KeyEvent:
    """A key press: its code, the character or function-key number, and modifiers."""

    code: KeyCode
    char: str | None = None
    number: int | None = None
    modifiers: KeyModifiers = KeyModifiers.NONE

    def __post_init__(self) -> None:
        if self.code is KeyCode.CHAR:
            if not isinstance(self.char, str) or len(self.char) != 1:
                raise ValueError(f"a character key needs exactly one character, got {self.char!r}")
        elif self.char is not None:
            raise ValueError(f"{self.code.name} keys carry no character")
        if self.code is KeyCode.F:
            if not isinstance(self.number, int) or self.number < 0:
                raise ValueError(f"a function key needs a non-negative number, got {self.number!r}")
        elif self.number is not None:
            raise ValueError(f"{self.code.name} keys carry no number")

    @classmethod
    def from_char(cls, char: str) -> KeyEvent:
        """Press of a single character with no modifiers."""
        return cls(KeyCode.CHAR, char=char)

    @classmethod
    def from_code(cls, code: KeyCode) -> KeyEvent:
        """Press of a named key with no modifiers."""
        return cls(code)

    def __str__(self) -> str:
        return key_event_to_string(self)


def key_event_to_string(event: KeyEvent) -> str:
    """Short name of a key event, such as ``ctrl-a``, ``space`` or ``f(5)``."""
    if event.code is KeyCode.CHAR:
        key_name = "space" if event.char == " " else event.char
    elif event.code is KeyCode.F:
        key_name = f"f({event.number})"
    else:
        key_name = _CODE_NAMES.get(event.code, "")

    prefix = "-".join(name for flag, name in _MODIFIER_NAMES if event.modifiers & flag)
    return f"{prefix}-{key_name}" if prefix else key_name