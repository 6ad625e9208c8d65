"""Terminal session and the stream of events the pages react to."""

from __future__ import annotations

import contextlib
import enum
import re
import signal
import sys
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from mealflow.keys import KeyCode, KeyEvent, KeyModifiers


class EventKind(enum.Enum):
    """What kind of event happened."""

    INIT = enum.auto()
    ERROR = enum.auto()
    TICK = enum.auto()
    RENDER = enum.auto()
    FOCUS_GAINED = enum.auto()
    FOCUS_LOST = enum.auto()
    PASTE = enum.auto()
    KEY = enum.auto()
    MOUSE = enum.auto()
    RESIZE = enum.auto()


@dataclass(frozen=True)
class Event:
    """An event from the terminal or from the tick and render timers."""

    kind: EventKind
    key: KeyEvent | None = None
    text: str | None = None
    size: tuple[int, int] | None = None

    @classmethod
    def key_press(cls, key: KeyEvent | KeyCode | str) -> Event:
        """Key event from a key event, a named key or a single character."""
        if isinstance(key, KeyCode):
            key = KeyEvent.from_code(key)
        elif isinstance(key, str):
            key = KeyEvent.from_char(key)
        return cls(EventKind.KEY, key=key)


_NAMED_KEYS = {
    "KEY_BACKSPACE": KeyCode.BACKSPACE,
    "KEY_ENTER": KeyCode.ENTER,
    "KEY_LEFT": KeyCode.LEFT,
    "KEY_RIGHT": KeyCode.RIGHT,
    "KEY_UP": KeyCode.UP,
    "KEY_DOWN": KeyCode.DOWN,
    "KEY_HOME": KeyCode.HOME,
    "KEY_END": KeyCode.END,
    "KEY_PGUP": KeyCode.PAGE_UP,
    "KEY_PPAGE": KeyCode.PAGE_UP,
    "KEY_PGDOWN": KeyCode.PAGE_DOWN,
    "KEY_NPAGE": KeyCode.PAGE_DOWN,
    "KEY_TAB": KeyCode.TAB,
    "KEY_BTAB": KeyCode.BACK_TAB,
    "KEY_DELETE": KeyCode.DELETE,
    "KEY_DC": KeyCode.DELETE,
    "KEY_INSERT": KeyCode.INSERT,
    "KEY_IC": KeyCode.INSERT,
    "KEY_ESCAPE": KeyCode.ESC,
    "KEY_BEGIN": KeyCode.KEYPAD_BEGIN,
}

_SHIFTED_KEYS = {
    "KEY_SLEFT": KeyCode.LEFT,
    "KEY_SRIGHT": KeyCode.RIGHT,
    "KEY_SHOME": KeyCode.HOME,
    "KEY_SEND": KeyCode.END,
    "KEY_SDC": KeyCode.DELETE,
    "KEY_SIC": KeyCode.INSERT,
}

_FUNCTION_KEY = re.compile(r"KEY_F(\d+)$")

_CONTROL_CHARS = {
    "\r": KeyCode.ENTER,
    "\n": KeyCode.ENTER,
    "\t": KeyCode.TAB,
    "\x7f": KeyCode.BACKSPACE,
    "\x08": KeyCode.BACKSPACE,
    "\x1b": KeyCode.ESC,
    "\x00": KeyCode.NULL,
}


def translate_keystroke(keystroke: Any) -> KeyEvent | None:
    """Turn a terminal keystroke into a key event, or None if it has no meaning here."""
    name = getattr(keystroke, "name", None)
    if name:
        if name in _NAMED_KEYS:
            return KeyEvent.from_code(_NAMED_KEYS[name])
        if name in _SHIFTED_KEYS:
            return KeyEvent(_SHIFTED_KEYS[name], modifiers=KeyModifiers.SHIFT)
        match = _FUNCTION_KEY.match(name)
        if match:
            return KeyEvent(KeyCode.F, number=int(match.group(1)))
        return None

    text = str(keystroke)
    if len(text) != 1:
        return None
    if text in _CONTROL_CHARS:
        return KeyEvent.from_code(_CONTROL_CHARS[text])
    if "\x01" <= text <= "\x1a":
        letter = chr(ord(text) - 1 + ord("a"))
        return KeyEvent(KeyCode.CHAR, char=letter, modifiers=KeyModifiers.CONTROL)
    if not text.isprintable():
        return None
    return KeyEvent.from_char(text)


def _following(deadline: float, delay: float, now: float) -> float:
    deadline += delay
    if deadline <= now:
        deadline = now + delay
    return deadline


class Tui:
    """A full-screen terminal session that yields key, tick and render events."""

    def __init__(
        self,
        tick_rate: float = 4.0,
        frame_rate: float = 60.0,
        terminal: Any = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if tick_rate <= 0 or frame_rate <= 0:
            raise ValueError("tick and frame rates must be positive")
        if terminal is None:
            import blessed

            terminal = blessed.Terminal(stream=sys.stderr)
        self.terminal = terminal
        self.tick_rate = tick_rate
        self.frame_rate = frame_rate
        self._clock = clock
        self._stack: contextlib.ExitStack | None = None

    @property
    def active(self) -> bool:
        """Whether the terminal is in full-screen raw mode."""
        return self._stack is not None

    def _write(self, text: str) -> None:
        stream = self.terminal.stream
        stream.write(text)
        stream.flush()

    def enter(self) -> None:
        """Switch to raw mode and the alternate screen, hiding the cursor."""
        if self.active:
            return
        stack = contextlib.ExitStack()
        stack.enter_context(self.terminal.raw())
        try:
            self._write(self.terminal.enter_fullscreen + self.terminal.hide_cursor)
        except BaseException:
            stack.close()
            raise
        self._stack = stack

    def exit(self) -> None:
        """Leave the alternate screen, show the cursor and restore the terminal mode."""
        stack, self._stack = self._stack, None
        if stack is None:
            return
        with stack:
            self._write(self.terminal.normal_cursor + self.terminal.exit_fullscreen)

    def suspend(self) -> None:
        """Restore the terminal and stop the process as if by Ctrl-Z."""
        self.exit()
        if hasattr(signal, "SIGTSTP"):
            signal.raise_signal(signal.SIGTSTP)

    def resume(self) -> None:
        """Enter the terminal again after a suspend."""
        self.enter()

    def events(self) -> Iterator[Event]:
        """Yield events until the session is exited, starting with INIT."""
        if not self.active:
            raise RuntimeError("Unable to get event: terminal is not active")
        tick_delay = 1.0 / self.tick_rate
        render_delay = 1.0 / self.frame_rate
        term = self.terminal

        yield Event(EventKind.INIT)
        start = self._clock()
        next_tick = start
        next_render = start
        size = (term.width, term.height)

        while self.active:
            now = self._clock()
            if now >= next_tick:
                next_tick = _following(next_tick, tick_delay, now)
                yield Event(EventKind.TICK)
                continue
            if now >= next_render:
                next_render = _following(next_render, render_delay, now)
                yield Event(EventKind.RENDER)
                continue

            try:
                keystroke = term.inkey(timeout=min(next_tick, next_render) - now)
            except OSError:
                yield Event(EventKind.ERROR)
                continue

            current_size = (term.width, term.height)
            if current_size != size:
                size = current_size
                yield Event(EventKind.RESIZE, size=size)

            if keystroke:
                key = translate_keystroke(keystroke)
                if key is not None:
                    yield Event.key_press(key)

    def __enter__(self) -> Tui:
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.exit()