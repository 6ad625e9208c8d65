import contextlib
import io
import itertools
from collections import deque

import pytest
from blessed.keyboard import Keystroke

from mealflow.keys import KeyCode, KeyEvent, KeyModifiers
from mealflow.tui import Event, EventKind, Tui, translate_keystroke


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class FakeTerminal:
    enter_fullscreen = "<enter>"
    exit_fullscreen = "<exit>"
    hide_cursor = "<hide>"
    normal_cursor = "<show>"

    def __init__(self, clock, script=()):
        self.clock = clock
        self.stream = io.StringIO()
        self.width = 80
        self.height = 25
        self.raw_depth = 0
        self.script = deque(script)

    @contextlib.contextmanager
    def raw(self):
        self.raw_depth += 1
        try:
            yield
        finally:
            self.raw_depth -= 1

    def inkey(self, timeout=None):
        if self.script:
            item = self.script.popleft()
            if isinstance(item, Exception):
                raise item
            if isinstance(item, tuple):
                _, self.width, self.height = item
                return Keystroke("")
            return item
        self.clock.now += timeout
        return Keystroke("")


def make_tui(script=(), tick_rate=4.0, frame_rate=8.0):
    clock = FakeClock()
    terminal = FakeTerminal(clock, script)
    return Tui(tick_rate=tick_rate, frame_rate=frame_rate, terminal=terminal, clock=clock), terminal, clock


def first_of(events, kind, limit=200):
    for event in itertools.islice(events, limit):
        if event.kind is kind:
            return event
    raise AssertionError(f"no {kind} event")


def test_key_press_from_char():
    event = Event.key_press("q")
    assert event.kind is EventKind.KEY
    assert event.key == KeyEvent.from_char("q")


def test_key_press_from_code():
    assert Event.key_press(KeyCode.ENTER).key == KeyEvent.from_code(KeyCode.ENTER)


def test_key_press_from_event():
    key = KeyEvent(KeyCode.CHAR, char="a", modifiers=KeyModifiers.CONTROL)
    assert Event.key_press(key).key is key


def test_translate_plain_char():
    assert translate_keystroke(Keystroke("j")) == KeyEvent.from_char("j")


def test_translate_upper_char():
    assert translate_keystroke(Keystroke("G")) == KeyEvent.from_char("G")


def test_translate_named_sequence():
    stroke = Keystroke("\x1b[D", code=260, name="KEY_LEFT")
    assert translate_keystroke(stroke) == KeyEvent.from_code(KeyCode.LEFT)


def test_translate_escape_by_name():
    stroke = Keystroke("\x1b", code=361, name="KEY_ESCAPE")
    assert translate_keystroke(stroke) == KeyEvent.from_code(KeyCode.ESC)


def test_translate_function_key():
    stroke = Keystroke("\x1bOQ", code=266, name="KEY_F2")
    assert translate_keystroke(stroke) == KeyEvent(KeyCode.F, number=2)


def test_translate_shifted_key():
    stroke = Keystroke("\x1b[1;2D", code=393, name="KEY_SLEFT")
    assert translate_keystroke(stroke) == KeyEvent(KeyCode.LEFT, modifiers=KeyModifiers.SHIFT)


def test_translate_control_chars():
    assert translate_keystroke(Keystroke("\r")) == KeyEvent.from_code(KeyCode.ENTER)
    assert translate_keystroke(Keystroke("\t")) == KeyEvent.from_code(KeyCode.TAB)
    assert translate_keystroke(Keystroke("\x7f")) == KeyEvent.from_code(KeyCode.BACKSPACE)
    assert translate_keystroke(Keystroke("\x1b")) == KeyEvent.from_code(KeyCode.ESC)


def test_translate_ctrl_letter():
    event = translate_keystroke(Keystroke("\x03"))
    assert event == KeyEvent(KeyCode.CHAR, char="c", modifiers=KeyModifiers.CONTROL)
    assert str(event) == "ctrl-c"


def test_translate_unknown_is_none():
    assert translate_keystroke(Keystroke("")) is None
    assert translate_keystroke(Keystroke("\x1b[99~", code=999, name="KEY_UNKNOWN")) is None


def test_rates_must_be_positive():
    clock = FakeClock()
    with pytest.raises(ValueError):
        Tui(tick_rate=0, terminal=FakeTerminal(clock), clock=clock)
    with pytest.raises(ValueError):
        Tui(frame_rate=-1, terminal=FakeTerminal(clock), clock=clock)


def test_enter_and_exit_write_sequences():
    tui, terminal, _ = make_tui()
    tui.enter()
    assert tui.active
    assert terminal.raw_depth == 1
    assert terminal.stream.getvalue() == "<enter><hide>"
    tui.exit()
    assert not tui.active
    assert terminal.raw_depth == 0
    assert terminal.stream.getvalue() == "<enter><hide><show><exit>"


def test_exit_twice_is_harmless():
    tui, terminal, _ = make_tui()
    tui.enter()
    tui.exit()
    tui.exit()
    assert terminal.stream.getvalue().count("<exit>") == 1


def test_enter_twice_enters_once():
    tui, terminal, _ = make_tui()
    tui.enter()
    tui.enter()
    assert terminal.raw_depth == 1
    assert terminal.stream.getvalue().count("<enter>") == 1
    tui.exit()


def test_context_manager_restores_terminal():
    tui, terminal, _ = make_tui()
    with tui as session:
        assert session is tui
        assert terminal.raw_depth == 1
    assert terminal.raw_depth == 0
    assert terminal.stream.getvalue().endswith("<show><exit>")


def test_resume_enters_again():
    tui, terminal, _ = make_tui()
    tui.enter()
    tui.exit()
    tui.resume()
    assert tui.active
    assert terminal.stream.getvalue().count("<enter>") == 2
    tui.exit()


def test_events_require_active_session():
    tui, _, _ = make_tui()
    with pytest.raises(RuntimeError):
        next(tui.events())


def test_first_event_is_init():
    tui, _, _ = make_tui()
    with tui:
        assert next(tui.events()).kind is EventKind.INIT


def test_key_events_are_translated():
    tui, _, _ = make_tui(script=[Keystroke("q")])
    with tui:
        event = first_of(tui.events(), EventKind.KEY)
    assert event.key == KeyEvent.from_char("q")


def test_resize_event():
    tui, _, _ = make_tui(script=[("resize", 100, 40)])
    with tui:
        event = first_of(tui.events(), EventKind.RESIZE)
    assert event.size == (100, 40)


def test_error_event_on_read_failure():
    tui, _, _ = make_tui(script=[OSError("read failed")])
    with tui:
        event = first_of(tui.events(), EventKind.ERROR)
    assert event.kind is EventKind.ERROR


def test_ticks_and_renders_follow_rates():
    tui, _, clock = make_tui(tick_rate=4.0, frame_rate=8.0)
    kinds = []
    with tui:
        for event in tui.events():
            kinds.append(event.kind)
            if clock.now >= 2.0:
                break
    ticks = kinds.count(EventKind.TICK)
    renders = kinds.count(EventKind.RENDER)
    assert ticks >= 2.0 * tui.tick_rate
    assert renders >= 2.0 * tui.frame_rate
    assert renders > ticks


def test_events_stop_after_exit():
    tui, _, _ = make_tui()
    tui.enter()
    events = tui.events()
    assert next(events).kind is EventKind.INIT
    tui.exit()
    assert list(events) == []