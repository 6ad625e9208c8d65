"""Pop-up listing the key hints of the page beneath it."""

from __future__ import annotations

import enum
from collections.abc import Callable

from wcwidth import wcswidth, wcwidth

from mealflow.help_msg import HelpEntry, HelpMsg
from mealflow.keys import KeyCode, KeyEvent

_MIN_WIDTH = 50
_SCREEN_MARGIN = 4
_EXTRA_WIDTH = 8


def _display_width(text: str) -> int:
    width = wcswidth(text)
    if width >= 0:
        return width
    return sum(max(wcwidth(char), 0) for char in text)


class HelpPopupAction(enum.Enum):
    """Requests the help pop-up sends in response to keys."""

    UP = enum.auto()
    DOWN = enum.auto()
    START = enum.auto()
    END = enum.auto()
    CLOSE = enum.auto()


_KEY_ACTIONS = {
    KeyEvent.from_code(KeyCode.ESC): HelpPopupAction.CLOSE,
    KeyEvent.from_char("j"): HelpPopupAction.DOWN,
    KeyEvent.from_char("k"): HelpPopupAction.UP,
    KeyEvent.from_char("g"): HelpPopupAction.START,
    KeyEvent.from_char("G"): HelpPopupAction.END,
}


def self_help_message() -> HelpMsg:
    """Key hints for the pop-up itself."""
    return HelpMsg(
        [
            HelpEntry("j", "Go Down"),
            HelpEntry("k", "Go Up"),
            HelpEntry("g", "Go to Top"),
            HelpEntry("G", "Go to Bottom"),
            HelpEntry(KeyCode.ESC, "Close help"),
        ]
    )


class HelpPopup:
    """State of the help pop-up: the entries, their widths and the selected row."""

    def __init__(
        self,
        msg: HelpMsg,
        send: Callable[[HelpPopupAction], None] | None = None,
    ) -> None:
        if len(msg) == 0:
            raise ValueError("a help pop-up needs at least one entry")
        self.help_msg = msg
        self.longest_key = max(_display_width(entry.key_label()) for entry in msg)
        self.longest_desc = max(_display_width(entry.desc) for entry in msg)
        self.selected = 0
        self._send = send if send is not None else (lambda action: None)

    @classmethod
    def create(cls, msg: HelpMsg) -> HelpPopup | None:
        """A pop-up for the message, or None when the message is empty."""
        if len(msg) == 0:
            return None
        return cls(msg)

    def handle_key(self, key: KeyEvent) -> None:
        """Send the action bound to a key, if any; modifiers are ignored."""
        if key.code is KeyCode.CHAR:
            bare = KeyEvent.from_char(key.char)
        elif key.code is KeyCode.F:
            return
        else:
            bare = KeyEvent.from_code(key.code)
        action = _KEY_ACTIONS.get(bare)
        if action is not None:
            self._send(action)

    def update(self, action: object) -> None:
        """Move the selection; other actions are ignored."""
        last = len(self.help_msg) - 1
        if action is HelpPopupAction.UP:
            self.selected = max(self.selected - 1, 0)
        elif action is HelpPopupAction.DOWN:
            self.selected = min(self.selected + 1, last)
        elif action is HelpPopupAction.START:
            self.selected = 0
        elif action is HelpPopupAction.END:
            self.selected = last

    def popup_width(self, screen_width: int) -> int:
        """Width of the pop-up box on a screen of the given width."""
        if screen_width < _SCREEN_MARGIN:
            raise ValueError(f"screen too narrow for the help pop-up: {screen_width}")
        wanted = max(self.longest_desc + self.longest_key + _EXTRA_WIDTH, _MIN_WIDTH)
        return min(wanted, screen_width - _SCREEN_MARGIN)