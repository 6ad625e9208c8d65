"""Key hints shown at the bottom of each page."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from mealflow.keys import KeyCode, KeyEvent


@dataclass(frozen=True)
class HelpEntry:
    """One hint: a key (or literal key text) and what it does."""

    key: KeyEvent | KeyCode | str
    desc: str
    literal: bool = field(default=False, kw_only=True)

    def __post_init__(self) -> None:
        if self.literal:
            object.__setattr__(self, "key", str(self.key))
            return
        key = self.key
        if isinstance(key, KeyCode):
            key = KeyEvent.from_code(key)
        elif isinstance(key, str):
            key = KeyEvent.from_char(key)
        elif not isinstance(key, KeyEvent):
            raise TypeError(f"unsupported help key: {key!r}")
        object.__setattr__(self, "key", key)

    @classmethod
    def plain(cls, key: str, desc: str) -> HelpEntry:
        """Entry whose key is shown exactly as given, such as ``hjkl``."""
        return cls(key, desc, literal=True)

    def key_label(self) -> str:
        """Text shown for the key."""
        return str(self.key)

    def __str__(self) -> str:
        return f"{self.desc}: {self.key_label()}"


class HelpMsg:
    """An ordered list of help entries."""

    def __init__(self, entries: Iterable[HelpEntry] = ()) -> None:
        self._entries: list[HelpEntry] = list(entries)

    def push(self, entry: HelpEntry) -> None:
        """Append one entry."""
        self._entries.append(entry)

    def extend(self, other: Iterable[HelpEntry]) -> None:
        """Append all entries of another message in place."""
        self._entries.extend(other)

    def extended(self, other: Iterable[HelpEntry]) -> HelpMsg:
        """A new message holding this one's entries followed by the other's."""
        result = HelpMsg(self._entries)
        result.extend(other)
        return result

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HelpEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> HelpEntry:
        return self._entries[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HelpMsg):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"HelpMsg({self._entries!r})"

    def __str__(self) -> str:
        return " | ".join(str(entry) for entry in self._entries)