"""Spending analysis page: meals by time of day and totals by merchant."""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Protocol

from mealflow.help_msg import HelpEntry, HelpMsg
from mealflow.keys import KeyCode, KeyEvent


class _Transaction(Protocol):
    time: datetime
    amount: float
    merchant: str


_BREAKFAST = (time(5, 0), time(10, 30))
_LUNCH = (time(10, 30), time(13, 30))
_DINNER = (time(16, 30), time(19, 30))


def _within(moment: time, period: tuple[time, time]) -> bool:
    start, end = period
    return start <= moment < end


@dataclass
class TimePeriodData:
    """How many transactions fall into each meal period."""

    breakfast: int = 0
    """5:00 to 10:30."""
    lunch: int = 0
    """10:30 to 13:30."""
    dinner: int = 0
    """16:30 to 19:30."""
    unknown: int = 0
    """Any other time."""

    @classmethod
    def from_transactions(cls, transactions: Iterable[_Transaction]) -> TimePeriodData:
        """Count transactions by the meal period of their local time of day."""
        data = cls()
        for transaction in transactions:
            moment = transaction.time.time()
            if _within(moment, _BREAKFAST):
                data.breakfast += 1
            elif _within(moment, _LUNCH):
                data.lunch += 1
            elif _within(moment, _DINNER):
                data.dinner += 1
            else:
                data.unknown += 1
        return data

    def items(self) -> list[tuple[str, int]]:
        """Labelled counts in display order."""
        return [
            ("Breakfast", self.breakfast),
            ("Lunch", self.lunch),
            ("Dinner", self.dinner),
            ("Other", self.unknown),
        ]


@dataclass
class MerchantData:
    """Total amount per merchant, smallest total first, with a scroll offset."""

    entries: list[tuple[str, float]] = field(default_factory=list)
    offset: int = 0

    @classmethod
    def from_transactions(cls, transactions: Iterable[_Transaction]) -> MerchantData:
        """Sum amounts by merchant and sort the totals in ascending order."""
        totals: dict[str, float] = {}
        for transaction in transactions:
            totals[transaction.merchant] = totals.get(transaction.merchant, 0.0) + transaction.amount
        entries = sorted(totals.items(), key=lambda entry: entry[1])
        return cls(entries=entries)

    def scroll_down(self) -> None:
        """Move the view one line down."""
        self.offset += 1

    def scroll_up(self) -> None:
        """Move the view one line up, stopping at the top."""
        self.offset = max(self.offset - 1, 0)


class AnalysisType(enum.Enum):
    """The tabs of the analysis page, in display order."""

    TIME_PERIOD = "Time Period"
    MERCHANT = "Merchant"

    @property
    def label(self) -> str:
        return self.value

    @property
    def index(self) -> int:
        return list(AnalysisType).index(self)

    def next(self) -> AnalysisType:
        members = list(AnalysisType)
        return members[(self.index + 1) % len(members)]

    def previous(self) -> AnalysisType:
        members = list(AnalysisType)
        return members[(self.index - 1) % len(members)]


class AnalysisAction(enum.Enum):
    """Requests the analysis page sends in response to keys."""

    PREVIOUS_TAB = enum.auto()
    NEXT_TAB = enum.auto()
    SCROLL_UP = enum.auto()
    SCROLL_DOWN = enum.auto()
    CLOSE = enum.auto()


_KEY_ACTIONS = {
    KeyEvent.from_code(KeyCode.ESC): AnalysisAction.CLOSE,
    KeyEvent.from_char("h"): AnalysisAction.PREVIOUS_TAB,
    KeyEvent.from_code(KeyCode.LEFT): AnalysisAction.PREVIOUS_TAB,
    KeyEvent.from_char("l"): AnalysisAction.NEXT_TAB,
    KeyEvent.from_code(KeyCode.RIGHT): AnalysisAction.NEXT_TAB,
    KeyEvent.from_char("j"): AnalysisAction.SCROLL_DOWN,
    KeyEvent.from_code(KeyCode.DOWN): AnalysisAction.SCROLL_DOWN,
    KeyEvent.from_char("k"): AnalysisAction.SCROLL_UP,
    KeyEvent.from_code(KeyCode.UP): AnalysisAction.SCROLL_UP,
}


class Analysis:
    """State of the analysis page: the open tab and the data it shows."""

    def __init__(
        self,
        transactions: Iterable[_Transaction],
        send: Callable[[AnalysisAction], None] | None = None,
    ) -> None:
        self.transactions = list(transactions)
        self._send = send if send is not None else (lambda action: None)
        self.analysis_type = AnalysisType.TIME_PERIOD
        self.data: TimePeriodData | MerchantData = self._build(self.analysis_type)

    def _build(self, kind: AnalysisType) -> TimePeriodData | MerchantData:
        if kind is AnalysisType.TIME_PERIOD:
            return TimePeriodData.from_transactions(self.transactions)
        return MerchantData.from_transactions(self.transactions)

    def _switch(self, kind: AnalysisType) -> None:
        self.analysis_type = kind
        self.data = self._build(kind)

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
        """Apply an action; actions for other pages are ignored."""
        if action is AnalysisAction.NEXT_TAB:
            self._switch(self.analysis_type.next())
        elif action is AnalysisAction.PREVIOUS_TAB:
            self._switch(self.analysis_type.previous())
        elif action in (AnalysisAction.SCROLL_DOWN, AnalysisAction.SCROLL_UP):
            if isinstance(self.data, MerchantData):
                if action is AnalysisAction.SCROLL_DOWN:
                    self.data.scroll_down()
                else:
                    self.data.scroll_up()

    def help_message(self) -> HelpMsg:
        """Key hints for this page."""
        return HelpMsg(
            [
                HelpEntry("h", "Last tab"),
                HelpEntry("l", "Next Tab"),
                HelpEntry(KeyCode.ESC, "Go back"),
            ]
        )