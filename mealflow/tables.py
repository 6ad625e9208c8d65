"""Layout and ordering helpers for the transactions table."""

from __future__ import annotations

import unicodedata
from collections.abc import Iterable, Sequence
from datetime import datetime
from decimal import Decimal
from typing import Protocol, TypeVar

from wcwidth import wcwidth

from mealflow.help_msg import HelpEntry, HelpMsg
from mealflow.keys import KeyCode

HEADER: tuple[str, str, str] = ("金额", "时间", "商家")
"""Column titles: amount, time, merchant."""

ITEM_HEIGHT = 3
"""Lines taken by one table row."""

TIME_FORMAT = "%Y-%m-%d %H:%M"


class _Transaction(Protocol):
    time: datetime
    amount: float
    merchant: str


_T = TypeVar("_T", bound=_Transaction)


def format_amount(amount: float) -> str:
    """Shortest plain decimal text of an amount: ``12``, ``12.5``, ``-0.01``."""
    value = float(amount)
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


def _char_width(char: str, cjk: bool) -> int:
    width = wcwidth(char)
    if width < 0:
        return 0
    if cjk and width == 1 and unicodedata.east_asian_width(char) == "A":
        return 2
    return width


def _width(text: str, cjk: bool = False) -> int:
    return sum(_char_width(char, cjk) for char in text)


def column_widths(
    transactions: Iterable[_Transaction],
    header: Sequence[str] = HEADER,
) -> tuple[int, int, int]:
    """Display widths of the amount, time and merchant columns, header included."""
    if len(header) != 3:
        raise ValueError(f"the table has three columns, got {len(header)} titles")
    amount_len = time_len = merchant_len = 0
    for transaction in transactions:
        amount_len = max(amount_len, _width(format_amount(transaction.amount)))
        time_len = max(time_len, _width(transaction.time.strftime(TIME_FORMAT)))
        merchant_len = max(merchant_len, _width(transaction.merchant, cjk=True))
    return (
        max(amount_len, _width(header[0], cjk=True)),
        max(time_len, _width(header[1], cjk=True)),
        max(merchant_len, _width(header[2], cjk=True)),
    )


def next_row_index(current: int | None, delta: int, length: int) -> int | None:
    """Row selected after moving by ``delta`` from ``current``, wrapping around.

    No row is selected in an empty table; with no current row, moving starts at 0.
    """
    if length < 0:
        raise ValueError(f"table length cannot be negative: {length}")
    if length == 0:
        return None
    start = current if current is not None else 0
    return (start + delta) % length


def newest_first(transactions: Iterable[_T]) -> list[_T]:
    """Transactions sorted by time, latest first; equal times keep their order."""
    return sorted(transactions, key=lambda transaction: transaction.time, reverse=True)


def transactions_help_message(filtered: bool) -> HelpMsg:
    """Key hints for the transactions page, filtered or not."""
    msg = HelpMsg([HelpEntry("?", "Show help")])
    if filtered:
        msg.push(HelpEntry(KeyCode.ESC, "Back"))
    else:
        msg.push(HelpEntry("f", "Fetch"))
    msg.push(HelpEntry(" ", "Filter this merchant"))
    msg.push(HelpEntry("l", "Load from local cache"))
    return msg