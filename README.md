# mealflow

Building blocks for a keyboard-driven terminal interface to meal-card spending records.
The package covers key handling, help bars, a terminal event loop, and the state behind
an analysis page, a help pop-up and a transactions table.

## What is inside

- `mealflow.keys` provides `KeyCode`, `KeyModifiers` and `KeyEvent`. Build events with
  `KeyEvent.from_char("q")` or `KeyEvent.from_code(KeyCode.ESC)`.
  `key_event_to_string` (also `str(event)`) gives a short label such as `ctrl-c`,
  `space`, `f(5)` or `esc`.
- `mealflow.help_msg` provides `HelpEntry` and `HelpMsg`, the hints shown in a help bar.
  - A `HelpEntry` key may be a `KeyEvent`, a `KeyCode` or a single character.
    `HelpEntry.plain("hjkl", ...)` shows the key text exactly as given.
  - `str(msg)` joins the entries as `Show help: ? | Back: esc`.
- `mealflow.tui` provides `Tui`, a full-screen terminal session built on `blessed`.
  - `enter()` switches to raw mode and the alternate screen and hides the cursor.
    `exit()` restores the terminal. Use it as a context manager so the terminal is
    always restored.
  - `suspend()` exits and stops the process as Ctrl-Z would. `resume()` enters again.
  - `Tui.events()` yields `Event` values while the session is active. It yields `INIT`
    first, then `TICK` at the tick rate (default 4 per second), `RENDER` at the frame
    rate (default 60 per second), `KEY`, `RESIZE`, and `ERROR` if reading fails.
  - `translate_keystroke` maps a `blessed` keystroke to a `KeyEvent`.
- `mealflow.analysis` provides the `Analysis` page state.
  - It takes any objects with `time`, `amount` and `merchant` attributes, plus an
    optional callback that receives `AnalysisAction` values.
  - `handle_key` turns keys into actions:
    - `h`/left and `l`/right switch tabs, wrapping around;
    - `j`/down and `k`/up scroll;
    - Esc sends `CLOSE`.
  - `update` applies an action.
  - `TimePeriodData` counts transactions by time of day: breakfast 05:00–10:30,
    lunch 10:30–13:30, dinner 16:30–19:30, and other.
  - `MerchantData` totals the amounts per merchant, smallest total first, and keeps a
    scroll offset.
- `mealflow.help_popup` provides the `HelpPopup` list state.
  - `HelpPopup.create` returns `None` for an empty message.
  - `j`, `k`, `g` and `G` move the selection down, up, to the top and to the bottom.
    Esc sends `CLOSE`.
  - `popup_width` gives the box width for a screen width.
  - `self_help_message()` lists the pop-up's own keys.
- `mealflow.tables` provides helpers for a transactions table:
  - `newest_first` sorts by time, latest first.
  - `column_widths` measures the display widths of the amount, time and merchant
    columns, CJK aware, with the header included.
  - `next_row_index` moves the selected row with wrap-around.
  - `transactions_help_message` gives the page's key hints.

## What it does not do

mealflow does not fetch transactions from any service and does not store them; you
supply the transaction objects. It draws nothing on screen: the page classes hold state
and react to keys and actions, and `Tui` only manages the terminal mode and the event
stream. The package has no command-line program. `Tui.events()` does not report mouse,
paste or focus events.

## Installing

```
pip install mealflow
```

To run the test suite:

```
pip install "mealflow[test]"
pytest
```

## Example

```python
from mealflow.help_msg import HelpEntry, HelpMsg
from mealflow.keys import KeyCode, KeyEvent

help_bar = HelpMsg()
help_bar.push(HelpEntry(KeyEvent.from_char("?"), "Show help"))
help_bar.push(HelpEntry(KeyEvent.from_code(KeyCode.ESC), "Back"))
print(help_bar)  # Show help: ? | Back: esc
```

```python
from mealflow.tables import next_row_index

next_row_index(0, -1, 50)  # 49: moving up from the first row wraps to the last
```