"""Inline-keyboard layouts and the callback-data contract.

Markups are plain dicts in the Bot API ``InlineKeyboardMarkup`` shape so they
can be passed straight to ``sendMessage`` / ``editMessageReplyMarkup``.
"""

from typing import Any, Iterable, Mapping

# ── Callback-data contract ───────────────────────────────────────────────────
TOGGLE_PREFIX = "toggle:"
SEND_ACTION = "send"
CONTINUE_ACTION = "continue"
ENHANCE_ACTION = "enhance"

# ── Button labels ────────────────────────────────────────────────────────────
SELECTED_MARK = "✅"
UNSELECTED_MARK = "☐"
SEND_LABEL = "↗️ Send"
CONTINUE_LABEL = "⏩ Continue"
ENHANCE_LABEL = "✨ Enhance"


def toggle_callback_data(label: str) -> str:
    return f"{TOGGLE_PREFIX}{label}"


def render_options_keyboard(options: Iterable[str], selected: Iterable[str]) -> dict:
    """Build the option keyboard, one option per row.

    Selected options are marked with a check.  The callback data of a button
    depends only on its label, so re-rendering the same inputs always yields
    the same layout.
    """
    chosen = set(selected)
    rows: list[list[dict]] = []
    for option in options:
        mark = SELECTED_MARK if option in chosen else UNSELECTED_MARK
        rows.append([{"text": f"{mark} {option}", "callback_data": toggle_callback_data(option)}])
    return {"inline_keyboard": rows}


def render_action_keyboard(continue_enabled: bool = True) -> dict:
    """Build the single-row Send / Continue / Enhance keyboard."""
    row = [{"text": SEND_LABEL, "callback_data": SEND_ACTION}]
    if continue_enabled:
        row.append({"text": CONTINUE_LABEL, "callback_data": CONTINUE_ACTION})
    row.append({"text": ENHANCE_LABEL, "callback_data": ENHANCE_ACTION})
    return {"inline_keyboard": [row]}


def contains_toggle_buttons(markup: Mapping[str, Any] | None) -> bool:
    """Return ``True`` if any button of *markup* carries toggle callback data."""
    if not markup:
        return False
    for row in markup.get("inline_keyboard") or []:
        for button in row:
            data = button.get("callback_data") or ""
            if data.startswith(TOGGLE_PREFIX):
                return True
    return False
