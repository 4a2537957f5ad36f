"""Classify incoming updates into the actions a feedback session reacts to.

Routing is pure: it reads an :class:`~sdk.models.Update` and returns results,
leaving every state change and API call to :mod:`relay.loop`.  Inline-button
presses and their typed-command equivalents map to the same results, so the
session handles them identically.
"""

from __future__ import annotations

import dataclasses
from typing import Union

from core.keyboard import (
    CONTINUE_ACTION,
    CONTINUE_LABEL,
    ENHANCE_ACTION,
    SEND_ACTION,
    SEND_LABEL,
    TOGGLE_PREFIX,
    contains_toggle_buttons,
)
from sdk.models import CallbackQuery, Chat, Message, Update

SEND_COMMANDS: frozenset[str] = frozenset({"/send", "send", SEND_LABEL.lower()})
CONTINUE_COMMANDS: frozenset[str] = frozenset({"/continue", "continue", CONTINUE_LABEL.lower()})


# ── Routed results ───────────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True, slots=True)
class OptionToggled:
    label: str


@dataclasses.dataclass(frozen=True, slots=True)
class EnhancePressed:
    pass


@dataclasses.dataclass(frozen=True, slots=True)
class ContinuePressed:
    pass


@dataclasses.dataclass(frozen=True, slots=True)
class SendPressed:
    pass


@dataclasses.dataclass(frozen=True, slots=True)
class TextUpdated:
    text: str


@dataclasses.dataclass(frozen=True, slots=True)
class KeyboardOwnerMessage:
    message_id: int


@dataclasses.dataclass(frozen=True, slots=True)
class Ignorable:
    reason: str = ""


RouteResult = Union[
    OptionToggled,
    EnhancePressed,
    ContinuePressed,
    SendPressed,
    TextUpdated,
    KeyboardOwnerMessage,
    Ignorable,
]


# ── Helpers ──────────────────────────────────────────────────────────────────


def _is_session_chat(chat: Chat, chat_id: str) -> bool:
    """Match a chat against the configured id, numeric or ``@username``."""
    if str(chat.id) == chat_id:
        return True
    return chat.username is not None and f"@{chat.username}".lower() == chat_id.lower()


def _normalise_command(text: str) -> str:
    """Lower-case *text*; for slash commands keep only ``/cmd`` without ``@bot``."""
    value = text.strip().lower()
    if value.startswith("/"):
        return value.split()[0].split("@")[0]
    return value


# ── Routing ──────────────────────────────────────────────────────────────────


def route_callback(callback_query: CallbackQuery, *, chat_id: str, has_options: bool) -> list[RouteResult]:
    """Route an inline-button press.

    A toggle press reveals which message carries the option keyboard, so in
    options mode a :class:`KeyboardOwnerMessage` precedes the toggle.  Presses
    on the action row never claim ownership.
    """
    message = callback_query.message
    if message is None or not _is_session_chat(message.chat, chat_id):
        return [Ignorable("callback from another chat")]

    data = callback_query.data or ""
    results: list[RouteResult] = []
    if data.startswith(TOGGLE_PREFIX):
        if has_options:
            results.append(KeyboardOwnerMessage(message.message_id))
            results.append(OptionToggled(data[len(TOGGLE_PREFIX):]))
        else:
            results.append(Ignorable("toggle without options"))
    elif data == ENHANCE_ACTION:
        results.append(EnhancePressed())
    elif data == CONTINUE_ACTION:
        results.append(ContinuePressed())
    elif data == SEND_ACTION:
        results.append(SendPressed())
    else:
        results.append(Ignorable(f"unknown callback data {data!r}"))
    return results


def route_message(message: Message, *, chat_id: str, has_options: bool) -> list[RouteResult]:
    """Route a plain chat message: keyboard ownership first, then its text."""
    if not _is_session_chat(message.chat, chat_id):
        return [Ignorable("message from another chat")]

    results: list[RouteResult] = []
    if has_options and message.reply_markup is not None:
        if contains_toggle_buttons(message.reply_markup.model_dump()):
            results.append(KeyboardOwnerMessage(message.message_id))

    text = message.text or ""
    if not text.strip():
        if not results:
            results.append(Ignorable("empty message"))
        return results

    command = _normalise_command(text)
    if command in SEND_COMMANDS:
        results.append(SendPressed())
    elif command in CONTINUE_COMMANDS:
        results.append(ContinuePressed())
    else:
        results.append(TextUpdated(text))
    return results


def route_update(update: Update, *, chat_id: str, has_options: bool) -> list[RouteResult]:
    """Classify *update* into one or more results, in the order they apply."""
    if update.callback_query is not None:
        return route_callback(update.callback_query, chat_id=chat_id, has_options=has_options)
    if update.message is not None:
        return route_message(update.message, chat_id=chat_id, has_options=has_options)
    return [Ignorable("unsupported update kind")]
