"""Tests for the Bot API Pydantic models."""

import sys
import os

import pytest
from pydantic import ValidationError

# Ensure the project root is importable.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from sdk.models import CallbackQuery, Chat, InlineKeyboardMarkup, Message, Update, User


# ── Message ──────────────────────────────────────────────────────────────────


class TestMessageModel:
    """Validate the Message schema."""

    def test_from_alias(self) -> None:
        msg = Message.model_validate({
            "message_id": 1,
            "date": 0,
            "chat": {"id": 42, "type": "private"},
            "from": {"id": 7, "is_bot": False, "first_name": "Ada"},
            "text": "hello",
        })
        assert msg.from_field is not None
        assert msg.from_field.first_name == "Ada"
        assert msg.text == "hello"

    def test_populate_by_name(self) -> None:
        msg = Message(
            message_id=1,
            date=0,
            chat=Chat(id=42, type="private"),
            from_field=User(id=7, is_bot=False, first_name="Ada"),
        )
        dumped = msg.model_dump(by_alias=True, exclude_none=True)
        assert dumped["from"]["id"] == 7

    def test_reply_markup_parsed(self) -> None:
        msg = Message.model_validate({
            "message_id": 3,
            "date": 0,
            "chat": {"id": 42, "type": "private"},
            "reply_markup": {"inline_keyboard": [[{"text": "☐ A", "callback_data": "toggle:A"}]]},
        })
        assert isinstance(msg.reply_markup, InlineKeyboardMarkup)
        assert msg.reply_markup.inline_keyboard[0][0].callback_data == "toggle:A"

    def test_unknown_fields_ignored(self) -> None:
        msg = Message.model_validate({
            "message_id": 1,
            "date": 0,
            "chat": {"id": 42, "type": "private", "is_forum": False},
            "sticker": {"file_id": "x"},
        })
        assert msg.message_id == 1

    def test_missing_chat_raises(self) -> None:
        with pytest.raises(ValidationError):
            Message.model_validate({"message_id": 1, "date": 0})


# ── Update / CallbackQuery ───────────────────────────────────────────────────


class TestUpdateModel:
    """Validate the Update and CallbackQuery schemas."""

    def test_callback_update(self) -> None:
        update = Update.model_validate({
            "update_id": 10,
            "callback_query": {
                "id": "cb1",
                "from": {"id": 7, "is_bot": False, "first_name": "Ada"},
                "chat_instance": "ci",
                "message": {"message_id": 5, "date": 0, "chat": {"id": 42, "type": "private"}},
                "data": "toggle:Yes",
            },
        })
        assert isinstance(update.callback_query, CallbackQuery)
        assert update.callback_query.data == "toggle:Yes"
        assert update.callback_query.message.message_id == 5
        assert update.message is None

    def test_bare_update(self) -> None:
        update = Update(update_id=3)
        assert update.message is None
        assert update.callback_query is None
