"""Pydantic models for the subset of the Telegram Bot API the relay consumes.

Field names follow the Bot API schema.  ``from`` is a Python keyword, so it is
exposed as ``from_field`` with an alias.  Unknown fields are ignored, which
keeps parsing tolerant of newer API versions.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    """This object represents a Telegram user or bot."""

    id: int
    is_bot: bool
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None

    model_config = {"populate_by_name": True}


class Chat(BaseModel):
    """This object represents a chat."""

    id: int
    type: str
    title: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None

    model_config = {"populate_by_name": True}


class InlineKeyboardButton(BaseModel):
    """One button of an inline keyboard."""

    text: str
    url: Optional[str] = None
    callback_data: Optional[str] = None

    model_config = {"populate_by_name": True}


class InlineKeyboardMarkup(BaseModel):
    """An inline keyboard attached to a message."""

    inline_keyboard: List[List["InlineKeyboardButton"]]

    model_config = {"populate_by_name": True}


class Message(BaseModel):
    """This object represents a message."""

    message_id: int
    date: int
    chat: "Chat"
    from_field: Optional["User"] = Field(None, alias="from")
    text: Optional[str] = None
    reply_markup: Optional["InlineKeyboardMarkup"] = None

    model_config = {"populate_by_name": True}


class CallbackQuery(BaseModel):
    """An incoming callback query from a callback button in an inline keyboard."""

    id: str
    from_field: "User" = Field(..., alias="from")
    chat_instance: str
    message: Optional["Message"] = None
    inline_message_id: Optional[str] = None
    data: Optional[str] = None

    model_config = {"populate_by_name": True}


class Update(BaseModel):
    """An incoming update.  Only the kinds a feedback session reacts to are modelled."""

    update_id: int
    message: Optional["Message"] = None
    callback_query: Optional["CallbackQuery"] = None

    model_config = {"populate_by_name": True}


InlineKeyboardMarkup.model_rebuild()
Message.model_rebuild()
CallbackQuery.model_rebuild()
Update.model_rebuild()
