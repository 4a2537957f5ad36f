"""Telegram Bot API SDK — Pydantic models, async service client, and exceptions.

Usage::

    from sdk import BotClient, BotClientError
    from sdk.models import Message, Update
"""

from sdk.client import DEFAULT_API_BASE_URL, BotClient
from sdk.exceptions import APIException, BotClientError, MalformedResponseError, TransportError

__all__ = [
    "DEFAULT_API_BASE_URL",
    "BotClient",
    "BotClientError",
    "APIException",
    "TransportError",
    "MalformedResponseError",
]
