"""Setup helpers: verify bot credentials and discover the chat id."""

from __future__ import annotations

import asyncio

from config import TelegramSettings
from core.feedback import TEST_MESSAGE
from core.logger import RelayLogger
from relay.events import (
    ChatIdDetectedEvent,
    ChatIdDetectionStartedEvent,
    ChatIdDetectionTimeoutEvent,
    EventSink,
)
from sdk.client import BotClient
from sdk.exceptions import BotClientError
from sdk.models import Message

logger = RelayLogger.get_logger()

DETECTION_MAX_POLLS: int = 30
DETECTION_INTERVAL_SECONDS: float = 1.0


async def check_connection(settings: TelegramSettings, client: BotClient | None = None) -> str:
    """Check the token with ``getMe`` and send a test message to the chat.

    Raises:
        ConfigurationError: If the bot token or chat id is missing.
        BotClientError: If either call fails.
    """
    settings.require_complete()
    if client is None:
        client = BotClient(settings.bot_token, settings.custom_api_url)

    me = await client.get_me()
    await client.send_message(settings.chat_id, TEST_MESSAGE)
    bot_name = f"@{me.username}" if me.username else me.first_name
    logger.info("Connection test succeeded", extra={"bot": bot_name, "chat_id": settings.chat_id})
    return f"Connected as {bot_name}; test message sent to chat {settings.chat_id}"


def _detected_event(message: Message) -> ChatIdDetectedEvent:
    sender = message.from_field
    return ChatIdDetectedEvent(
        chat_id=str(message.chat.id),
        chat_title=message.chat.title or "Private chat",
        username=(sender.username if sender and sender.username else "unknown user"),
        message_text=message.text or "",
    )


async def detect_chat_id(
    client: BotClient,
    sink: EventSink,
    max_polls: int = DETECTION_MAX_POLLS,
    interval: float = DETECTION_INTERVAL_SECONDS,
) -> ChatIdDetectedEvent | None:
    """Wait for someone to message the bot and report that chat.

    Polls up to *max_polls* times, *interval* seconds apart.  Emits
    ``chat_id_detection_started`` first, then either ``chat_id_detected`` for
    the first message seen or ``chat_id_detection_timeout``.
    """
    sink.notify(ChatIdDetectionStartedEvent())

    for _ in range(max_polls):
        try:
            updates = await client.get_updates(timeout=0)
        except BotClientError as exc:
            logger.warning("getUpdates failed during chat id detection", extra={"api_endpoint": "getUpdates", "error": str(exc)})
        else:
            for update in updates:
                if update.message is None:
                    continue
                event = _detected_event(update.message)
                logger.info("Chat id detected", extra={"chat_id": event.chat_id, "chat_title": event.chat_title})
                sink.notify(event)
                return event
        await asyncio.sleep(interval)

    logger.warning("Chat id detection timed out", extra={"polls": max_polls})
    sink.notify(ChatIdDetectionTimeoutEvent())
    return None
