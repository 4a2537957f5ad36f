"""Start a feedback session: validate settings, post the prompt, spawn the loop.

The polling loop runs as its own :func:`asyncio.create_task`; the caller gets
a :class:`RunningSession` handle back immediately and decides when to stop it.
"""

from __future__ import annotations

import asyncio
import dataclasses
from typing import Sequence

from config import TelegramSettings
from core.feedback import OPERATION_PROMPT
from core.keyboard import render_action_keyboard, render_options_keyboard
from core.logger import RelayLogger
from relay.events import EventSink
from relay.loop import FeedbackSession
from sdk.client import BotClient

logger = RelayLogger.get_logger()

# Gap between the options message and the operation message so they arrive in order.
MESSAGE_GAP_SECONDS: float = 0.5


@dataclasses.dataclass(slots=True)
class RunningSession:
    """Handle to a spawned feedback session."""

    session: FeedbackSession
    task: asyncio.Task
    stop_event: asyncio.Event

    async def stop(self) -> None:
        """Ask the loop to finish and wait until it has."""
        self.stop_event.set()
        await self.task


def _log_task_exit(task: asyncio.Task) -> None:
    if task.cancelled():
        logger.info("Feedback session task cancelled")
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Feedback session task crashed", exc_info=exc)


async def start_feedback_session(
    settings: TelegramSettings,
    message: str,
    predefined_options: Sequence[str],
    sink: EventSink,
    *,
    is_markdown: bool = False,
    client: BotClient | None = None,
) -> RunningSession | None:
    """Post the feedback request to the chat and start listening for answers.

    Returns ``None`` without contacting the API when the relay is disabled.

    Raises:
        ConfigurationError: If the bot token or chat id is missing.
        BotClientError: If either prompt message cannot be sent.
    """
    if not settings.enabled:
        logger.info("Telegram relay disabled — no session started")
        return None
    settings.require_complete()

    if client is None:
        client = BotClient(settings.bot_token, settings.custom_api_url)
    session = FeedbackSession(client, settings.chat_id, predefined_options, sink)
    options_markup = render_options_keyboard(predefined_options, ()) if predefined_options else None

    sent = await client.send_message(
        settings.chat_id,
        message,
        parse_mode="Markdown" if is_markdown else None,
        reply_markup=options_markup,
    )
    if options_markup is not None:
        session.state.set_keyboard_owner(sent.message_id)

    await asyncio.sleep(MESSAGE_GAP_SECONDS)
    await client.send_message(
        settings.chat_id,
        OPERATION_PROMPT,
        reply_markup=render_action_keyboard(settings.continue_reply_enabled),
    )

    stop_event = asyncio.Event()
    task = asyncio.create_task(session.run(stop_event), name="feedback-session")
    task.add_done_callback(_log_task_exit)
    logger.info(
        "Feedback session started",
        extra={"chat_id": settings.chat_id, "options": list(predefined_options), "options_message_id": sent.message_id},
    )
    return RunningSession(session=session, task=task, stop_event=stop_event)
