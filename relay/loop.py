"""Polling loop that drives one remote feedback session.

:class:`FeedbackSession` long-polls ``getUpdates``, routes each update with
:mod:`relay.router`, applies the result to its :class:`~core.session.SessionState`
and performs the side effects: keyboard edits, feedback messages and event
emission.  Transport failures back off and retry with the offset untouched;
failures of individual side effects are logged and never stop the loop.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import Any, Awaitable, Iterable

from core.feedback import build_enhance_ack, build_enhance_prompt, build_feedback_message
from core.keyboard import render_options_keyboard
from core.logger import RelayLogger
from core.session import SessionState
from relay.events import (
    ContinuePressedEvent,
    EnhancePressedEvent,
    EventSink,
    OptionToggledEvent,
    RelayEvent,
    SendPressedEvent,
    TextUpdatedEvent,
)
from relay.router import (
    ContinuePressed,
    EnhancePressed,
    Ignorable,
    KeyboardOwnerMessage,
    OptionToggled,
    RouteResult,
    SendPressed,
    TextUpdated,
    route_update,
)
from sdk.client import BotClient
from sdk.exceptions import BotClientError
from sdk.models import Update

logger = RelayLogger.get_logger()


class FeedbackSession:
    """One feedback request and the loop that serves it.

    Args:
        client: Bot API client; only ``get_updates``, ``send_message``,
            ``edit_message_reply_markup`` and ``answer_callback_query`` are used.
        chat_id: The chat the session talks to.  Updates from other chats
            are ignored.
        predefined_options: Option labels offered to the remote user.  Empty
            means no-options mode.
        sink: Receiver of emitted events.
    """

    PRIME_LIMIT: int = 10
    POLL_TIMEOUT: int = 10
    BACKOFF_SECONDS: float = 5.0
    IDLE_SECONDS: float = 1.0
    ALLOWED_UPDATES: tuple[str, ...] = ("message", "callback_query")

    def __init__(
        self,
        client: BotClient,
        chat_id: str,
        predefined_options: Iterable[str],
        sink: EventSink,
        *,
        poll_timeout: int = POLL_TIMEOUT,
        backoff_seconds: float = BACKOFF_SECONDS,
        idle_seconds: float = IDLE_SECONDS,
    ) -> None:
        self._client = client
        self._chat_id = chat_id
        self._sink = sink
        self._poll_timeout = poll_timeout
        self._backoff_seconds = backoff_seconds
        self._idle_seconds = idle_seconds
        self.state = SessionState.for_options(predefined_options)

    # ------------------------------------------------------------------
    #  Loop
    # ------------------------------------------------------------------

    async def run(self, stop: asyncio.Event | None = None) -> None:
        """Serve the session until *stop* is set or the task is cancelled.

        Send and Continue do not end the session; the remote user may keep
        interacting until the caller stops it.
        """
        if stop is None:
            stop = asyncio.Event()

        await self.prime_offset()
        logger.info(
            "Feedback session polling",
            extra={"chat_id": self._chat_id, "offset": self.state.offset, "has_options": self.state.has_options},
        )

        while not stop.is_set():
            try:
                await self.poll_once()
            except BotClientError as exc:
                logger.warning(
                    "getUpdates failed, backing off",
                    extra={"api_endpoint": "getUpdates", "offset": self.state.offset, "retry_in": self._backoff_seconds, "error": str(exc)},
                )
                await self._pause(self._backoff_seconds, stop)
                continue
            await self._pause(self._idle_seconds, stop)

        logger.info("Feedback session stopped", extra={"chat_id": self._chat_id, "offset": self.state.offset})

    async def prime_offset(self) -> int:
        """Skip the backlog: move the offset past the newest pending update.

        A negative offset asks the API for the tail of its queue, so one small
        request is enough.  On failure the offset stays where it is.
        """
        try:
            updates = await self._client.get_updates(offset=-1, limit=self.PRIME_LIMIT, timeout=0)
        except BotClientError as exc:
            logger.warning("Could not prime update offset", extra={"api_endpoint": "getUpdates", "error": str(exc)})
            return self.state.offset
        if updates:
            self.state.advance_offset(max(update.update_id for update in updates))
            logger.debug("Update backlog skipped", extra={"offset": self.state.offset, "skipped": len(updates)})
        return self.state.offset

    async def poll_once(self) -> int:
        """Fetch and process one batch.  Returns the number of updates handled.

        Raises:
            BotClientError: If ``getUpdates`` fails; the offset is unchanged.
        """
        updates = await self._client.get_updates(
            offset=self.state.offset,
            timeout=self._poll_timeout,
            allowed_updates=list(self.ALLOWED_UPDATES),
        )
        if updates:
            logger.debug("Received updates", extra={"count": len(updates), "offset": self.state.offset})
        for update in updates:
            self.state.advance_offset(update.update_id)
            await self.process_update(update)
        return len(updates)

    async def _pause(self, seconds: float, stop: asyncio.Event) -> None:
        """Sleep for *seconds*, waking early when *stop* is set."""
        if seconds <= 0:
            return
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(stop.wait(), timeout=seconds)

    # ------------------------------------------------------------------
    #  Routing and side effects
    # ------------------------------------------------------------------

    async def process_update(self, update: Update) -> None:
        """Route one update and apply every result it produced."""
        if update.callback_query is not None:
            await self._best_effort(
                "answerCallbackQuery",
                self._client.answer_callback_query(update.callback_query.id),
            )

        results = route_update(update, chat_id=self._chat_id, has_options=self.state.has_options)
        for result in results:
            await self.apply(result, update_id=update.update_id)

    async def apply(self, result: RouteResult, update_id: int | None = None) -> None:
        """Apply one routed result to the session state and perform its side effects."""
        if isinstance(result, OptionToggled):
            await self._on_option_toggled(result.label)
        elif isinstance(result, EnhancePressed):
            await self._on_enhance()
        elif isinstance(result, ContinuePressed):
            feedback = build_feedback_message([], "", True)
            await self._best_effort("sendMessage", self._client.send_message(self._chat_id, feedback))
            self._emit(ContinuePressedEvent())
        elif isinstance(result, SendPressed):
            feedback = build_feedback_message(self.state.ordered_selection(), self.state.user_input, False)
            await self._best_effort("sendMessage", self._client.send_message(self._chat_id, feedback))
            self._emit(SendPressedEvent())
        elif isinstance(result, TextUpdated):
            self.state.record_user_input(result.text)
            self._emit(TextUpdatedEvent(text=result.text))
        elif isinstance(result, KeyboardOwnerMessage):
            if self.state.set_keyboard_owner(result.message_id):
                logger.info("Option keyboard owner recorded", extra={"message_id": result.message_id})
        elif isinstance(result, Ignorable):
            logger.debug("Update ignored", extra={"update_id": update_id, "reason": result.reason})

    async def _on_option_toggled(self, label: str) -> None:
        if not self.state.is_known_option(label):
            logger.warning("Ignoring toggle of unknown option", extra={"option": label})
            return

        selected = self.state.toggle_option(label)
        self._emit(OptionToggledEvent(option=label, selected=selected))

        owner = self.state.options_message_id
        if owner is None:
            return
        markup = render_options_keyboard(self.state.predefined_options, self.state.selected_options)
        await self._best_effort(
            "editMessageReplyMarkup",
            self._client.edit_message_reply_markup(self._chat_id, owner, markup),
        )

    async def _on_enhance(self) -> None:
        user_input = self.state.user_input
        prompt = build_enhance_prompt(user_input)
        await self._best_effort("sendMessage", self._client.send_message(self._chat_id, build_enhance_ack(user_input)))
        self._emit(EnhancePressedEvent(text=prompt))

    async def _best_effort(self, endpoint: str, call: Awaitable[Any]) -> None:
        """Await an outbound API call; a failure is logged and otherwise ignored."""
        try:
            await call
        except BotClientError as exc:
            logger.warning(
                "Best-effort API call failed",
                extra={"api_endpoint": endpoint, "chat_id": self._chat_id, "error": str(exc)},
            )

    def _emit(self, event: RelayEvent) -> None:
        try:
            self._sink.notify(event)
        except Exception:
            logger.exception("Event sink failed", extra={"event": event.name})
