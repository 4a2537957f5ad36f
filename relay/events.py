"""Typed events emitted to the local application, and the sinks that receive them.

Every event serialises to ``{"event": <name>, ...fields}``; consumers
subscribe by name.
"""

from __future__ import annotations

import json
import sys
from typing import ClassVar, Protocol, TextIO, runtime_checkable

from pydantic import BaseModel

from core.logger import RelayLogger

logger = RelayLogger.get_logger()


class RelayEvent(BaseModel):
    """Base class of every emitted event."""

    name: ClassVar[str] = "relay_event"

    model_config = {"frozen": True}

    def to_payload(self) -> dict:
        return {"event": self.name, **self.model_dump()}


# ── Session events ───────────────────────────────────────────────────────────


class OptionToggledEvent(RelayEvent):
    name: ClassVar[str] = "option_toggled"

    option: str
    selected: bool


class EnhancePressedEvent(RelayEvent):
    """Carries the fully built enhance prompt, not the raw user input."""

    name: ClassVar[str] = "enhance_pressed"

    text: str


class ContinuePressedEvent(RelayEvent):
    name: ClassVar[str] = "continue_pressed"


class SendPressedEvent(RelayEvent):
    name: ClassVar[str] = "send_pressed"


class TextUpdatedEvent(RelayEvent):
    name: ClassVar[str] = "text_updated"

    text: str


# ── Chat-id detection events ─────────────────────────────────────────────────


class ChatIdDetectionStartedEvent(RelayEvent):
    name: ClassVar[str] = "chat_id_detection_started"


class ChatIdDetectedEvent(RelayEvent):
    name: ClassVar[str] = "chat_id_detected"

    chat_id: str
    chat_title: str
    username: str
    message_text: str


class ChatIdDetectionTimeoutEvent(RelayEvent):
    name: ClassVar[str] = "chat_id_detection_timeout"


# ── Sinks ────────────────────────────────────────────────────────────────────


@runtime_checkable
class EventSink(Protocol):
    """Anything that accepts emitted events."""

    def notify(self, event: RelayEvent) -> None: ...  # noqa: E704


class JsonLinesSink:
    """Write each event as one JSON line, to stdout by default.

    This is how a host process that spawned the relay reads its events.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def notify(self, event: RelayEvent) -> None:
        self._stream.write(json.dumps(event.to_payload(), ensure_ascii=False) + "\n")
        self._stream.flush()


class LoggingSink:
    """Record events in the application log only."""

    def notify(self, event: RelayEvent) -> None:
        logger.info("Event emitted", extra={"event": event.name, "payload": event.model_dump()})
