"""Telegram relay layer — update routing, the polling session, and its start-up.

This package may import from ``core/``, ``sdk/`` and ``config`` only.
"""

from relay.connection import check_connection, detect_chat_id
from relay.events import EventSink, JsonLinesSink, LoggingSink, RelayEvent
from relay.loop import FeedbackSession
from relay.router import route_update
from relay.starter import RunningSession, start_feedback_session

__all__ = [
    # Session
    "FeedbackSession",
    "RunningSession",
    "start_feedback_session",
    "route_update",
    # Events
    "EventSink",
    "JsonLinesSink",
    "LoggingSink",
    "RelayEvent",
    # Setup helpers
    "detect_chat_id",
    "check_connection",
]
