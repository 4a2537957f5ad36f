"""Tests for event payloads and sinks."""

import io
import json
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from relay.events import (
    ChatIdDetectedEvent,
    ContinuePressedEvent,
    EventSink,
    JsonLinesSink,
    LoggingSink,
    OptionToggledEvent,
)


class TestPayloads:
    def test_payload_carries_name_and_fields(self) -> None:
        payload = OptionToggledEvent(option="Yes", selected=True).to_payload()
        assert payload == {"event": "option_toggled", "option": "Yes", "selected": True}

    def test_fieldless_event(self) -> None:
        assert ContinuePressedEvent().to_payload() == {"event": "continue_pressed"}


class TestSinks:
    """Validate the bundled sinks."""

    def test_json_lines(self) -> None:
        stream = io.StringIO()
        sink = JsonLinesSink(stream)

        sink.notify(OptionToggledEvent(option="Ja ✅", selected=False))
        sink.notify(ChatIdDetectedEvent(chat_id="42", chat_title="Private chat", username="ada", message_text="hi"))

        lines = stream.getvalue().splitlines()
        assert len(lines) == 2
        assert json.loads(lines[0])["option"] == "Ja ✅"
        assert json.loads(lines[1])["event"] == "chat_id_detected"

    def test_sinks_satisfy_protocol(self) -> None:
        assert isinstance(JsonLinesSink(io.StringIO()), EventSink)
        assert isinstance(LoggingSink(), EventSink)

    def test_logging_sink_does_not_raise(self) -> None:
        LoggingSink().notify(ContinuePressedEvent())
