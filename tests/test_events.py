"""
Tests for the streaming value types.
"""

import pytest

from smooth_sse.streaming.events import StructuredEvent


class TestStructuredEvent:
    """Test the dispatched event type."""

    def test_defaults(self):
        event = StructuredEvent()

        assert event.type == "message"
        assert event.data == ""
        assert event.last_event_id == ""

    def test_to_dict_uses_wire_names(self):
        event = StructuredEvent(type="update", data='{"token": "a"}', last_event_id="7")

        assert event.to_dict() == {
            "type": "update",
            "data": '{"token": "a"}',
            "lastEventId": "7",
        }

    def test_json_parses_data(self):
        event = StructuredEvent(data='{"choices": [{"text": "hi"}]}')

        assert event.json() == {"choices": [{"text": "hi"}]}

    def test_json_rejects_non_json(self):
        with pytest.raises(ValueError):
            StructuredEvent(data="[DONE]").json()

    def test_frozen(self):
        event = StructuredEvent(data="x")

        with pytest.raises(AttributeError):
            event.data = "y"
