"""HTTP adapters feeding response bodies into event streams."""

from .http import iter_response_events, is_event_stream

__all__ = ["iter_response_events", "is_event_stream"]
