"""SSE decoding and smoothing stages."""

from .events import StructuredEvent, NormalizedFragment
from .buffer import StreamBuffer
from .decoder import SSEDecoder
from .normalizer import normalize_payload, detect_shape, SHAPES
from .pacing import DelayPolicy, get_delay
from .smoother import SmoothingTransformer
from .stream import (
    decode_text,
    EventSourceStream,
    SmoothEventSourceStream,
    get_event_source_stream,
)

__all__ = [
    "StructuredEvent",
    "NormalizedFragment",
    "StreamBuffer",
    "SSEDecoder",
    "normalize_payload",
    "detect_shape",
    "SHAPES",
    "DelayPolicy",
    "get_delay",
    "SmoothingTransformer",
    "decode_text",
    "EventSourceStream",
    "SmoothEventSourceStream",
    "get_event_source_stream",
]
