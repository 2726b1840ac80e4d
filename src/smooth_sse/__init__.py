"""
smooth-sse - Server-Sent Events decoding with typing-paced smoothing.

This package turns an HTTP response body into discrete SSE events and can
optionally re-pace streamed LLM text into single-character updates:
- SSE frame decoding over arbitrarily chunked input
- Payload normalization for the common backend response layouts
- Configurable typing-like pacing
"""

__version__ = "0.1.0"

from .streaming import (
    StructuredEvent,
    NormalizedFragment,
    SSEDecoder,
    SmoothingTransformer,
    DelayPolicy,
    get_delay,
    normalize_payload,
    EventSourceStream,
    SmoothEventSourceStream,
    get_event_source_stream,
)
from .utils.config import SmoothSSEConfig, load_config
from .utils.logging import setup_logging, setup_logging_from_config
from .utils.errors import SmoothSSEError, ConfigurationError, StreamError, TransportError

__all__ = [
    'StructuredEvent',
    'NormalizedFragment',
    'SSEDecoder',
    'SmoothingTransformer',
    'DelayPolicy',
    'get_delay',
    'normalize_payload',
    'EventSourceStream',
    'SmoothEventSourceStream',
    'get_event_source_stream',
    'SmoothSSEConfig',
    'load_config',
    'setup_logging',
    'setup_logging_from_config',
    'SmoothSSEError',
    'ConfigurationError',
    'StreamError',
    'TransportError',
]
