"""
Event source streams.

This module assembles the streaming stages into one async iterable:

    bytes -> text -> SSEDecoder -> [SmoothingTransformer] -> StructuredEvent

Each stage pulls from the one before it only after handing its current
output downstream, so a slow consumer holds back the source. Closing the
stream closes the source.
"""

import asyncio
import codecs
from contextlib import aclosing
from typing import AsyncIterable, AsyncIterator, Optional, Union

from .decoder import SSEDecoder
from .events import StructuredEvent
from .pacing import DelayPolicy
from .smoother import SmoothingTransformer, Sleep
from ..utils.config import SmoothSSEConfig, StreamingConfig
from ..utils.errors import StreamError, ErrorContext
from ..utils.logging import get_logger

logger = get_logger("smooth-sse.stream")

Chunk = Union[bytes, bytearray, memoryview, str]


async def decode_text(
    chunks: AsyncIterable[Chunk],
    encoding: str = "utf-8"
) -> AsyncIterator[str]:
    """
    Decode a byte stream into text.

    Multi-byte characters split across chunks are reassembled, a leading
    UTF-8 byte order mark is dropped and invalid bytes are replaced.
    Text chunks pass through unchanged.

    Args:
        chunks: Async iterable of bytes or str chunks
        encoding: Text encoding of byte chunks

    Yields:
        Text chunks

    Raises:
        StreamError: If a chunk is neither bytes nor str
    """
    if codecs.lookup(encoding).name == "utf-8":
        encoding = "utf-8-sig"
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")

    async for chunk in chunks:
        if isinstance(chunk, str):
            text = chunk
        elif isinstance(chunk, (bytes, bytearray, memoryview)):
            text = decoder.decode(bytes(chunk))
        else:
            raise StreamError(
                f"Cannot decode chunk of type {type(chunk).__name__}",
                context=ErrorContext(component="stream", operation="decode_text"),
            )

        if text:
            yield text

    tail = decoder.decode(b"", final=True)
    if tail:
        yield tail


class EventSourceStream:
    """Async iterable of the events in one SSE response body.

    Usage::

        async with EventSourceStream(response.content.iter_any()) as events:
            async for event in events:
                render(event.data)
    """

    def __init__(
        self,
        source: AsyncIterable[Chunk],
        config: Optional[SmoothSSEConfig] = None,
    ):
        """
        Initialize stream.

        Args:
            source: Async iterable of bytes or text chunks
            config: Configuration (defaults if None)
        """
        self.source = source
        self.config = config or SmoothSSEConfig()
        self.decoder = SSEDecoder()
        self._iterator: Optional[AsyncIterator[StructuredEvent]] = None
        self._source_closed = False
        self._pulling = False

    @property
    def streaming(self) -> StreamingConfig:
        return self.config.streaming

    def __aiter__(self) -> "EventSourceStream":
        if self._iterator is not None:
            raise StreamError(
                "Event stream can only be iterated once",
                context=ErrorContext(component="stream", operation="iterate"),
            )
        self._iterator = self._run()
        return self

    async def __anext__(self) -> StructuredEvent:
        if self._iterator is None:
            raise StopAsyncIteration
        self._pulling = True
        try:
            return await self._iterator.__anext__()
        finally:
            self._pulling = False

    async def __aenter__(self) -> "EventSourceStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def _events(self, text: AsyncIterable[str]) -> AsyncIterator[StructuredEvent]:
        async with aclosing(self.decoder.decode(text)) as events:
            async for event in events:
                yield event

    async def _run(self) -> AsyncIterator[StructuredEvent]:
        logger.debug("stream_started", smooth=isinstance(self, SmoothEventSourceStream))
        try:
            async with aclosing(decode_text(self.source, self.streaming.encoding)) as text:
                async with aclosing(self._events(text)) as events:
                    async for event in events:
                        yield event
        finally:
            await self._close_source()
            logger.debug("stream_finished", **self.get_stats())

    async def _close_source(self) -> None:
        if self._source_closed:
            return
        self._source_closed = True

        aclose = getattr(self.source, "aclose", None)
        if aclose is not None:
            await aclose()

    async def aclose(self) -> None:
        """Stop the stream, abandoning any pending delay and closing the source.

        Call this from the task that iterates the stream, between events or
        through ``async with``. To stop a stream from another task, cancel the
        iterating task instead; the cancellation closes the source.

        Raises:
            StreamError: If another task is waiting on the next event
        """
        if self._pulling:
            raise StreamError(
                "Cannot close an event stream while another task is reading it; "
                "cancel the reading task instead",
                context=ErrorContext(component="stream", operation="aclose"),
            )
        if self._iterator is not None:
            await self._iterator.aclose()
        await self._close_source()
        self.decoder.close()

    def get_stats(self) -> dict:
        """Get stream statistics."""
        return {"decoder": self.decoder.get_stats()}


class SmoothEventSourceStream(EventSourceStream):
    """Event stream that re-paces recognized payloads one character at a time."""

    def __init__(
        self,
        source: AsyncIterable[Chunk],
        config: Optional[SmoothSSEConfig] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize stream.

        Args:
            source: Async iterable of bytes or text chunks
            config: Configuration (defaults if None)
            sleep: Awaitable delay taking seconds
        """
        super().__init__(source, config)
        self.smoother = SmoothingTransformer(
            policy=DelayPolicy.from_config(self.streaming.pacing),
            sleep=sleep,
        )

    async def _events(self, text: AsyncIterable[str]) -> AsyncIterator[StructuredEvent]:
        async with aclosing(self.decoder.decode(text)) as decoded:
            async with aclosing(self.smoother.smooth(decoded)) as events:
                async for event in events:
                    yield event

    def get_stats(self) -> dict:
        stats = super().get_stats()
        stats["smoother"] = self.smoother.get_stats()
        return stats


def get_event_source_stream(
    source: AsyncIterable[Chunk],
    config: Optional[SmoothSSEConfig] = None,
    smooth: Optional[bool] = None,
    sleep: Sleep = asyncio.sleep,
) -> EventSourceStream:
    """
    Create the event stream for a response body.

    Args:
        source: Async iterable of bytes or text chunks
        config: Configuration (defaults if None)
        smooth: Force smoothing on or off; None follows
            ``config.streaming.smooth_streaming``
        sleep: Awaitable delay taking seconds, used when smoothing

    Returns:
        A plain or smoothing event stream
    """
    config = config or SmoothSSEConfig()
    if smooth is None:
        smooth = config.streaming.smooth_streaming

    if smooth:
        return SmoothEventSourceStream(source, config, sleep=sleep)
    return EventSourceStream(source, config)


__all__ = [
    'decode_text',
    'EventSourceStream',
    'SmoothEventSourceStream',
    'get_event_source_stream',
]
