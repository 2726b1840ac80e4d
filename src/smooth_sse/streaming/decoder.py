"""
Server-Sent Events decoder for smooth-sse.

This module turns arbitrarily chunked text into dispatched events:
- Frames are separated by a blank line (CRLF, CR or LF, mixed freely)
- ``event``, ``data`` and ``id`` fields are honoured, all others ignored
- The last event id carries over from frame to frame
- Malformed input never raises; it just contributes no data
"""

import re
from typing import AsyncIterable, AsyncIterator, List, Optional, Tuple

from .buffer import StreamBuffer
from .events import StructuredEvent
from ..utils.logging import get_logger

logger = get_logger("smooth-sse.decoder")

LINE_DELIMITER = re.compile(r"\r\n|\r|\n")

DEFAULT_EVENT_TYPE = "message"


def parse_line(line: str) -> Optional[Tuple[str, str]]:
    """
    Split one frame line into field name and value.

    Args:
        line: A single line without its terminator

    Returns:
        ``(field, value)``, or None for blank lines and comments
    """
    if not line or line.startswith(":"):
        return None

    field, colon, value = line.partition(":")
    if colon and value.startswith(" "):
        value = value[1:]
    return field, value


class SSEDecoder:
    """Decodes SSE text into ``StructuredEvent`` objects.

    One decoder serves one stream: it owns the frame buffer and the last
    event id, neither of which is shared with other streams.
    """

    def __init__(self):
        self.buffer = StreamBuffer()
        self.last_event_id = ""
        self._closed = False

        # Stats
        self._frames_seen = 0
        self._events_emitted = 0
        self._frames_dropped = 0
        self._ids_rejected = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def feed(self, chunk: str) -> List[StructuredEvent]:
        """
        Add a chunk of text and dispatch every frame it completes.

        Args:
            chunk: Decoded text, split anywhere

        Returns:
            Events for the frames completed by this chunk, in order
        """
        self.buffer.append(chunk)

        events = []
        for frame in self.buffer.drain_frames():
            event = self.parse_frame(frame)
            if event is not None:
                events.append(event)
        return events

    def parse_frame(self, frame: str) -> Optional[StructuredEvent]:
        """
        Interpret one complete frame.

        Args:
            frame: Frame text without the trailing blank line

        Returns:
            The dispatched event, or None if the frame carries no data
        """
        self._frames_seen += 1

        event_type = ""
        data = ""

        for line in LINE_DELIMITER.split(frame):
            parsed = parse_line(line)
            if parsed is None:
                continue

            field, value = parsed
            if field == "event":
                event_type = value
            elif field == "data":
                data += value + "\n"
            elif field == "id":
                if "\0" in value:
                    self._ids_rejected += 1
                    logger.debug("event_id_rejected", reason="contains_nul")
                else:
                    self.last_event_id = value

        if data.endswith("\n"):
            data = data[:-1]

        if not data:
            self._frames_dropped += 1
            logger.debug("frame_dropped", reason="empty_data", frame_length=len(frame))
            return None

        self._events_emitted += 1
        return StructuredEvent(
            type=event_type or DEFAULT_EVENT_TYPE,
            data=data,
            last_event_id=self.last_event_id,
        )

    def close(self) -> None:
        """End the stream, discarding any incomplete trailing frame."""
        if self._closed:
            return
        self._closed = True

        pending = self.buffer.clear()
        if pending:
            logger.debug("incomplete_frame_discarded", pending_chars=len(pending))

    async def decode(self, chunks: AsyncIterable[str]) -> AsyncIterator[StructuredEvent]:
        """
        Decode an async stream of text chunks.

        Args:
            chunks: Async iterable of text chunks

        Yields:
            Events as their frames complete
        """
        try:
            async for chunk in chunks:
                for event in self.feed(chunk):
                    yield event
        finally:
            self.close()

    def get_stats(self) -> dict:
        """Get decoder statistics."""
        return {
            "frames_seen": self._frames_seen,
            "events_emitted": self._events_emitted,
            "frames_dropped": self._frames_dropped,
            "ids_rejected": self._ids_rejected,
            "last_event_id": self.last_event_id,
            "buffer": self.buffer.get_stats(),
        }


__all__ = ['SSEDecoder', 'parse_line', 'LINE_DELIMITER', 'DEFAULT_EVENT_TYPE']
