"""
Frame buffer for the SSE decoder.

Text arrives in chunks that do not line up with frame boundaries. The
buffer accumulates it and hands out complete frames, keeping whatever
follows the last frame delimiter for the next read.
"""

import re
from typing import List


# Blank line between frames, in any of the three newline conventions.
FRAME_DELIMITER = re.compile(r"\r\n\r\n|\r\r|\n\n")


class StreamBuffer:
    """Accumulates decoded text and extracts complete SSE frames."""

    def __init__(self):
        self._pending = ""

        # Stats
        self._total_chars = 0
        self._total_frames = 0

    @property
    def pending(self) -> str:
        """Text seen after the last complete frame delimiter."""
        return self._pending

    @property
    def size(self) -> int:
        """Number of characters waiting for a frame delimiter."""
        return len(self._pending)

    def append(self, text: str) -> None:
        """Add a chunk of text to the buffer."""
        self._pending += text
        self._total_chars += len(text)

    def drain_frames(self) -> List[str]:
        """
        Remove and return every complete frame in the buffer.

        Returns:
            Complete frames in arrival order; the incomplete tail stays buffered
        """
        parts = FRAME_DELIMITER.split(self._pending)
        self._pending = parts.pop()
        self._total_frames += len(parts)
        return parts

    def clear(self) -> str:
        """
        Empty the buffer.

        Returns:
            The text that was still pending
        """
        pending, self._pending = self._pending, ""
        return pending

    def get_stats(self) -> dict:
        """Get buffer statistics."""
        return {
            "pending_chars": self.size,
            "total_chars": self._total_chars,
            "total_frames": self._total_frames,
        }


__all__ = ['StreamBuffer', 'FRAME_DELIMITER']
