"""
SSE and backend payload test fixtures.
"""

import json
import asyncio
from typing import List, Dict, Any, AsyncIterator, Optional, Union


class SSEFixtures:
    """Fixtures for SSE stream and payload testing."""

    @staticmethod
    def create_frame(
        data: Optional[Union[str, Dict[str, Any]]] = None,
        event: Optional[str] = None,
        event_id: Optional[str] = None,
        newline: str = "\n"
    ) -> str:
        """Create a single SSE frame, including its terminating blank line."""
        lines = []

        if event is not None:
            lines.append(f"event: {event}")

        if event_id is not None:
            lines.append(f"id: {event_id}")

        if data is not None:
            if not isinstance(data, str):
                data = json.dumps(data, separators=(",", ":"))
            for line in data.split("\n"):
                lines.append(f"data: {line}")

        return newline.join(lines) + newline + newline

    @staticmethod
    def create_openai_chunk(content: str, index: int = 0, **extra: Any) -> Dict[str, Any]:
        """Create an OpenAI-compatible chat completion chunk."""
        chunk = {
            "id": "chatcmpl-123",
            "object": "chat.completion.chunk",
            "model": "gpt-4o-mini",
            "choices": [
                {"index": index, "delta": {"content": content}, "finish_reason": None}
            ],
        }
        chunk.update(extra)
        return chunk

    @staticmethod
    def create_claude_delta(text: str) -> Dict[str, Any]:
        """Create an Anthropic content_block_delta event payload."""
        return {
            "type": "content_block_delta",
            "index": 0,
            "delta": {"type": "text_delta", "text": text},
        }

    @staticmethod
    def create_makersuite_chunk(*contents: str) -> Dict[str, Any]:
        """Create a MakerSuite-style payload with one candidate per content."""
        return {
            "candidates": [
                {"content": content, "index": i} for i, content in enumerate(contents)
            ],
        }

    @staticmethod
    def create_chat_stream(
        pieces: List[str],
        newline: str = "\n",
        done: bool = True
    ) -> str:
        """Create a full OpenAI-style SSE body for the given text pieces."""
        body = "".join(
            SSEFixtures.create_frame(SSEFixtures.create_openai_chunk(piece), newline=newline)
            for piece in pieces
        )
        if done:
            body += SSEFixtures.create_frame("[DONE]", newline=newline)
        return body

    @staticmethod
    def create_mixed_stream() -> str:
        """Create a body mixing newline conventions, ids, types and comments."""
        return (
            ": keep-alive comment\n\n"
            "event: status\r\nid: 1\r\ndata: starting\r\n\r\n"
            "data: line one\rdata: line two\r\r"
            "retry: 3000\nid: 2\ndata: {\"token\":\"hi\"}\n\n"
            "event: ping\n\n"
            "id: 3\u0000x\ndata: last\n\n"
        )

    @staticmethod
    async def create_async_stream(
        body: Union[str, bytes],
        chunk_size: Optional[int] = None,
        delay: float = 0
    ) -> AsyncIterator[Union[str, bytes]]:
        """Create an async stream delivering ``body`` in chunks."""
        if chunk_size is None:
            yield body
            return

        for i in range(0, len(body), chunk_size):
            yield body[i:i + chunk_size]
            await asyncio.sleep(delay)
