"""
Smoothing transformer for decoded event streams.

Each event whose data is a recognized backend payload is re-emitted once
per character of its new text, with a typing-like pause before each one.
Anything else passes through untouched.
"""

import asyncio
import json
from contextlib import aclosing
from dataclasses import replace
from typing import AsyncIterable, AsyncIterator, Awaitable, Callable, Optional

from .events import StructuredEvent
from .normalizer import normalize_payload
from .pacing import DelayPolicy, DEFAULT_POLICY
from ..utils.logging import get_logger

logger = get_logger("smooth-sse.smoother")

Sleep = Callable[[float], Awaitable[None]]


class SmoothingTransformer:
    """Re-paces one stream's events into single-character steps.

    The pacing state (the last emitted character) belongs to this instance
    and is cleared whenever an event passes through unsmoothed.
    """

    def __init__(
        self,
        policy: Optional[DelayPolicy] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize transformer.

        Args:
            policy: Delay policy (default pacing if None)
            sleep: Awaitable delay taking seconds
        """
        self.policy = policy or DEFAULT_POLICY
        self._sleep = sleep
        self.last_chunk = ""

        # Stats
        self._events_in = 0
        self._fragments_out = 0
        self._passthroughs = 0

    def _passthrough(self, event: StructuredEvent, reason: str) -> StructuredEvent:
        self.last_chunk = ""
        self._passthroughs += 1
        logger.debug("event_passthrough", reason=reason, event_type=event.type)
        return event

    async def transform(self, event: StructuredEvent) -> AsyncIterator[StructuredEvent]:
        """
        Smooth a single event.

        Args:
            event: Event from the decoder

        Yields:
            One event per character of recognized text, or ``event`` itself
        """
        self._events_in += 1

        try:
            payload = json.loads(event.data)
        except (ValueError, RecursionError):
            yield self._passthrough(event, "not_json")
            return

        if not payload:
            yield self._passthrough(event, "empty_payload")
            return

        emitted = False
        for fragment in normalize_payload(payload):
            await self._sleep(self.policy.delay_for(self.last_chunk) / 1000)
            yield replace(
                event,
                data=json.dumps(fragment.data, separators=(",", ":"), ensure_ascii=False),
            )
            self.last_chunk = fragment.chunk
            self._fragments_out += 1
            emitted = True

        if not emitted:
            yield self._passthrough(event, "unrecognized_shape")

    async def smooth(self, events: AsyncIterable[StructuredEvent]) -> AsyncIterator[StructuredEvent]:
        """
        Smooth an async stream of events.

        Args:
            events: Events from the decoder

        Yields:
            Smoothed events in order
        """
        async for event in events:
            async with aclosing(self.transform(event)) as smoothed_events:
                async for smoothed in smoothed_events:
                    yield smoothed

    def get_stats(self) -> dict:
        """Get transformer statistics."""
        return {
            "events_in": self._events_in,
            "fragments_out": self._fragments_out,
            "passthroughs": self._passthroughs,
            "last_chunk": self.last_chunk,
        }


__all__ = ['SmoothingTransformer', 'Sleep']
