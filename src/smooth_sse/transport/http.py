"""Read SSE events from an aiohttp response body."""

import asyncio
from typing import AsyncIterator, Optional

import aiohttp

from ..streaming.events import StructuredEvent
from ..streaming.smoother import Sleep
from ..streaming.stream import get_event_source_stream
from ..utils.config import SmoothSSEConfig
from ..utils.errors import TransportError, ErrorContext
from ..utils.logging import get_logger

logger = get_logger("smooth-sse.transport")

EVENT_STREAM_CONTENT_TYPE = "text/event-stream"


def is_event_stream(response: aiohttp.ClientResponse) -> bool:
    """Check whether a response declares an SSE body."""
    content_type = response.headers.get("Content-Type", "")
    return content_type.split(";", 1)[0].strip().lower() == EVENT_STREAM_CONTENT_TYPE


async def iter_response_events(
    response: aiohttp.ClientResponse,
    config: Optional[SmoothSSEConfig] = None,
    smooth: Optional[bool] = None,
    sleep: Sleep = asyncio.sleep,
    require_event_stream: bool = False,
) -> AsyncIterator[StructuredEvent]:
    """
    Yield the events of an open streaming response.

    The response is released once the stream ends or the caller stops
    iterating. Opening the request and retrying it are up to the caller.

    Args:
        response: Open response whose body is an SSE stream
        config: Configuration (defaults if None)
        smooth: Force smoothing on or off; None follows the configuration
        sleep: Awaitable delay taking seconds, used when smoothing
        require_event_stream: Reject responses without an SSE Content-Type

    Yields:
        Decoded (and possibly smoothed) events

    Raises:
        TransportError: If ``require_event_stream`` is set and the response
            is not ``text/event-stream``
    """
    if require_event_stream and not is_event_stream(response):
        response.release()
        raise TransportError(
            f"Expected {EVENT_STREAM_CONTENT_TYPE}, got "
            f"{response.headers.get('Content-Type', 'no content type')}",
            context=ErrorContext(
                component="transport",
                operation="iter_response_events",
                metadata={"status": response.status},
            ),
        )

    stream = get_event_source_stream(
        response.content.iter_any(),
        config=config,
        smooth=smooth,
        sleep=sleep,
    )

    logger.debug("response_stream_opened", status=response.status)
    try:
        async with stream:
            async for event in stream:
                yield event
    finally:
        response.release()
        logger.debug("response_released", status=response.status)


__all__ = ['iter_response_events', 'is_event_stream', 'EVENT_STREAM_CONTENT_TYPE']
