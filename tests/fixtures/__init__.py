"""
Test fixtures for smooth-sse.

Provides reusable SSE bodies and backend payloads.
"""

from .sse_fixtures import SSEFixtures

__all__ = [
    "SSEFixtures",
]
