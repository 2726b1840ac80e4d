"""
Pytest configuration and shared fixtures for smooth-sse tests.
"""

import pytest
import asyncio
from typing import Generator, List
import os

from smooth_sse.utils.config import SmoothSSEConfig, reset_config, ENV_PREFIX


class RecordingSleep:
    """Stand-in for ``asyncio.sleep`` that records requested delays."""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        await asyncio.sleep(0)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Sleep that returns immediately and remembers how long it was asked to wait."""
    return RecordingSleep()


@pytest.fixture
def clean_env(monkeypatch) -> Generator[None, None, None]:
    """Remove SMOOTH_SSE_* variables and the global config loader."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def smooth_config() -> SmoothSSEConfig:
    """Configuration with smoothing enabled and default pacing."""
    return SmoothSSEConfig(streaming={"smooth_streaming": True})
