"""pytest configuration for Emovox tests."""

from __future__ import annotations

import pytest

from emovox.config import Settings
from fakes import FakeCapability


# Configure asyncio mode for pytest-asyncio
def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(speech_provider="tone", segment_timeout=5.0)


@pytest.fixture
def capability() -> FakeCapability:
    return FakeCapability()
