"""Shared test fixtures for the reqgate test suite."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Iterator

import pytest
import respx

from reqgate.infrastructure.concurrency import ConcurrencyController
from reqgate.infrastructure.config.schema import AppConfig

# ---------------------------------------------------------------------------
# Controller fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def controller() -> ConcurrencyController:
    """Controller with 2 slots, 3 queue places and a 1s deadline."""
    return ConcurrencyController(max_concurrent=2, max_queue=3, timeout_ms=1000)


@pytest.fixture()
async def release() -> AsyncIterator[asyncio.Event]:
    """Event gating blocking tasks; set on teardown so nothing is left pending."""
    event = asyncio.Event()
    yield event
    event.set()
    await asyncio.sleep(0)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def app_config() -> AppConfig:
    """Validated config with small limits and a fixed base URL."""
    return AppConfig.model_validate(
        {
            "environment": "test",
            "concurrency": {"max_concurrent": 2, "max_queue": 3, "timeout_ms": 1000},
            "http": {"base_url": "https://api.example.com"},
        }
    )


# ---------------------------------------------------------------------------
# HTTP fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def respx_mock() -> Iterator[respx.MockRouter]:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router
