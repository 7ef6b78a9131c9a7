"""Shared fixtures for integration tests.

These tests wire real components (load_config, ConcurrencyController,
RequestClient) together; HTTP is served by an in-process
``httpx.MockTransport`` so no network is touched.
"""

from __future__ import annotations

import asyncio
import os
from typing import Iterator

import httpx
import pytest


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[pytest.MonkeyPatch]:
    """Strip any REQGATE_* variables inherited from the outer environment."""
    for key in list(os.environ):
        if key.upper().startswith("REQGATE_"):
            monkeypatch.delenv(key)
    yield monkeypatch


@pytest.fixture()
def slow_transport() -> httpx.MockTransport:
    """Transport answering after ``?delay=<seconds>``, echoing the path."""

    async def _handler(request: httpx.Request) -> httpx.Response:
        delay = float(request.url.params.get("delay", "0"))
        if delay:
            await asyncio.sleep(delay)
        return httpx.Response(200, json={"path": request.url.path})

    return httpx.MockTransport(_handler)
