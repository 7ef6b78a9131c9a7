"""Composition root: build controllers and clients from ``AppConfig``."""

from __future__ import annotations

import structlog

from reqgate.infrastructure.concurrency import ConcurrencyController
from reqgate.infrastructure.config.schema import AppConfig
from reqgate.infrastructure.http.request_client import RequestClient

log = structlog.get_logger(__name__)


def build_controller(config: AppConfig) -> ConcurrencyController:
    """Create a controller with the configured limits."""
    controller = ConcurrencyController.from_config(config.concurrency)
    log.debug(
        "controller_initialized",
        max_concurrent=controller.max_concurrent,
        max_queue=controller.max_queue,
        timeout_ms=controller.timeout_ms,
    )
    return controller


def build_request_client(
    config: AppConfig,
    controller: ConcurrencyController | None = None,
) -> RequestClient:
    """Create a :class:`RequestClient` that owns its httpx client.

    A new controller is built from *config* unless one is passed in, so
    several clients can share one set of slots.
    """
    return RequestClient(
        config.http_base_url,
        controller=controller or build_controller(config),
        timeout_seconds=config.http_timeout_seconds,
        follow_redirects=config.http_follow_redirects,
        headers={"User-Agent": config.http_user_agent},
    )
