from __future__ import annotations

from .request_client import RequestClient

__all__ = ["RequestClient"]
