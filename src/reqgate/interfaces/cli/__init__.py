from __future__ import annotations

from .cli import fetch_all, main, start

__all__ = ["fetch_all", "main", "start"]
