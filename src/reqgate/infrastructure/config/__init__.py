from __future__ import annotations

from .load import load_config
from .schema import AppConfig, ConcurrencyConfig, EnvOverrides

__all__ = ["AppConfig", "ConcurrencyConfig", "EnvOverrides", "load_config"]
