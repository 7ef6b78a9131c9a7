from .concurrency import ConcurrencyControllerPort

__all__ = ["ConcurrencyControllerPort"]
