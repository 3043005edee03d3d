"""Cache primitives used by the API layer."""

from __future__ import annotations

from .fx_cache import RateCache, get_rate_cache

__all__ = ["RateCache", "get_rate_cache"]
