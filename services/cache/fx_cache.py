"""Single-slot TTL cache for the exchange-rate snapshot."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from functools import lru_cache
from threading import Lock
from typing import Any, Callable, Dict

from domain.models import ExchangeRateSet
from infrastructure.fx.ports import IRateFetcher
from infrastructure.fx.provider import RateFetcher
from services.metrics import record_fx_cache, record_fx_fetch
from shared.settings import cache_ttl_fx
from shared.time_provider import TimeProvider

__all__ = ["RateCache", "get_rate_cache"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _CacheEntry:
    rates: ExchangeRateSet
    stored_at: float


class RateCache:
    """Hold the latest :class:`ExchangeRateSet` and refresh it once stale.

    The check-and-store sequence runs under a lock that is held during the
    fetch, so concurrent misses share a single refresh.
    """

    def __init__(
        self,
        fetcher: IRateFetcher | None = None,
        *,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._fetcher = fetcher or RateFetcher()
        self._ttl = float(ttl_seconds if ttl_seconds is not None else cache_ttl_fx)
        self._clock = clock or time.monotonic
        self._lock = Lock()
        self._entry: _CacheEntry | None = None
        self._hits = 0
        self._misses = 0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    def _is_fresh(self, entry: _CacheEntry, now: float) -> bool:
        return now - entry.stored_at < self._ttl

    def get_rates(self) -> ExchangeRateSet:
        with self._lock:
            now = self._clock()
            entry = self._entry
            if entry is not None and self._is_fresh(entry, now):
                self._hits += 1
                record_fx_cache("hit")
                return entry.rates

            self._misses += 1
            record_fx_cache("miss")
            rates = self._fetcher.fetch_rates()
            self._entry = _CacheEntry(rates=rates, stored_at=now)
            record_fx_fetch(rates.source)
            logger.debug("Caché FX renovado (origen=%s, ttl=%.0fs)", rates.source, self._ttl)
            return rates

    def invalidate(self) -> None:
        with self._lock:
            self._entry = None
        logger.info("Caché FX invalidado manualmente")

    def remaining_ttl(self) -> float | None:
        with self._lock:
            entry = self._entry
            if entry is None:
                return None
            remaining = entry.stored_at + self._ttl - self._clock()
        if remaining <= 0:
            return None
        return remaining

    def close(self) -> None:
        """Release the fetcher's resources, if it holds any."""

        close = getattr(self._fetcher, "close", None)
        if callable(close):
            close()

    def stats(self) -> Dict[str, Any]:
        """Expose cache statistics for diagnostics."""

        entry = self._entry
        return {
            "hits": self._hits,
            "misses": self._misses,
            "ttl_seconds": self._ttl,
            "remaining_ttl": self.remaining_ttl(),
            "last_updated": TimeProvider.isoformat(entry.rates.retrieved_at) if entry else None,
            "last_updated_local": TimeProvider.format_local(entry.rates.retrieved_at) if entry else None,
            "source": entry.rates.source if entry else None,
        }


@lru_cache(maxsize=1)
def get_rate_cache() -> RateCache:
    """Return the application-wide cache instance (composition root)."""
    return RateCache()
