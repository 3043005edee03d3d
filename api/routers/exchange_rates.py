"""Exchange-rate endpoints backed by the single-slot FX cache."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from api.errors import ApiError
from api.schemas.exchange_rates import (
    CacheInvalidateResponse,
    CacheStatsResponse,
    ConversionResponse,
    ExchangeRatesResponse,
)
from domain.models import ExchangeRateSet
from services.cache import RateCache, get_rate_cache
from services.currency_converter import CurrencyConverter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/exchange-rates", tags=["exchange-rates"])


def _load_rates(cache: RateCache) -> ExchangeRateSet:
    try:
        return cache.get_rates()
    except Exception as exc:
        logger.exception("Error fetching exchange rates")
        raise ApiError(500, "Error fetching exchange rates") from exc


@router.get("", response_model=ExchangeRatesResponse, summary="Current ARS/USD rates")
def get_exchange_rates(cache: RateCache = Depends(get_rate_cache)) -> ExchangeRatesResponse:
    """Return the cached rates, refreshing them once the TTL elapsed."""

    return ExchangeRatesResponse.from_rates(_load_rates(cache))


@router.get("/convert", response_model=ConversionResponse, summary="Convert an amount")
def convert(
    amount: float = Query(..., description="Amount expressed in the source currency"),
    from_currency: str = Query(..., alias="from", min_length=1),
    to_currency: str = Query(..., alias="to", min_length=1),
    cache: RateCache = Depends(get_rate_cache),
) -> ConversionResponse:
    rates = _load_rates(cache)
    source = from_currency.strip().upper()
    target = to_currency.strip().upper()
    result = CurrencyConverter(rates).convert(amount, source, target)
    return ConversionResponse(
        amount=amount,
        from_currency=source,
        to_currency=target,
        result=result,
        rates=ExchangeRatesResponse.from_rates(rates),
    )


@router.get("/cache", response_model=CacheStatsResponse, summary="Rate cache statistics")
def cache_stats(cache: RateCache = Depends(get_rate_cache)) -> CacheStatsResponse:
    try:
        stats = cache.stats()
    except Exception as exc:
        logger.exception("Error collecting exchange-rate cache stats")
        raise ApiError(500, "Error fetching cache status") from exc
    return CacheStatsResponse.model_validate(stats)


@router.post(
    "/cache/invalidate", response_model=CacheInvalidateResponse, summary="Drop the cached rates"
)
def invalidate_cache(cache: RateCache = Depends(get_rate_cache)) -> CacheInvalidateResponse:
    """The next rates request triggers a fresh lookup."""

    try:
        cache.invalidate()
    except Exception as exc:
        logger.exception("Error invalidating exchange-rate cache")
        raise ApiError(500, "Error invalidating cache") from exc
    return CacheInvalidateResponse(invalidated=True)


__all__ = ["router"]
