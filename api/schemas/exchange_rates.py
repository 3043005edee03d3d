"""Schemas for the exchange-rate endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from api.routers.base_models import _BaseModel
from domain.models import ExchangeRateSet
from shared.time_provider import TimeProvider


class ExchangeRatesResponse(_BaseModel):
    """ARS per unit of each supported currency."""

    ars: float = Field(1.0, alias="ARS", description="Pivot currency, always 1")
    usd_oficial: float = Field(..., alias="USD_OFICIAL", description="Official Banco Nación rate")
    usd_ccl: float = Field(..., alias="USD_CCL", description="Contado con liquidación rate")
    usd_blue: float = Field(..., alias="USD_BLUE", description="Informal market rate")
    last_updated: str = Field(..., alias="lastUpdated", description="ISO-8601 retrieval time")

    @classmethod
    def from_rates(cls, rates: ExchangeRateSet) -> "ExchangeRatesResponse":
        return cls(
            ars=rates.ars,
            usd_oficial=rates.usd_official,
            usd_ccl=rates.usd_ccl,
            usd_blue=rates.usd_blue,
            last_updated=TimeProvider.isoformat(rates.retrieved_at),
        )


class ConversionResponse(_BaseModel):
    amount: float
    from_currency: str = Field(..., alias="from")
    to_currency: str = Field(..., alias="to")
    result: float
    rates: ExchangeRatesResponse


class CacheStatsResponse(_BaseModel):
    """Diagnostics of the single-slot rate cache."""

    hits: int = Field(..., ge=0)
    misses: int = Field(..., ge=0)
    ttl_seconds: float = Field(..., alias="ttlSeconds")
    remaining_ttl: Optional[float] = Field(None, alias="remainingTtl")
    last_updated: Optional[str] = Field(None, alias="lastUpdated")
    last_updated_local: Optional[str] = Field(
        None, alias="lastUpdatedLocal", description="Buenos Aires wall-clock time"
    )
    source: Optional[str] = Field(None, description="lookup or fallback")


class CacheInvalidateResponse(_BaseModel):
    invalidated: bool = True


__all__ = [
    "CacheInvalidateResponse",
    "CacheStatsResponse",
    "ConversionResponse",
    "ExchangeRatesResponse",
]
