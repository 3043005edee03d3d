"""Pydantic schema definitions shared across API routers."""

from .dashboard import AssetSummary, PortfolioSummaryResponse
from .exchange_rates import (
    CacheInvalidateResponse,
    CacheStatsResponse,
    ConversionResponse,
    ExchangeRatesResponse,
)

__all__ = [
    "AssetSummary",
    "CacheInvalidateResponse",
    "CacheStatsResponse",
    "ConversionResponse",
    "ExchangeRatesResponse",
    "PortfolioSummaryResponse",
]
