"""Schemas for the dashboard endpoints."""

from __future__ import annotations

from pydantic import Field

from api.routers.base_models import _BaseModel


class PortfolioSummaryResponse(_BaseModel):
    total_value: float = Field(..., alias="totalValue")
    invested_value: float = Field(..., alias="investedValue")
    daily_change: float = Field(..., alias="dailyChange", description="Daily change in percent")
    daily_change_amount: float = Field(..., alias="dailyChangeAmount")
    wallet_change: float = Field(..., alias="walletChange")
    alyc_change: float = Field(..., alias="alycChange")
    crypto_change: float = Field(..., alias="cryptoChange")
    total_assets: int = Field(..., alias="totalAssets")
    total_platforms: int = Field(..., alias="totalPlatforms")


class AssetSummary(_BaseModel):
    ticker: str
    name: str
    change: float
    value: float
    type: str


__all__ = ["AssetSummary", "PortfolioSummaryResponse"]
