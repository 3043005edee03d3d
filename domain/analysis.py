"""Typed structures for the AI portfolio analysis.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class PortfolioAsset(_CamelModel):
    ticker: str
    name: str = ""
    sector: str = "Otros"
    asset_type: str = "OTRO"
    quantity: float = 0.0
    current_price: float = 0.0
    avg_price: float = 0.0
    daily_change: float = 0.0


class PortfolioData(_CamelModel):
    """Portfolio snapshot submitted for analysis."""

    total_value: float
    invested_value: float
    assets: List[PortfolioAsset] = Field(default_factory=list)


class PortfolioHealth(_CamelModel):
    score: float = Field(75, ge=0, le=100)
    diversification: float = Field(70, ge=0, le=100)
    risk_level: str = "Moderado"
    performance: float = Field(80, ge=0, le=100)


class Alert(_CamelModel):
    type: Literal["warning", "opportunity", "risk"]
    title: str
    description: str = ""
    severity: Literal["high", "medium", "low"] = "medium"
    suggested_action: str = ""


class Insight(_CamelModel):
    category: str = "General"
    title: str
    description: str = ""
    impact: Literal["positive", "neutral", "negative"] = "neutral"


class Recommendation(_CamelModel):
    priority: Literal["high", "medium", "low"] = "medium"
    title: str
    description: str = ""
    expected_impact: str = ""
    timeframe: str = ""


class MarketAnalysis(_CamelModel):
    trend: str = "neutral"
    key_factors: List[str] = Field(default_factory=list)
    outlook: str = "neutral"


class AIAnalysis(_CamelModel):
    portfolio_health: PortfolioHealth
    alerts: List[Alert]
    insights: List[Insight]
    recommendations: List[Recommendation]
    market_analysis: MarketAnalysis


__all__ = [
    "AIAnalysis",
    "Alert",
    "Insight",
    "MarketAnalysis",
    "PortfolioAsset",
    "PortfolioData",
    "PortfolioHealth",
    "Recommendation",
]
