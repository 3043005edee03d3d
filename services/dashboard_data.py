"""Sample dashboard data served while no persistence layer is wired."""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, List, Optional

PORTFOLIO_SUMMARY: Dict[str, Any] = {
    "totalValue": 12500000,
    "investedValue": 10000000,
    "dailyChange": 2.5,
    "dailyChangeAmount": 312500,
    "walletChange": 1.2,
    "alycChange": 3.8,
    "cryptoChange": -0.5,
    "totalAssets": 24,
    "totalPlatforms": 8,
}

TOP_ASSETS: List[Dict[str, Any]] = [
    {"ticker": "AAPL", "name": "Apple Inc.", "change": 5.2, "value": 2500000, "type": "CEDEAR"},
    {"ticker": "GGAL", "name": "Grupo Galicia", "change": 3.1, "value": 1800000, "type": "ACCION"},
    {"ticker": "BTC", "name": "Bitcoin", "change": -2.3, "value": 1500000, "type": "CRYPTO"},
    {"ticker": "YPFD", "name": "YPF", "change": 4.7, "value": 1200000, "type": "ACCION"},
    {"ticker": "TS", "name": "Ternium", "change": 1.8, "value": 900000, "type": "CEDEAR"},
    {"ticker": "PAMP", "name": "Pampa Energía", "change": -1.5, "value": 750000, "type": "ACCION"},
    {"ticker": "ETH", "name": "Ethereum", "change": -3.2, "value": 600000, "type": "CRYPTO"},
    {"ticker": "AL30", "name": "Bonar 2030", "change": 0.8, "value": 500000, "type": "BONO"},
]

SORTABLE_FIELDS = ("ticker", "name", "change", "value")


def get_portfolio_summary() -> Dict[str, Any]:
    return dict(PORTFOLIO_SUMMARY)


def get_top_assets(
    *,
    asset_type: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = None,
    order: str = "desc",
) -> List[Dict[str, Any]]:
    """Return the sample assets, optionally filtered and sorted.

    Without arguments the static order is preserved. ``search`` matches the
    ticker or name case-insensitively; ``asset_type`` matches ``type`` exactly
    (case-insensitive). Unknown ``sort_by`` values raise ``ValueError``.
    """

    assets = deepcopy(TOP_ASSETS)

    if asset_type:
        wanted = asset_type.strip().upper()
        assets = [asset for asset in assets if asset["type"].upper() == wanted]

    if search:
        needle = search.strip().lower()
        assets = [
            asset
            for asset in assets
            if needle in asset["ticker"].lower() or needle in asset["name"].lower()
        ]

    if sort_by:
        if sort_by not in SORTABLE_FIELDS:
            raise ValueError(f"Unsupported sort field: {sort_by}")
        descending = str(order).lower() != "asc"
        if sort_by in ("ticker", "name"):
            assets.sort(key=lambda asset: str(asset[sort_by]).lower(), reverse=descending)
        else:
            assets.sort(key=lambda asset: float(asset[sort_by]), reverse=descending)

    return assets


__all__ = [
    "PORTFOLIO_SUMMARY",
    "SORTABLE_FIELDS",
    "TOP_ASSETS",
    "get_portfolio_summary",
    "get_top_assets",
]
