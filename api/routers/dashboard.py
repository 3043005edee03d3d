"""Dashboard summary endpoints."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Query

from api.errors import ApiError
from api.schemas.dashboard import AssetSummary, PortfolioSummaryResponse
from services.dashboard_data import SORTABLE_FIELDS, get_portfolio_summary, get_top_assets

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/portfolio", response_model=PortfolioSummaryResponse, summary="Portfolio aggregates")
async def portfolio_summary() -> PortfolioSummaryResponse:
    try:
        return PortfolioSummaryResponse.model_validate(get_portfolio_summary())
    except Exception as exc:
        logger.exception("Error fetching portfolio data")
        raise ApiError(500, "Error fetching portfolio data") from exc


@router.get("/assets", response_model=List[AssetSummary], summary="Top assets")
async def top_assets(
    asset_type: Optional[str] = Query(None, alias="type", description="CEDEAR, ACCION, CRYPTO, BONO..."),
    search: Optional[str] = Query(None, description="Substring of ticker or name"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description=", ".join(SORTABLE_FIELDS)),
    order: str = Query("desc", pattern="^(asc|desc)$"),
) -> List[AssetSummary]:
    try:
        assets = get_top_assets(asset_type=asset_type, search=search, sort_by=sort_by, order=order)
    except ValueError as exc:
        raise ApiError(400, str(exc)) from exc
    except Exception as exc:
        logger.exception("Error fetching top assets")
        raise ApiError(500, "Error fetching top assets") from exc
    return [AssetSummary.model_validate(asset) for asset in assets]


__all__ = ["router"]
