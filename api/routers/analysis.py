"""AI portfolio analysis endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.errors import ApiError
from domain.analysis import AIAnalysis, PortfolioData
from services.ai_analysis import AIAnalysisService, get_ai_analysis_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analysis", tags=["analysis"])


@router.post("", response_model=AIAnalysis, summary="Analyse a portfolio with the AI advisor")
def analyze(
    payload: PortfolioData,
    service: AIAnalysisService = Depends(get_ai_analysis_service),
) -> AIAnalysis:
    """Return the model's analysis, or the default analysis when it is unavailable."""

    try:
        return service.analyze_portfolio(payload)
    except Exception as exc:
        logger.exception("Error generating portfolio analysis")
        raise ApiError(500, "Error generating portfolio analysis") from exc


__all__ = ["router"]
