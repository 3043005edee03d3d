"""Prometheus metrics exposure for the FastAPI backend."""

from __future__ import annotations

from fastapi import APIRouter, Response, status
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from api.errors import ApiError
from services import metrics as fx_metrics

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose accumulated Prometheus metrics for scraping."""

    registry = fx_metrics.PROMETHEUS_REGISTRY
    if not fx_metrics.PROMETHEUS_ENABLED or registry is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, "Prometheus metrics are disabled")
    payload = generate_latest(registry)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


__all__ = ["router"]
