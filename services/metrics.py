"""Prometheus counters for the exchange-rate cache and AI analysis."""

from __future__ import annotations

import logging

from prometheus_client import CollectorRegistry, Counter

from shared.settings import enable_prometheus

logger = logging.getLogger(__name__)

PROMETHEUS_ENABLED = bool(enable_prometheus)
PROMETHEUS_REGISTRY: CollectorRegistry | None = (
    CollectorRegistry(auto_describe=True) if PROMETHEUS_ENABLED else None
)

if PROMETHEUS_REGISTRY is not None:
    FX_CACHE_REQUESTS_TOTAL: Counter | None = Counter(
        "fx_cache_requests_total",
        "Consultas al caché de tipos de cambio",
        labelnames=("result",),
        registry=PROMETHEUS_REGISTRY,
    )
    FX_FETCH_TOTAL: Counter | None = Counter(
        "fx_fetch_total",
        "Refrescos de tipos de cambio por origen del dato",
        labelnames=("source",),
        registry=PROMETHEUS_REGISTRY,
    )
    AI_ANALYSIS_TOTAL: Counter | None = Counter(
        "ai_analysis_total",
        "Análisis de portfolio servidos por origen",
        labelnames=("result",),
        registry=PROMETHEUS_REGISTRY,
    )
else:  # pragma: no cover - when metrics are disabled
    FX_CACHE_REQUESTS_TOTAL = None
    FX_FETCH_TOTAL = None
    AI_ANALYSIS_TOTAL = None


def _inc(counter: Counter | None, **labels: str) -> None:
    if counter is None:
        return
    try:
        counter.labels(**labels).inc()
    except ValueError as exc:  # pragma: no cover - label mismatch
        logger.debug("No se pudo actualizar la métrica %s: %s", counter, exc)


def record_fx_cache(result: str) -> None:
    """Count a cache lookup as ``hit`` or ``miss``."""
    _inc(FX_CACHE_REQUESTS_TOTAL, result=result)


def record_fx_fetch(source: str) -> None:
    _inc(FX_FETCH_TOTAL, source=source)


def record_ai_analysis(result: str) -> None:
    _inc(AI_ANALYSIS_TOTAL, result=result)


__all__ = [
    "PROMETHEUS_ENABLED",
    "PROMETHEUS_REGISTRY",
    "FX_CACHE_REQUESTS_TOTAL",
    "FX_FETCH_TOTAL",
    "AI_ANALYSIS_TOTAL",
    "record_fx_cache",
    "record_fx_fetch",
    "record_ai_analysis",
]
