"""AI-assisted portfolio analysis.

Builds a Spanish prompt from the portfolio snapshot, asks the completion API
for a JSON analysis and decodes it with per-field defaults. Every failure path
returns :func:`default_analysis` instead of raising.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Callable, List, Mapping, Sequence, Type, TypeVar

import pandas as pd
from pydantic import BaseModel, ValidationError

from domain.analysis import (
    AIAnalysis,
    Alert,
    Insight,
    MarketAnalysis,
    PortfolioData,
    PortfolioHealth,
    Recommendation,
)
from infrastructure.ai.completion_client import CompletionClient, get_completion_client, parse_json_reply
from services.metrics import record_ai_analysis
from shared.errors import AppError
from shared.settings import ai_max_tokens, ai_temperature
from shared.utils import _as_float_or_none, format_number, format_percent

logger = logging.getLogger(__name__)

MAX_LIST_ITEMS = 5
MAX_KEY_FACTORS = 4
DEFAULT_KEY_FACTORS = ["Estabilidad económica", "Tasas de interés", "Inflación", "Mercado global"]

SYSTEM_PROMPT = """Eres un asesor financiero experto especializado en mercados argentinos.
Analiza portfolios de inversión y proporciona recomendaciones personalizadas basadas en:
- Análisis de riesgo y diversificación
- Tendencias del mercado actual
- Perfil de inversor conservador/moderado
- Contexto económico de Argentina

Responde en formato JSON estructurado con las siguientes claves:
- portfolioHealth (con score, diversification, riskLevel, performance)
- alerts (array de alertas con type, title, description, severity, suggestedAction)
- insights (array de insights con category, title, description, impact)
- recommendations (array de recomendaciones con priority, title, description, expectedImpact, timeframe)
- marketAnalysis (con trend, keyFactors, outlook)"""

_ASSET_COLUMNS = [
    "ticker",
    "name",
    "sector",
    "asset_type",
    "quantity",
    "current_price",
    "avg_price",
    "daily_change",
]

ModelT = TypeVar("ModelT", bound=BaseModel)


# -------------------------
# Defaults
# -------------------------

def default_alerts() -> List[Alert]:
    return [
        Alert(
            type="warning",
            title="Mantente informado",
            description="Revisa regularmente el rendimiento de tu portfolio.",
            severity="medium",
            suggested_action="Establecer alertas de precio para activos clave",
        )
    ]


def default_insights() -> List[Insight]:
    return [
        Insight(
            category="General",
            title="Portfolio balanceado",
            description="Tu portfolio muestra una diversificación razonable.",
            impact="neutral",
        )
    ]


def default_recommendations() -> List[Recommendation]:
    return [
        Recommendation(
            priority="medium",
            title="Revisión periódica",
            description="Considera revisar tu portfolio trimestralmente.",
            expected_impact="Mejora del rendimiento a largo plazo",
            timeframe="3 meses",
        )
    ]


def default_analysis() -> AIAnalysis:
    return AIAnalysis(
        portfolio_health=PortfolioHealth(),
        alerts=default_alerts(),
        insights=default_insights(),
        recommendations=default_recommendations(),
        market_analysis=MarketAnalysis(key_factors=list(DEFAULT_KEY_FACTORS)),
    )


# -------------------------
# Prompt
# -------------------------

def _asset_frame(portfolio: PortfolioData) -> pd.DataFrame:
    frame = pd.DataFrame(
        [asset.model_dump() for asset in portfolio.assets], columns=_ASSET_COLUMNS
    )
    frame["value"] = frame["quantity"].astype(float) * frame["current_price"].astype(float)
    avg = frame["avg_price"].astype(float)
    gain = (frame["current_price"].astype(float) - avg) / avg.where(avg != 0)
    frame["performance"] = gain.fillna(0.0) * 100
    return frame


def distribution(frame: pd.DataFrame, column: str) -> dict[str, float]:
    """Percentage of total value held per ``column`` value, in first-seen order."""

    if frame.empty:
        return {}
    total = float(frame["value"].sum())
    grouped = frame.groupby(column, sort=False)["value"].sum()
    if total == 0:
        return {str(label): 0.0 for label in grouped.index}
    return {str(label): float(value) / total * 100 for label, value in grouped.items()}


def total_return(portfolio: PortfolioData) -> float:
    if not portfolio.invested_value:
        return 0.0
    return (portfolio.total_value - portfolio.invested_value) / portfolio.invested_value * 100


def build_analysis_prompt(portfolio: PortfolioData) -> str:
    frame = _asset_frame(portfolio)

    sector_lines = [
        f"- {sector}: {pct:.1f}%" for sector, pct in distribution(frame, "sector").items()
    ]
    type_lines = [
        f"- {kind}: {pct:.1f}%" for kind, pct in distribution(frame, "asset_type").items()
    ]

    top = frame.sort_values("performance", ascending=False, kind="stable").head(3)
    worst = frame.sort_values("performance", ascending=True, kind="stable").head(3)
    volatile = frame.reindex(
        frame["daily_change"].astype(float).abs().sort_values(ascending=False, kind="stable").index
    ).head(3)

    def _perf_lines(rows: pd.DataFrame) -> list[str]:
        return [
            f"- {row.ticker} ({row.name}): {format_percent(row.performance)}"
            for row in rows.itertuples(index=False)
        ]

    volatility_lines = [
        f"- {row.ticker}: {format_percent(float(row.daily_change))}" for row in volatile.itertuples(index=False)
    ]

    sections = [
        "Por favor, analiza el siguiente portfolio de inversión:",
        "",
        "RESUMEN DEL PORTFOLIO:",
        f"- Valor total: ${format_number(portfolio.total_value, decimals=3)}",
        f"- Valor invertido: ${format_number(portfolio.invested_value, decimals=3)}",
        f"- Retorno total: {format_percent(total_return(portfolio))}",
        f"- Número de activos: {len(portfolio.assets)}",
        "",
        "DISTRIBUCIÓN POR SECTOR:",
        *sector_lines,
        "",
        "DISTRIBUCIÓN POR TIPO DE ACTIVO:",
        *type_lines,
        "",
        "TOP PERFORMERS:",
        *_perf_lines(top),
        "",
        "PEORES PERFORMERS:",
        *_perf_lines(worst),
        "",
        "ACTIVOS CON MAYOR VOLATILIDAD (variación diaria):",
        *volatility_lines,
        "",
        "Por favor, proporciona un análisis completo considerando el contexto actual del mercado argentino,",
        "incluyendo inflación, tipos de cambio, y tendencias sectoriales. Enfócate en riesgos específicos",
        "del mercado local y oportunidades disponibles.",
    ]
    return "\n".join(sections)


# -------------------------
# Decode / normalise
# -------------------------

def _section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    return value if isinstance(value, Mapping) else {}


def _bounded_score(section: Mapping[str, Any], key: str, default: float) -> float:
    value = _as_float_or_none(section.get(key), log=False)
    if not value:
        value = default
    return min(100.0, max(0.0, value))


def _text(section: Mapping[str, Any], key: str, default: str) -> str:
    value = section.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _items(
    raw: Any,
    model: Type[ModelT],
    defaults: Callable[[], List[ModelT]],
    limit: int = MAX_LIST_ITEMS,
) -> List[ModelT]:
    if not isinstance(raw, list):
        return defaults()
    items: List[ModelT] = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            continue
        try:
            items.append(model.model_validate(entry))
        except ValidationError as exc:
            logger.debug("Descartando %s inválido: %s", model.__name__, exc.errors())
            continue
        if len(items) >= limit:
            break
    return items or defaults()


def _key_factors(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return list(DEFAULT_KEY_FACTORS)
    factors = [str(item).strip() for item in raw if isinstance(item, (str, int, float))]
    factors = [factor for factor in factors if factor][:MAX_KEY_FACTORS]
    return factors or list(DEFAULT_KEY_FACTORS)


def normalize_analysis(raw: Mapping[str, Any]) -> AIAnalysis:
    """Decode a model reply into :class:`AIAnalysis` applying per-field defaults."""

    health = _section(raw, "portfolioHealth")
    market = _section(raw, "marketAnalysis")
    return AIAnalysis(
        portfolio_health=PortfolioHealth(
            score=_bounded_score(health, "score", 75),
            diversification=_bounded_score(health, "diversification", 70),
            risk_level=_text(health, "riskLevel", "Moderado"),
            performance=_bounded_score(health, "performance", 80),
        ),
        alerts=_items(raw.get("alerts"), Alert, default_alerts),
        insights=_items(raw.get("insights"), Insight, default_insights),
        recommendations=_items(raw.get("recommendations"), Recommendation, default_recommendations),
        market_analysis=MarketAnalysis(
            trend=_text(market, "trend", "neutral"),
            key_factors=_key_factors(market.get("keyFactors")),
            outlook=_text(market, "outlook", "neutral"),
        ),
    )


class AIAnalysisService:
    """Run the portfolio analysis against the completion API."""

    def __init__(
        self,
        client: CompletionClient | None = None,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> None:
        self._client = client
        self.temperature = ai_temperature if temperature is None else float(temperature)
        self.max_tokens = ai_max_tokens if max_tokens is None else int(max_tokens)

    def _messages(self, prompt: str) -> Sequence[Mapping[str, str]]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

    def analyze_portfolio(self, portfolio: PortfolioData) -> AIAnalysis:
        client = self._client or get_completion_client()
        try:
            reply = client.complete(
                self._messages(build_analysis_prompt(portfolio)),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except AppError as error:
            logger.error("Error in AI analysis: %s", error)
            record_ai_analysis("fallback")
            return default_analysis()

        try:
            raw = parse_json_reply(reply)
        except ValueError as parse_error:
            logger.error("Error parsing AI response: %s", parse_error)
            record_ai_analysis("fallback")
            return default_analysis()

        if not isinstance(raw, Mapping):
            logger.error("Respuesta de IA inesperada (%s), usando análisis por defecto", type(raw).__name__)
            record_ai_analysis("fallback")
            return default_analysis()

        record_ai_analysis("model")
        return normalize_analysis(raw)


@lru_cache(maxsize=1)
def get_ai_analysis_service() -> AIAnalysisService:
    return AIAnalysisService()


__all__ = [
    "AIAnalysisService",
    "DEFAULT_KEY_FACTORS",
    "SYSTEM_PROMPT",
    "build_analysis_prompt",
    "default_analysis",
    "distribution",
    "get_ai_analysis_service",
    "normalize_analysis",
    "total_return",
]
