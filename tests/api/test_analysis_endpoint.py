from __future__ import annotations

import json

from fastapi.testclient import TestClient

from api.main import app
from services.ai_analysis import AIAnalysisService, get_ai_analysis_service
from shared.errors import ConfigurationError
from tests.fixtures.fx import StubCompletionClient

_PORTFOLIO = {
    "totalValue": 1500,
    "investedValue": 1000,
    "assets": [
        {
            "ticker": "GGAL",
            "name": "Grupo Galicia",
            "sector": "Financiero",
            "assetType": "ACCION",
            "quantity": 10,
            "currentPrice": 150,
            "avgPrice": 100,
            "dailyChange": 2.5,
        }
    ],
}


def _post(client: TestClient, completion: StubCompletionClient, payload=_PORTFOLIO):
    app.dependency_overrides[get_ai_analysis_service] = lambda: AIAnalysisService(completion)
    return client.post("/api/analysis", json=payload)


def test_analysis_returns_camel_case_document(client: TestClient) -> None:
    reply = json.dumps(
        {
            "portfolioHealth": {"score": 90, "diversification": 30, "riskLevel": "Alto", "performance": 85},
            "recommendations": [
                {"priority": "high", "title": "Diversificar", "expectedImpact": "Menor riesgo", "timeframe": "1 mes"}
            ],
            "marketAnalysis": {"trend": "alcista", "keyFactors": ["Inflación"], "outlook": "favorable"},
        }
    )

    response = _post(client, StubCompletionClient(reply))

    assert response.status_code == 200
    body = response.json()
    assert body["portfolioHealth"] == {"score": 90, "diversification": 30, "riskLevel": "Alto", "performance": 85}
    assert body["recommendations"][0]["expectedImpact"] == "Menor riesgo"
    assert body["marketAnalysis"]["keyFactors"] == ["Inflación"]
    assert body["alerts"][0]["suggestedAction"] == "Establecer alertas de precio para activos clave"


def test_analysis_without_api_key_returns_defaults(client: TestClient) -> None:
    response = _post(client, StubCompletionClient(ConfigurationError("AI_API_KEY no está configurada")))

    assert response.status_code == 200
    body = response.json()
    assert body["portfolioHealth"]["score"] == 75
    assert body["insights"][0]["title"] == "Portfolio balanceado"
    assert body["marketAnalysis"]["keyFactors"] == [
        "Estabilidad económica",
        "Tasas de interés",
        "Inflación",
        "Mercado global",
    ]


def test_analysis_rejects_invalid_payload(client: TestClient) -> None:
    response = _post(client, StubCompletionClient("{}"), payload={"assets": "nope"})

    assert response.status_code == 422
    assert "details" in response.json()
