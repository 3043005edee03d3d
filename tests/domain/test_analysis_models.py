from __future__ import annotations

import pytest
from pydantic import ValidationError

from domain.analysis import Alert, PortfolioData, PortfolioHealth


def test_portfolio_data_accepts_camel_case_payload() -> None:
    data = PortfolioData.model_validate(
        {
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
    )

    asset = data.assets[0]
    assert data.total_value == 1500
    assert asset.asset_type == "ACCION"
    assert asset.current_price == 150
    assert asset.daily_change == 2.5


def test_health_defaults_and_bounds() -> None:
    health = PortfolioHealth()

    assert (health.score, health.diversification, health.performance) == (75, 70, 80)
    assert health.risk_level == "Moderado"
    with pytest.raises(ValidationError):
        PortfolioHealth(score=120)


def test_alert_type_is_restricted() -> None:
    with pytest.raises(ValidationError):
        Alert(type="info", title="x")


def test_models_serialise_with_camel_case_aliases() -> None:
    alert = Alert(type="risk", title="Concentración", suggested_action="Diversificar")

    dumped = alert.model_dump(by_alias=True)

    assert dumped["suggestedAction"] == "Diversificar"
    assert dumped["severity"] == "medium"
