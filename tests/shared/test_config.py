from __future__ import annotations

import pytest

from shared import config


@pytest.fixture()
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in (
        "FX_CACHE_TTL",
        "FX_LOOKUP_TIMEOUT",
        "FX_CCL_MULTIPLIER",
        "FX_BLUE_MULTIPLIER",
        "AI_API_KEY",
        "AI_BASE_URL",
        "AI_MODEL",
        "LOG_RETENTION_DAYS",
        "ENABLE_PROMETHEUS",
        "APP_ENV",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(config, "_load_cfg", lambda: {})
    return monkeypatch


def test_defaults(_clean_env: pytest.MonkeyPatch) -> None:
    settings = config.Settings()

    assert settings.FX_CACHE_TTL == 300
    assert settings.FX_LOOKUP_TIMEOUT == 5.0
    assert settings.fx_ccl_multiplier == 1.95
    assert settings.fx_blue_multiplier == 2.0
    assert settings.AI_API_KEY is None
    assert settings.AI_MODEL == "gpt-4o-mini"
    assert settings.LOG_RETENTION_DAYS == config.DEFAULT_LOG_RETENTION_DAYS
    assert settings.ENABLE_PROMETHEUS is True
    assert settings.app_env == "dev"


def test_environment_overrides_config_file(_clean_env: pytest.MonkeyPatch) -> None:
    _clean_env.setattr(
        config, "_load_cfg", lambda: {"FX_CACHE_TTL": 60, "AI_MODEL": "from-file"}
    )
    _clean_env.setenv("FX_CACHE_TTL", "120")
    _clean_env.setenv("AI_BASE_URL", "http://localhost:8080/v1/")
    _clean_env.setenv("AI_API_KEY", "  secret  ")

    settings = config.Settings()

    assert settings.FX_CACHE_TTL == 120.0
    assert settings.AI_MODEL == "from-file"
    assert settings.AI_BASE_URL == "http://localhost:8080/v1"
    assert settings.AI_API_KEY == "secret"


@pytest.mark.parametrize("raw", ["-5", "0", "abc"])
def test_invalid_ttl_falls_back_to_default(_clean_env: pytest.MonkeyPatch, raw: str) -> None:
    _clean_env.setenv("FX_CACHE_TTL", raw)

    assert config.Settings().FX_CACHE_TTL == config.DEFAULT_FX_CACHE_TTL


def test_prometheus_flag_parsing(_clean_env: pytest.MonkeyPatch) -> None:
    _clean_env.setenv("ENABLE_PROMETHEUS", "false")
    assert config.Settings().ENABLE_PROMETHEUS is False

    _clean_env.setenv("ENABLE_PROMETHEUS", "yes")
    assert config.Settings().ENABLE_PROMETHEUS is True
