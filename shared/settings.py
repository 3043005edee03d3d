"""Application settings exposed for cross-module use.

This module centralizes access to the configuration values used across
services and infrastructure layers. Values are sourced from environment
variables, ``.env`` or ``config.json`` via ``shared.config``.
"""
from __future__ import annotations

from shared.config import settings as _config_settings

# Re-export the shared Settings instance so existing imports keep working.
settings = _config_settings

# FX configuration. Importers can rely on these names instead of scattering
# magic numbers or environment lookups throughout the codebase.
cache_ttl_fx: float = settings.FX_CACHE_TTL
fx_lookup_timeout: float = settings.FX_LOOKUP_TIMEOUT
fx_ccl_multiplier: float = settings.fx_ccl_multiplier
fx_blue_multiplier: float = settings.fx_blue_multiplier

# Completion API
ai_api_key: str | None = getattr(settings, "AI_API_KEY", None)
ai_base_url: str = getattr(settings, "AI_BASE_URL", "https://api.openai.com/v1")
ai_model: str = getattr(settings, "AI_MODEL", "gpt-4o-mini")
ai_timeout: float = getattr(settings, "AI_TIMEOUT", 20.0)
ai_temperature: float = getattr(settings, "AI_TEMPERATURE", 0.7)
ai_max_tokens: int = getattr(settings, "AI_MAX_TOKENS", 2000)

user_agent: str = settings.USER_AGENT
app_env: str = getattr(settings, "app_env", "dev")
enable_prometheus: bool = getattr(settings, "ENABLE_PROMETHEUS", True)
log_retention_days: int = getattr(settings, "LOG_RETENTION_DAYS", 7)

__all__ = [
    "settings",
    "cache_ttl_fx",
    "fx_lookup_timeout",
    "fx_ccl_multiplier",
    "fx_blue_multiplier",
    "ai_api_key",
    "ai_base_url",
    "ai_model",
    "ai_timeout",
    "ai_temperature",
    "ai_max_tokens",
    "user_agent",
    "app_env",
    "enable_prometheus",
    "log_retention_days",
]
