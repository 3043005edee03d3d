"""HTTP client for an OpenAI-compatible chat-completion API.

The same client backs the portfolio analysis and the exchange-rate lookup.
Errors are raised using the shared hierarchy in :mod:`shared.errors` so the
callers can decide which fallback to apply.
"""

from __future__ import annotations

import json
import logging
import re
from functools import lru_cache
from typing import Any, Mapping, Optional, Sequence

import requests

from infrastructure.http.session import build_session
from shared.errors import ConfigurationError, ExternalAPIError, NetworkError, TimeoutError
from shared.settings import (
    ai_api_key,
    ai_base_url,
    ai_max_tokens,
    ai_model,
    ai_temperature,
    ai_timeout,
    user_agent,
)

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def parse_json_reply(text: str | None) -> Any:
    """Decode a model reply that should contain a JSON document.

    Accepts bare JSON, JSON wrapped in a fenced code block, or a reply with
    prose around a single ``{...}`` object. Raises ``ValueError`` otherwise.
    """

    if not text or not str(text).strip():
        raise ValueError("empty completion reply")
    candidate = str(text).strip()
    fenced = _FENCED_BLOCK.search(candidate)
    if fenced:
        candidate = fenced.group(1).strip()
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        start = candidate.find("{")
        end = candidate.rfind("}")
        if start == -1 or end <= start:
            raise ValueError("completion reply does not contain a JSON object")
        try:
            return json.loads(candidate[start : end + 1])
        except json.JSONDecodeError as exc:
            raise ValueError(f"invalid JSON in completion reply: {exc}") from exc


class CompletionClient:
    """Thin HTTP client around ``POST {base_url}/chat/completions``."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else ai_api_key
        self.base_url = (base_url if base_url is not None else ai_base_url).rstrip("/")
        self.model = model or ai_model
        self.timeout = float(timeout if timeout is not None else ai_timeout)
        self._session = session or build_session(user_agent, timeout=self.timeout)

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def complete(
        self,
        messages: Sequence[Mapping[str, str]],
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        timeout: float | None = None,
    ) -> str:
        """Send ``messages`` and return the text of the first choice."""

        if not self.api_key:
            raise ConfigurationError("AI_API_KEY no está configurada")

        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [dict(message) for message in messages],
            "temperature": ai_temperature if temperature is None else float(temperature),
            "max_tokens": ai_max_tokens if max_tokens is None else int(max_tokens),
        }
        url = f"{self.base_url}/chat/completions"
        effective_timeout = self.timeout if timeout is None else float(timeout)
        try:
            response = self._session.post(
                url,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=effective_timeout,
            )
        except requests.Timeout as exc:
            raise TimeoutError(
                f"La API de completions no respondió en {effective_timeout:.1f}s"
            ) from exc
        except requests.RequestException as exc:
            raise NetworkError(f"Falló la conexión con la API de completions: {exc}") from exc

        status = response.status_code
        if status >= 400:
            detail = self._extract_error_detail(response)
            raise ExternalAPIError(f"Completion API error {status}: {detail}")
        try:
            data = response.json()
        except ValueError as exc:
            raise ExternalAPIError("Invalid JSON response from completion API") from exc

        content = self._first_choice_content(data)
        if not content:
            raise ExternalAPIError("No se recibió respuesta del modelo de IA")
        logger.debug("Completion recibida (%d caracteres, modelo=%s)", len(content), self.model)
        return content

    @staticmethod
    def _first_choice_content(data: Any) -> Optional[str]:
        if not isinstance(data, Mapping):
            return None
        choices = data.get("choices")
        if not isinstance(choices, Sequence) or not choices:
            return None
        first = choices[0]
        if not isinstance(first, Mapping):
            return None
        message = first.get("message")
        if not isinstance(message, Mapping):
            return None
        content = message.get("content")
        if not isinstance(content, str):
            return None
        return content.strip() or None

    @staticmethod
    def _extract_error_detail(response: requests.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text or "unknown error"
        if isinstance(data, Mapping):
            error = data.get("error")
            if isinstance(error, Mapping) and error.get("message"):
                return str(error["message"])
            if error:
                return str(error)
        return response.text or "unknown error"


@lru_cache(maxsize=1)
def get_completion_client() -> CompletionClient:
    """Return a cached instance of the completion client."""
    return CompletionClient()


__all__ = ["CompletionClient", "get_completion_client", "parse_json_reply"]
