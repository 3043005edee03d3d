# infrastructure/fx/provider.py
from __future__ import annotations
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable, Mapping, Optional

from domain.models import ExchangeRateSet
from infrastructure.ai.completion_client import CompletionClient, get_completion_client, parse_json_reply
from shared.errors import TimeoutError
from shared.settings import fx_blue_multiplier, fx_ccl_multiplier, fx_lookup_timeout
from shared.utils import _as_float_or_none, first_number

from .ports import IRateLookup

logger = logging.getLogger(__name__)

RATE_QUERY = "cotización dólar hoy banco nación Argentina oficial blue CCL"

_LOOKUP_SYSTEM_PROMPT = (
    "Sos un asistente que informa cotizaciones del dólar en Argentina. "
    "Respondé únicamente con un objeto JSON con las claves numéricas "
    "'oficial', 'blue' y 'ccl' (pesos argentinos por dólar, precio de venta). "
    "Usá null para los valores que no conozcas."
)

_OFFICIAL_KEYS = ("oficial", "official", "usd_oficial", "banco_nacion")
_CCL_KEYS = ("ccl", "contado_con_liqui", "contadoconliqui", "usd_ccl")
_BLUE_KEYS = ("blue", "informal", "usd_blue")


# -------------------------
# Helpers de normalización
# -------------------------

def _positive(value: Any) -> Optional[float]:
    if isinstance(value, Mapping):
        # {"compra": ..., "venta": ...} -> venta
        value = value.get("venta", value.get("value_sell", value.get("value")))
    number = _as_float_or_none(value, log=False)
    if number is None or number <= 0:
        return None
    return number


def _first_key(data: Mapping[str, Any], keys: tuple[str, ...]) -> Optional[float]:
    lowered = {str(k).strip().lower(): v for k, v in data.items()}
    for key in keys:
        if key in lowered:
            number = _positive(lowered[key])
            if number is not None:
                return number
    return None


@dataclass(frozen=True)
class ExtractedRates:
    """Figures found in a lookup reply. Missing figures are ``None``."""

    official: Optional[float] = None
    ccl: Optional[float] = None
    blue: Optional[float] = None


def extract_rates(reply: str | None) -> ExtractedRates:
    """Extract the official/CCL/Blue figures from a lookup reply.

    JSON replies are read by key; otherwise the first number in the text is
    taken as the official rate.
    """

    try:
        data = parse_json_reply(reply)
    except ValueError:
        data = None

    if isinstance(data, Mapping):
        return ExtractedRates(
            official=_first_key(data, _OFFICIAL_KEYS),
            ccl=_first_key(data, _CCL_KEYS),
            blue=_first_key(data, _BLUE_KEYS),
        )
    if isinstance(data, (int, float)) and not isinstance(data, bool):
        return ExtractedRates(official=_positive(data))

    official = first_number(reply)
    if official is not None and official <= 0:
        official = None
    return ExtractedRates(official=official)


class CompletionRateLookup:
    """Consulta las cotizaciones a la API de completions con una pregunta en lenguaje natural."""

    def __init__(self, client: CompletionClient | None = None, *, timeout: float | None = None) -> None:
        self._client = client
        self.timeout = float(timeout if timeout is not None else fx_lookup_timeout)

    def lookup(self, query: str) -> str:
        client = self._client or get_completion_client()
        return client.complete(
            [
                {"role": "system", "content": _LOOKUP_SYSTEM_PROMPT},
                {"role": "user", "content": query},
            ],
            temperature=0.0,
            max_tokens=200,
            timeout=self.timeout,
        )


class RateFetcher:
    """Produce an :class:`ExchangeRateSet` from the external lookup.

    ``fetch_rates`` never raises: any failure, including a lookup that
    exceeds ``timeout`` seconds, yields the fixed fallback rates.
    """

    def __init__(
        self,
        lookup: IRateLookup | None = None,
        *,
        timeout: float | None = None,
        ccl_multiplier: float | None = None,
        blue_multiplier: float | None = None,
        now: Callable[[], datetime] | None = None,
        query: str = RATE_QUERY,
    ) -> None:
        self._lookup = lookup or CompletionRateLookup(timeout=timeout)
        self.timeout = float(timeout if timeout is not None else fx_lookup_timeout)
        self.ccl_multiplier = float(ccl_multiplier if ccl_multiplier is not None else fx_ccl_multiplier)
        self.blue_multiplier = float(
            blue_multiplier if blue_multiplier is not None else fx_blue_multiplier
        )
        self._now = now or (lambda: datetime.now(timezone.utc))
        self.query = query
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = Lock()

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="fx-lookup")
            return self._executor

    def _lookup_with_deadline(self) -> str:
        future: Future[str] = self._get_executor().submit(self._lookup.lookup, self.query)
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeoutError as exc:
            future.cancel()
            raise TimeoutError(f"La consulta de cotizaciones superó {self.timeout:.1f}s") from exc

    def build_rates(self, extracted: ExtractedRates) -> ExchangeRateSet:
        """Complete missing CCL/Blue figures from the official rate."""

        if extracted.official is None:
            raise ValueError("no se pudo extraer el dólar oficial de la respuesta")
        official = extracted.official
        ccl = extracted.ccl if extracted.ccl is not None else official * self.ccl_multiplier
        blue = extracted.blue if extracted.blue is not None else official * self.blue_multiplier
        return ExchangeRateSet(
            usd_official=official,
            usd_ccl=ccl,
            usd_blue=blue,
            retrieved_at=self._now(),
            source="lookup",
        )

    def fetch_rates(self) -> ExchangeRateSet:
        try:
            reply = self._lookup_with_deadline()
            rates = self.build_rates(extract_rates(reply))
        except Exception as e:
            logger.warning("Falló la consulta de tipos de cambio, usando valores por defecto: %s", e)
            return ExchangeRateSet.fallback(retrieved_at=self._now())
        logger.info(
            "Tipos de cambio actualizados: oficial=%.2f ccl=%.2f blue=%.2f",
            rates.usd_official,
            rates.usd_ccl,
            rates.usd_blue,
        )
        return rates

    def close(self) -> None:
        with self._executor_lock:
            executor = self._executor
            self._executor = None
        if executor is not None:
            executor.shutdown(wait=False)


__all__ = [
    "RATE_QUERY",
    "CompletionRateLookup",
    "ExtractedRates",
    "RateFetcher",
    "extract_rates",
]
