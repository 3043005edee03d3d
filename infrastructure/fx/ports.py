# infrastructure\fx\ports.py
from __future__ import annotations

from typing import Protocol

from domain.models import ExchangeRateSet


class IRateLookup(Protocol):
    """Puerto de consulta externa de cotizaciones."""

    def lookup(self, query: str) -> str:
        """Devuelve la respuesta en texto libre (o JSON) para ``query``.

        Puede lanzar cualquier excepción; el fetcher la trata como falla.
        """
        ...


class IRateFetcher(Protocol):
    """Puerto que produce un :class:`ExchangeRateSet` sin lanzar errores."""

    def fetch_rates(self) -> ExchangeRateSet:
        ...
