from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Mapping


class CurrencyCode(str, Enum):
    """Currency codes accepted by the converter.

    ``USD`` is an alias of the official rate (``USD_OFICIAL``).
    """

    ARS = "ARS"
    USD = "USD"
    USD_OFICIAL = "USD_OFICIAL"
    USD_CCL = "USD_CCL"
    USD_BLUE = "USD_BLUE"


# ARS per USD field for every non-pivot code.
RATE_FIELDS: Dict[str, str] = {
    CurrencyCode.USD.value: "usd_official",
    CurrencyCode.USD_OFICIAL.value: "usd_official",
    CurrencyCode.USD_CCL.value: "usd_ccl",
    CurrencyCode.USD_BLUE.value: "usd_blue",
}

FALLBACK_RATES: Mapping[str, float] = {
    "usd_official": 365.50,
    "usd_ccl": 720.80,
    "usd_blue": 735.20,
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ExchangeRateSet:
    """Snapshot of ARS/USD rates with ARS as the pivot currency.

    Attributes:
        usd_official: ARS per USD at the official (Banco Nación) rate.
        usd_ccl: ARS per USD through "contado con liquidación".
        usd_blue: ARS per USD in the informal market.
        retrieved_at: Moment the snapshot was produced (UTC).
        ars: Pivot value, always ``1``.
        source: ``"lookup"`` when derived from the external lookup,
            ``"fallback"`` when the fixed defaults were used.
    """

    usd_official: float
    usd_ccl: float
    usd_blue: float
    retrieved_at: datetime = field(default_factory=_utc_now)
    ars: float = 1.0
    source: str = "lookup"

    def __post_init__(self) -> None:
        for name in ("usd_official", "usd_ccl", "usd_blue"):
            value = getattr(self, name)
            if value is None or not float(value) > 0:
                raise ValueError(f"{name} must be a positive number, got {value!r}")
            object.__setattr__(self, name, float(value))
        object.__setattr__(self, "ars", 1.0)

    @classmethod
    def fallback(cls, retrieved_at: datetime | None = None) -> "ExchangeRateSet":
        """Return the fixed default rates with a fresh timestamp."""

        return cls(
            usd_official=FALLBACK_RATES["usd_official"],
            usd_ccl=FALLBACK_RATES["usd_ccl"],
            usd_blue=FALLBACK_RATES["usd_blue"],
            retrieved_at=retrieved_at or _utc_now(),
            source="fallback",
        )

    def rate_for(self, currency: str) -> float | None:
        """Return ARS per unit of ``currency``; ``None`` for unknown codes."""

        if currency == CurrencyCode.ARS.value:
            return self.ars
        field_name = RATE_FIELDS.get(currency)
        if field_name is None:
            return None
        return getattr(self, field_name)


__all__ = [
    "RATE_FIELDS",
    "FALLBACK_RATES",
    "CurrencyCode",
    "ExchangeRateSet",
]
