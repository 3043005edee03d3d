"""Operation submission rules and sample operation history."""

from __future__ import annotations

import logging
import secrets
import string
import time
from copy import deepcopy
from typing import Any, Dict, List, Mapping

from shared.time_provider import TimeProvider

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = (
    "date",
    "platform",
    "assetType",
    "operationType",
    "currency",
    "ticker",
    "assetName",
    "price",
    "quantity",
    "total",
)

_ID_ALPHABET = string.ascii_lowercase + string.digits

SAMPLE_OPERATIONS: List[Dict[str, Any]] = [
    {
        "id": "op_1",
        "date": "2024-01-15T10:30:00Z",
        "platform": "balanz",
        "assetType": "CEDEARS",
        "operationType": "COMPRA",
        "currency": "USD",
        "ticker": "AAPL",
        "assetName": "Apple Inc.",
        "price": 185.50,
        "quantity": 10,
        "commissions": 5.00,
        "total": 1860.00,
        "description": "Compra de CEDEARs de Apple",
    },
    {
        "id": "op_2",
        "date": "2024-01-14T14:20:00Z",
        "platform": "belo",
        "assetType": "CRYPTO",
        "operationType": "COMPRA",
        "currency": "USD",
        "ticker": "BTC",
        "assetName": "Bitcoin",
        "price": 42500.00,
        "quantity": 0.05,
        "commissions": 2.50,
        "total": 2127.50,
        "description": "Compra de Bitcoin",
    },
]


class MissingFieldError(ValueError):
    """Raised when a required operation field is absent or empty."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required field: {field}")
        self.field = field


def find_missing_field(payload: Any) -> str | None:
    """Return the first required field that is missing or falsy, in declared order."""

    data: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}
    for field in REQUIRED_FIELDS:
        if not data.get(field):
            return field
    return None


def generate_operation_id(now_ms: int | None = None) -> str:
    """Return an id shaped like ``op_<epoch ms>_<9 base36 chars>``."""

    millis = int(time.time() * 1000) if now_ms is None else int(now_ms)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"op_{millis}_{suffix}"


def create_operation(payload: Any) -> Dict[str, Any]:
    """Validate ``payload`` and return the stored representation.

    Raises :class:`MissingFieldError` for the first missing required field.
    """

    missing = find_missing_field(payload)
    if missing is not None:
        raise MissingFieldError(missing)

    logger.info(
        "Guardando operación %s %s en %s",
        payload.get("operationType"),
        payload.get("ticker"),
        payload.get("platform"),
    )

    return {
        "id": generate_operation_id(),
        **dict(payload),
        "createdAt": TimeProvider.now_iso(),
    }


def list_operations() -> List[Dict[str, Any]]:
    return deepcopy(SAMPLE_OPERATIONS)


__all__ = [
    "MissingFieldError",
    "REQUIRED_FIELDS",
    "SAMPLE_OPERATIONS",
    "create_operation",
    "find_missing_field",
    "generate_operation_id",
    "list_operations",
]
