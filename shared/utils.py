# shared\utils.py
from __future__ import annotations

import re

import numpy as np
import logging

logger = logging.getLogger(__name__)

_NUMBER_TOKEN = re.compile(r"\d{1,3}(?:[.,]\d{3})+(?:[.,]\d+)?|\d+(?:[.,]\d+)?")
_GROUPED_THOUSANDS = re.compile(r"^[1-9]\d{0,2}([.,])\d{3}(?:\1\d{3})*$")


def _to_float(x, log: bool = True) -> float | None:
    if x is None or isinstance(x, bool):
        return None
    if isinstance(x, (int, float)):
        return float(x)
    s = str(x).strip().replace(" ", "").replace("$", "")
    # "1.050" / "1,050" -> "1050" (es-AR thousands without decimals)
    if _GROUPED_THOUSANDS.match(s):
        return float(s.replace(".", "").replace(",", ""))
    # "1.234,56" -> "1234.56"
    if "," in s and s.count(",") == 1 and s.rfind(",") > s.rfind("."):
        s = s.replace(".", "").replace(",", ".")
    # "1,234.56" -> "1234.56"
    elif "," in s and "." in s:
        s = s.replace(",", "")
    # "1.234.567" -> "1234567"
    elif s.count(".") > 1:
        s = s.replace(".", "")
    else:
        s = s.replace(",", ".")
    try:
        return float(s)
    except ValueError:
        if log:
            logger.warning("Valor inválido para conversión a float: %s", s)
        return None


def _as_float_or_none(x, log: bool = True) -> float | None:
    """Convert the input to ``float`` if possible, handling localized formats."""

    f = _to_float(x, log=log)
    if f is None:
        return None
    if not np.isfinite(f):
        return None
    return f


def first_number(text: str | None) -> float | None:
    """Return the first numeric token found in free text, if any."""

    if not text:
        return None
    match = _NUMBER_TOKEN.search(str(text))
    if match is None:
        return None
    return _as_float_or_none(match.group(0), log=False)


def _group_thousands(text: str) -> str:
    # "12,345,678.90" -> "12.345.678,90"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_number(value: float | int | None, decimals: int = 0) -> str:
    """Format ``value`` with es-AR thousand separators.

    Trailing zero decimals are dropped, mirroring ``toLocaleString('es-AR')``.
    """

    v = _as_float_or_none(value)
    if v is None:
        return "—"
    text = _group_thousands(f"{v:,.{max(decimals, 0)}f}")
    if "," in text:
        text = text.rstrip("0").rstrip(",")
    return text


def format_percent(value: float | None, spaced: bool = False, signed: bool = False) -> str:
    """Format ``value`` as a percentage string with two decimals."""

    v = _as_float_or_none(value)
    if v is None:
        return "—"
    suffix = " %" if spaced else "%"
    sign = "+" if signed and v > 0 else ""
    return f"{sign}{v:.2f}{suffix}"


__all__ = [
    "_as_float_or_none",
    "_to_float",
    "first_number",
    "format_number",
    "format_percent",
]
