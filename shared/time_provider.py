from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

TIMEZONE = "America/Argentina/Buenos_Aires"
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class TimeProvider:
    """Centralised time provider to generate timestamps for API payloads."""

    _zone = ZoneInfo(TIMEZONE)

    @classmethod
    def utc_now(cls) -> datetime:
        """Return the current timezone-aware UTC datetime."""
        return datetime.now(timezone.utc)

    @staticmethod
    def isoformat(moment: datetime) -> str:
        """Serialise ``moment`` as ISO-8601 UTC with millisecond precision and ``Z`` suffix."""

        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
        return text.replace("+00:00", "Z")

    @classmethod
    def now_iso(cls) -> str:
        return cls.isoformat(cls.utc_now())

    @classmethod
    def format_local(cls, moment: Optional[datetime]) -> str:
        if moment is None:
            return "-"
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(cls._zone).strftime(TIME_FORMAT)


__all__ = ["TIMEZONE", "TIME_FORMAT", "TimeProvider"]
