# FILE: app/utils/timezone.py
from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from app.core.config import settings


def report_tz() -> ZoneInfo:
    return ZoneInfo(settings.REPORT_TIMEZONE or "UTC")


def to_report_tz(dt: datetime) -> datetime:
    """
    Convert to the configured report timezone.
    Naive datetimes are taken as UTC (the backend stores ISO strings in UTC).
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(report_tz())


def utc_today() -> date:
    return datetime.now(timezone.utc).date()
