# presant/core/dates.py
from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

from presant.core.config import get_settings


def app_timezone() -> tzinfo:
    """Timezone in which calendar dates are compared."""
    name = get_settings().APP_TIMEZONE
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def today() -> date:
    """
    Current calendar date in the configured application timezone.

    Wrapped so tests can patch it.
    """
    return datetime.now(tz=app_timezone()).date()


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes (as returned by SQLite) are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
