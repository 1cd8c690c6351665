"""
Datetime utilities for consistent timezone handling across the application.

All business logic uses the practice's configured time zone. Spreadsheet
date cells are exchanged as serial numbers (days since 1899-12-30).
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional, Tuple
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

SHEETS_EPOCH = datetime(1899, 12, 30)


def app_now(time_zone: str) -> datetime:
    """Current datetime in the given IANA time zone."""
    return datetime.now(ZoneInfo(time_zone))


def day_window(day: date, time_zone: str) -> Tuple[datetime, datetime]:
    """
    Get the [start, end) window covering one calendar day.

    Args:
        day: The day to cover
        time_zone: IANA time zone the day is interpreted in

    Returns:
        Timezone-aware (midnight, next midnight) tuple
    """
    tz = ZoneInfo(time_zone)
    start = datetime.combine(day, time(0, 0), tzinfo=tz)
    return start, start + timedelta(days=1)


def parse_visit_datetime(visit_date: str, visit_time: str) -> datetime:
    """
    Combine a form date ("2025-12-30") and time ("14:00") into a naive datetime.

    Raises:
        ValueError: If either part cannot be parsed
    """
    parsed_date = date.fromisoformat(visit_date.strip())
    parsed_time = time.fromisoformat(visit_time.strip())
    return datetime.combine(parsed_date, parsed_time)


def localize(dt: datetime, time_zone: str) -> datetime:
    """Attach the app time zone to a naive datetime, convert an aware one."""
    tz = ZoneInfo(time_zone)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def to_sheets_serial(dt: datetime) -> float:
    """Convert a naive datetime to a spreadsheet serial number."""
    if dt.tzinfo is not None:
        dt = dt.replace(tzinfo=None)
    return (dt - SHEETS_EPOCH) / timedelta(days=1)


def from_sheets_serial(serial: float) -> datetime:
    """Convert a spreadsheet serial number back to a naive datetime (second precision)."""
    return SHEETS_EPOCH + timedelta(seconds=round(float(serial) * 86400))


def parse_sheet_datetime(value: Any) -> Optional[datetime]:
    """
    Read a date cell that may hold a serial number or an ISO string.

    Returns:
        Naive datetime, or None for blank or unparseable cells
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        return from_sheets_serial(value)
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError:
        logger.warning(f"Unparseable date cell: {value!r}")
        return None


def format_sheet_date(value: Any, default: str) -> str:
    """Format a date cell as YYYY-MM-DD, or return default."""
    parsed = parse_sheet_datetime(value)
    if parsed is None:
        return default
    return parsed.strftime("%Y-%m-%d")


def parse_event_start(event: dict[str, Any]) -> Optional[datetime]:
    """Extract the start of a Calendar API event resource as an aware datetime."""
    start = event.get("start") or {}
    if start.get("dateTime"):
        raw = start["dateTime"].replace("Z", "+00:00")
        return datetime.fromisoformat(raw)
    if start.get("date"):
        # All-day event
        return datetime.combine(date.fromisoformat(start["date"]), time(0, 0), tzinfo=timezone.utc)
    return None
