"""Date parsing for values read from the installation spreadsheets.

All dates are built in UTC so that a sheet date never shifts by a day
depending on the server's timezone.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from dateutil import parser as dtparser

logger = logging.getLogger(__name__)

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# Days between the spreadsheet epoch (1899-12-30) and 1970-01-01
SHEET_EPOCH_OFFSET_DAYS = 25569
MS_PER_DAY = 86400 * 1000


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def now_iso() -> str:
    """Return current UTC timestamp in ISO format."""
    return to_iso_z(now_utc())


def to_iso_z(dt: datetime) -> str:
    """Format as `YYYY-MM-DDTHH:MM:SS.mmmZ`, the format stored by the portal."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def _to_int(part: str) -> Optional[int]:
    part = part.strip()
    if not (part.isascii() and part.isdecimal()):
        return None
    return int(part)


def parse_sheet_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a date typed in a sheet cell.

    Accepted:
    - DD/MM (current year)
    - DD/MM/YYYY or DD/MM/YY (two-digit years are 20YY)
    - any other date string dateutil understands (ISO-8601, "5 March 2024", ...)

    Returns None instead of raising when the value cannot be parsed.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    parts = text.split("/")
    if len(parts) == 2:
        day, month = _to_int(parts[0]), _to_int(parts[1])
        year = now_utc().year
    elif len(parts) == 3:
        day, month, year = _to_int(parts[0]), _to_int(parts[1]), _to_int(parts[2])
        if year is not None and year < 100:
            year += 2000
    else:
        return _parse_generic(text)

    if day is None or month is None or year is None:
        logger.warning(f"Invalid date components in sheet value: {text}")
        return None

    try:
        return datetime(year, month, day, tzinfo=timezone.utc)
    except ValueError:
        logger.warning(f"Out of range date in sheet value: {text}")
        return None


def _parse_generic(text: str) -> Optional[datetime]:
    try:
        parsed = dtparser.parse(text)
    except (ValueError, OverflowError):
        logger.warning(f"Unrecognized date format in sheet value: {text}")
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def serial_to_date(serial: Union[int, float, None]) -> Optional[datetime]:
    """Convert a spreadsheet date serial (days since 1899-12-30) to UTC."""
    if serial is None or isinstance(serial, bool):
        return None
    try:
        milliseconds = (float(serial) - SHEET_EPOCH_OFFSET_DAYS) * MS_PER_DAY
        return UNIX_EPOCH + timedelta(milliseconds=milliseconds)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Failed to convert serial number {serial!r} to a date")
        return None


def normalize_sheet_date(value) -> Optional[str]:
    """Return a sheet date cell as an ISO string, or None when unparseable."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        parsed = serial_to_date(value)
    else:
        parsed = parse_sheet_date(value)
    return to_iso_z(parsed) if parsed else None
