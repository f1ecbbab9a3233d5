from datetime import date, datetime, timezone
from typing import Optional, Sequence

ISO_DATE_FORMAT = '%Y-%m-%d'
FALLBACK_DATE_FORMATS = ('%d/%m/%Y', '%d-%m-%Y', '%Y/%m/%d')
TRUE_STRINGS = ('true', '1', 'yes', 'ja', 'y')
FALSE_STRINGS = ('false', '0', 'no', 'nee', 'n')


def parse_date(value, formats: Sequence[str] = (ISO_DATE_FORMAT,) + FALLBACK_DATE_FORMATS) -> Optional[date]:
    """
    Parse a date from a string (yyyy-MM-dd first, then the fallback formats),
    an ISO datetime string, a date or a datetime. Empty values give None.

    Raises:
        ValueError: the value is not empty and matches none of the formats
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
    except ValueError:
        raise ValueError(f"Invalid date '{value}'. Expected format yyyy-MM-dd")


def parse_bool(value, default: bool = False) -> bool:
    if value is None or value == '':
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_STRINGS:
        return True
    if text in FALSE_STRINGS:
        return False
    raise ValueError(f"Invalid boolean value '{value}'")


def parse_datetime(value) -> Optional[datetime]:
    """
    Parse an ISO 8601 date or datetime into a naive UTC datetime. Empty values give None.

    Raises:
        ValueError: the value is not a valid ISO 8601 date/time
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace('Z', '+00:00'))
        except ValueError:
            raise ValueError(f"Invalid date/time '{value}'. Expected ISO 8601, e.g. 2024-01-15T09:30:00Z")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
