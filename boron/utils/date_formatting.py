"""
Resume date formatting.

Profile dates are free-form strings ("2023-01", "01/2023", "Jan 2023",
"2023-01-15T00:00:00Z", "present"). Everything is rendered as "Mon YYYY", and
anything that cannot be read as a date renders as "Present".
"""

import re
from datetime import datetime

PRESENT = "Present"

MONTH_ABBREVIATIONS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]

_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")
_MONTH_YEAR = re.compile(r"^(\d{1,2})[/-](\d{4})$")

# Tried in order after the numeric shapes above
_GENERIC_FORMATS = (
    "%b %Y",
    "%B %Y",
    "%b, %Y",
    "%B, %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%Y",
)


def _month_year(year: int, month: int) -> str | None:
    if 1 <= month <= 12:
        return f"{MONTH_ABBREVIATIONS[month - 1]} {year}"
    return None


def _parse_generic(value: str) -> datetime | None:
    iso_value = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(iso_value)
    except ValueError:
        pass

    for fmt in _GENERIC_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def format_date(value: str | None = None, is_ongoing: bool = False) -> str:
    """
    Format a free-form date as "Mon YYYY".

    Never raises: ongoing, blank, "present" and unparseable inputs all give
    "Present".

    Examples:
        >>> format_date("2023-01")
        'Jan 2023'
        >>> format_date("01/2023")
        'Jan 2023'
        >>> format_date("13/2023")
        'Present'
    """
    if is_ongoing or value is None:
        return PRESENT

    value = str(value).strip()
    if not value or value.lower() == "present":
        return PRESENT

    match = _YEAR_MONTH.match(value)
    if match:
        return _month_year(int(match.group(1)), int(match.group(2))) or PRESENT

    match = _MONTH_YEAR.match(value)
    if match:
        return _month_year(int(match.group(2)), int(match.group(1))) or PRESENT

    parsed = _parse_generic(value)
    if parsed is None:
        return PRESENT
    return _month_year(parsed.year, parsed.month) or PRESENT


def format_date_range(start: str | None = None, end: str | None = None) -> str:
    """
    Format a start/end pair as "Mon YYYY -- Mon YYYY".

    A blank end date means the entry is ongoing.

    Examples:
        >>> format_date_range("2022-03", "")
        'Mar 2022 -- Present'
    """
    return f"{format_date(start)} -- {format_date(end, is_ongoing=not end)}"
