import re
from datetime import date, datetime

from dateutil import parser as date_parser

# (pattern, order of the captured groups)
_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^(\d{4})-(\d{2})-(\d{2})$"), "ymd"),
    (re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$"), "dmy"),
    (re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$"), "ymd"),
)

# Two defaults that differ in every component. A text that parses to the same
# date under both names its own day, month and year.
_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def _build(groups: tuple[str, ...], order: str) -> str | None:
    parts = dict(zip(order, groups))
    try:
        return date(int(parts["y"]), int(parts["m"]), int(parts["d"])).isoformat()
    except ValueError:
        return None


def _parse_free_form(text: str) -> str | None:
    parsed = []
    for default in _DEFAULTS:
        try:
            parsed.append(date_parser.parse(text, dayfirst=True, default=default).date())
        except (ValueError, OverflowError):
            return None
    if parsed[0] != parsed[1]:
        return None
    return parsed[0].isoformat()


def parse_date(value: str | None) -> str | None:
    """Normalize a date string to ``YYYY-MM-DD``.

    Numeric dates are read day-first (``12/11/2024`` is 12 November). Anything
    else goes through ``dateutil``. Returns None for empty input, for invalid
    calendar dates and for text that does not name a full date.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None

    for pattern, order in _PATTERNS:
        match = pattern.match(text)
        if match:
            return _build(match.groups(), order)

    return _parse_free_form(text)
