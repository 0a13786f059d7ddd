"""Text normalization utilities for tour locations and concert dates.

The upstream API encodes locations as lowercase slugs such as
``"new-york-usa"`` or ``"los_angeles-usa"`` and concert dates as
``dd-mm-yyyy`` strings, sometimes prefixed with ``*``.  This module turns
those into display values and comparable dates:

1. **Location names** -- ``format_location_name("new-york-usa")`` gives
   ``"New York, USA"``.  The last hyphen-separated token is the country;
   short country codes (3 letters or fewer) are upper-cased.

2. **Concert dates** -- ``parse_concert_date`` accepts ``-``, ``/`` or ``.``
   separators, a leading ``*`` and surrounding whitespace.  ``date_newer``
   orders dates newest first and pushes unparseable values to the end.
"""

from __future__ import annotations

import re
from datetime import date, datetime

CONCERT_DATE_FORMAT = "%d-%m-%Y"

_SEPARATOR_RE = re.compile(r"[/.]")
_COUNTRY_CODE_MAX_LEN = 3


def title_case(text: str) -> str:
    """Capitalize each whitespace-separated word and collapse spacing.

    ``"hello world"`` -> ``"Hello World"``, ``"HELLO"`` -> ``"Hello"``,
    ``"  spaces  "`` -> ``"Spaces"``.
    """
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split())


def format_location_name(raw: str) -> str:
    """Convert an upstream location slug into a display name.

    Examples
    --------
    >>> format_location_name("new-york-usa")
    'New York, USA'
    >>> format_location_name("london")
    'London'

    Names that already contain a comma are assumed to be formatted and are
    returned unchanged, so the function is idempotent.
    """
    if "," in raw:
        return raw

    parts = [part for part in raw.replace("_", " ").split("-") if part.strip()]
    if not parts:
        return title_case(raw)
    if len(parts) == 1:
        return title_case(parts[0])

    city = title_case(" ".join(parts[:-1]))
    country = parts[-1].strip()
    if len(country) <= _COUNTRY_CODE_MAX_LEN:
        country = country.upper()
    else:
        country = title_case(country)
    return f"{city}, {country}"


def parse_concert_date(raw: str) -> date:
    """Parse a concert date string such as ``"*23-08-2019"``.

    Raises
    ------
    ValueError
        If the value is empty or not a real calendar date.
    """
    cleaned = raw.strip().lstrip("*")
    cleaned = _SEPARATOR_RE.sub("-", cleaned)
    return datetime.strptime(cleaned, CONCERT_DATE_FORMAT).date()


def try_parse_concert_date(raw: str) -> date | None:
    """Like :func:`parse_concert_date` but returns ``None`` on bad input."""
    try:
        return parse_concert_date(raw)
    except ValueError:
        return None


def date_newer(a: str, b: str) -> bool:
    """Return ``True`` when *a* should sort before *b* (newest first).

    A valid date is always "newer" than an invalid one; an invalid *a* is
    never newer than anything.
    """
    parsed_a = try_parse_concert_date(a)
    if parsed_a is None:
        return False
    parsed_b = try_parse_concert_date(b)
    if parsed_b is None:
        return True
    return parsed_a > parsed_b


def concert_date_sort_key(raw: str) -> tuple[int, int]:
    """Sort key giving newest-first order with unparseable dates last.

    Use with a stable sort (``sorted``/``list.sort``) so dates that tie or
    fail to parse keep their upstream order.
    """
    parsed = try_parse_concert_date(raw)
    if parsed is None:
        return (1, 0)
    return (0, -parsed.toordinal())
