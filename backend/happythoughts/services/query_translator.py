"""
Happy Thoughts API: Request Query Translator
============================================

What:  Maps the raw query string of GET /thoughts to a typed ThoughtQuery.
How:   Pure function, no I/O. Every parameter is optional text; anything
       malformed degrades to "no filter" or the default value. GET /thoughts
       is a public read endpoint, so it never answers 400 for a bad
       query parameter.

Mapping:
    heartsMin  "5"      → hearts_min=5        ("abc", "" → None)
                                              (clamped to the 32-bit hearts column)
    category   "Fun"    → category="Fun"      (""/"  "   → None)
    sortBy     "hearts" → ThoughtSort.HEARTS
               "date"   → ThoughtSort.DATE    (anything else → NONE)
    page       "2"      → page=2              (absent, "x", "0", "-1" → 1)
                                              (capped so the row offset fits 64 bits)
    limit      "10"     → limit=10            (absent, "x", "0" → default_page_size)
                                              (above max_page_size → max_page_size)
"""

from typing import Optional

from happythoughts.config import settings
from happythoughts.schemas.thought import ThoughtQuery, ThoughtSort

_SORT_KEYS = {
    "hearts": ThoughtSort.HEARTS,
    "date": ThoughtSort.DATE,
}

# `hearts` is an INTEGER column; OFFSET binds as a signed 64-bit value.
HEARTS_MIN_FLOOR = -(2**31)
HEARTS_MIN_CEILING = 2**31 - 1
MAX_OFFSET = 2**63 - 1


def _parse_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _positive_or(raw: Optional[str], default: int) -> int:
    value = _parse_int(raw)
    if value is None or value < 1:
        return default
    return value


def _clamp(value: Optional[int], low: int, high: int) -> Optional[int]:
    if value is None:
        return None
    return max(low, min(value, high))


def translate_query(
    hearts_min: Optional[str] = None,
    category: Optional[str] = None,
    sort_by: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    default_limit: Optional[int] = None,
    max_limit: Optional[int] = None,
) -> ThoughtQuery:
    """
    Build a ThoughtQuery from raw query-string values.

    Args:
        hearts_min, category, sort_by, page, limit: the raw `heartsMin`,
            `category`, `sortBy`, `page` and `limit` parameters.
        default_limit / max_limit: override the configured page sizes
            (defaults: settings.default_page_size / settings.max_page_size).

    Returns:
        A ThoughtQuery whose page and limit are always >= 1.
    """
    default_limit = default_limit or settings.default_page_size
    max_limit = max_limit or settings.max_page_size

    category = category.strip() if category else None
    limit_value = min(_positive_or(limit, default_limit), max_limit)
    # Past this page the offset overflows the driver; such pages are empty anyway.
    last_page = MAX_OFFSET // limit_value + 1

    return ThoughtQuery(
        hearts_min=_clamp(_parse_int(hearts_min), HEARTS_MIN_FLOOR, HEARTS_MIN_CEILING),
        category=category or None,
        sort=_SORT_KEYS.get(sort_by or "", ThoughtSort.NONE),
        page=min(_positive_or(page, 1), last_page),
        limit=limit_value,
    )
