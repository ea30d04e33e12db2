"""
Date-range resolution: DateRangeSpec -> concrete DateWindow.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Callable

from src.core.utils import first_of_month, first_of_previous_month
from src.gaql.errors import ValidationError
from src.gaql.model import DateRangeKind, DateRangeSpec, DateWindow
from src.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_WINDOW_DAYS = 30


def _days_back(n: int) -> Callable[[date], tuple[date, date]]:
    return lambda today: (today - timedelta(days=n), today)


def _last_month(today: date) -> tuple[date, date]:
    return first_of_previous_month(today), first_of_month(today) - timedelta(days=1)


_DURING_KEYWORDS: dict[str, Callable[[date], tuple[date, date]]] = {
    "LAST_7_DAYS":  _days_back(7),
    "LAST_14_DAYS": _days_back(14),
    "LAST_30_DAYS": _days_back(30),
    "THIS_MONTH":   lambda today: (first_of_month(today), today),
    "LAST_MONTH":   _last_month,
    "THIS_YEAR":    lambda today: (today.replace(month=1, day=1), today),
}


def supported_keywords() -> list[str]:
    return list(_DURING_KEYWORDS)


def _parse_literal(literal: str | None) -> date:
    try:
        return date.fromisoformat((literal or "").strip())
    except ValueError:
        raise ValidationError(
            f"Invalid date literal in BETWEEN clause: {literal!r}",
            reason="INVALID_DATE",
        ) from None


def resolve(
    date_range: DateRangeSpec | None,
    today: date | None = None,
    default_days: int = DEFAULT_WINDOW_DAYS,
) -> DateWindow:
    """Resolve *date_range* against *today* (defaults to the current date).

    No date range, or an unknown DURING keyword, yields the *default_days* window
    ending today.  BETWEEN bounds are taken verbatim, so an inverted pair gives
    a window whose ``days`` is 0.
    """
    today = today or date.today()
    default = DateWindow(start=today - timedelta(days=default_days), end=today)

    if date_range is None:
        return default

    if date_range.kind == DateRangeKind.BETWEEN:
        return DateWindow(
            start=_parse_literal(date_range.start_literal),
            end=_parse_literal(date_range.end_literal),
        )

    keyword = (date_range.keyword or "").upper()
    resolver = _DURING_KEYWORDS.get(keyword)
    if resolver is None:
        logger.warning("Unknown DURING keyword %r, using last %d days", date_range.keyword, default_days)
        return default

    start, end = resolver(today)
    return DateWindow(start=start, end=end)
