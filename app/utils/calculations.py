import calendar
from datetime import date
from typing import Iterable, Optional, Tuple


def month_bounds(today: date) -> Tuple[date, date]:
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def resolve_window(
    from_date: Optional[date],
    to_date: Optional[date],
    today: Optional[date] = None,
) -> Tuple[date, date]:
    """Fill missing bounds with the first/last day of the current month."""
    first, last = month_bounds(today or date.today())
    return from_date or first, to_date or last


def grand_total(items: Iterable[dict]) -> float:
    # left-to-right over the grouped rows, same order as returned
    total = 0.0
    for item in items:
        total += item["total"]
    return total
