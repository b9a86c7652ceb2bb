"""Date manipulation utilities"""

from datetime import date
from typing import List, Tuple


def add_years(from_date: date, years: int) -> date:
    """Shift a date by whole years, mapping Feb 29 to Feb 28 in non-leap years"""
    try:
        return from_date.replace(year=from_date.year + years)
    except ValueError:
        return from_date.replace(year=from_date.year + years, day=28)


def trailing_months(as_of: date, count: int = 12) -> List[Tuple[int, int]]:
    """
    List (year, month) pairs for the `count` calendar months ending with as_of's month.

    Oldest first, e.g. as_of=2024-03-15, count=3 -> [(2024, 1), (2024, 2), (2024, 3)]
    """
    months = []
    for offset in range(count - 1, -1, -1):
        index = as_of.year * 12 + (as_of.month - 1) - offset
        months.append((index // 12, index % 12 + 1))
    return months


def days_between(start: date, end: date) -> int:
    return (end - start).days
