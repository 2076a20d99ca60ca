"""Date helpers shared by the test modules"""

from datetime import date, datetime

# A Monday; day_of_week 1
MONDAY = date(2025, 3, 3)
TUESDAY = date(2025, 3, 4)


def at(hour: int, minute: int = 0, on: date = MONDAY) -> datetime:
    """Naive datetime on the given day (SQLite drops tzinfo)"""
    return datetime(on.year, on.month, on.day, hour, minute)
