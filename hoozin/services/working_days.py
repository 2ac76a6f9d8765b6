# hoozin/services/working_days.py
from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional

_SATURDAY = 5
_SUNDAY = 6


def is_working_day(day: date) -> bool:
    return day.weekday() not in (_SATURDAY, _SUNDAY)


def next_working_day(day: date) -> date:
    """
    Saturday and Sunday move forward to the following Monday; weekdays are
    returned unchanged.
    """
    if day.weekday() == _SATURDAY:
        return day + timedelta(days=2)
    if day.weekday() == _SUNDAY:
        return day + timedelta(days=1)
    return day


def working_day_window(count: int, today: Optional[date] = None) -> List[date]:
    """
    `count` working days ending at `next_working_day(today)`, ascending.
    """
    if count < 1:
        raise ValueError("count must be at least 1")

    current = next_working_day(today or date.today())
    days = [current]
    while len(days) < count:
        current -= timedelta(days=1)
        if is_working_day(current):
            days.append(current)

    days.reverse()
    return days


def upcoming_working_days(count: int, today: Optional[date] = None) -> List[date]:
    """
    `count` working days starting at `next_working_day(today)`, ascending.
    """
    if count < 1:
        raise ValueError("count must be at least 1")

    days = [next_working_day(today or date.today())]
    while len(days) < count:
        days.append(next_working_day(days[-1] + timedelta(days=1)))
    return days
