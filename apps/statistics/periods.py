"""
Calendar windows used by the statistics endpoints.

A window is a ``(start, end)`` pair of aware datetimes, half-open:
``start <= date < end``. Month and year boundaries are taken in the
configured local time zone.
"""

import calendar
from datetime import datetime, timedelta
from typing import Optional

from django.db import models
from django.utils import timezone

from .exceptions import InvalidPeriodError


class Period(models.TextChoices):
    WEEK = 'week', 'Week'
    MONTH = 'month', 'Month'
    YEAR = 'year', 'Year'
    ALL = 'all', 'All Time'


def add_months(moment: datetime, months: int) -> datetime:
    """
    Shift by whole calendar months, clamping to the last day of the month.

    Example:
        >>> add_months(datetime(2024, 1, 31), 1)
        datetime.datetime(2024, 2, 29, 0, 0)
        >>> add_months(datetime(2024, 3, 15), -3)
        datetime.datetime(2023, 12, 15, 0, 0)
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _local(now: Optional[datetime]) -> datetime:
    return timezone.localtime(now or timezone.now())


def start_of_month(now: Optional[datetime] = None) -> datetime:
    return _local(now).replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def start_of_year(now: Optional[datetime] = None) -> datetime:
    return start_of_month(now).replace(month=1)


def month_window(now: Optional[datetime] = None) -> tuple:
    start = start_of_month(now)
    return start, add_months(start, 1)


def previous_month_window(now: Optional[datetime] = None) -> tuple:
    end = start_of_month(now)
    return add_months(end, -1), end


def year_window(now: Optional[datetime] = None) -> tuple:
    start = start_of_year(now)
    return start, start.replace(year=start.year + 1)


def previous_year_window(now: Optional[datetime] = None) -> tuple:
    end = start_of_year(now)
    return end.replace(year=end.year - 1), end


def period_start(period: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Earliest date included by a rolling period, or None for all time.

    week is the last 7 days, month and year go back one calendar month or
    year from now.

    Raises:
        InvalidPeriodError: If period is not week, month, year or all
    """
    now = _local(now)

    if period == Period.WEEK:
        return now - timedelta(days=7)
    if period == Period.MONTH:
        return add_months(now, -1)
    if period == Period.YEAR:
        return add_months(now, -12)
    if period == Period.ALL:
        return None

    raise InvalidPeriodError(
        f"Invalid period: '{period}'. Valid options: {', '.join(Period.values)}"
    )
