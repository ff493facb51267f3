"""Date manipulation utilities"""

from datetime import datetime, time, timezone
from typing import List

from dateutil.relativedelta import relativedelta


def start_of_month(moment: datetime) -> datetime:
    return datetime.combine(moment.date().replace(day=1), time.min)


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.max)


def subtract_months(moment: datetime, months: int) -> datetime:
    """Shift back by whole months, clamping to the last day of shorter months (Mar 31 -> Feb 28)"""
    return moment - relativedelta(months=months)


MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def month_key(moment: datetime) -> str:
    """Label used for monthly buckets, e.g. "Oct 2026", independent of the process locale"""
    return f"{MONTH_ABBREVIATIONS[moment.month - 1]} {moment.year}"


def last_n_month_starts(now: datetime, months: int) -> List[datetime]:
    """Start of each of the last `months` months, oldest first, ending with the current month"""
    current = start_of_month(now)
    return [subtract_months(current, offset) for offset in range(months - 1, -1, -1)]


def days_between(earlier: datetime, later: datetime) -> int:
    """Whole calendar days from earlier to later (negative if later is before earlier)"""
    return (later.date() - earlier.date()).days


def utc_now() -> datetime:
    """Naive UTC now, comparable with stored issue dates"""
    return datetime.now(timezone.utc).replace(tzinfo=None)
