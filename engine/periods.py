"""
Calendar partitioning of a date range into reporting periods (days, 7-day weeks, calendar months, quarters and years), shared by compliance and category aggregation so both count against the same buckets.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, List, Sequence

from engine.enums import GroupBy
from engine.exceptions import ConfigurationError


@dataclass(frozen=True)
class Period:
    label: str
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def _month_end(year: int, month: int) -> date:
    if month == 12:
        return date(year, 12, 31)
    return date(year, month + 1, 1) - timedelta(days=1)


def _quarter(day: date) -> int:
    return (day.month - 1) // 3 + 1


def _bucket(day: date, group_by: GroupBy, anchor: date) -> Period:
    if group_by is GroupBy.day:
        return Period(day.isoformat(), day, day)
    if group_by is GroupBy.week:
        offset = (day - anchor).days // 7 * 7
        start = anchor + timedelta(days=offset)
        return Period(f"Week of {start.isoformat()}", start, start + timedelta(days=6))
    if group_by is GroupBy.month:
        start = day.replace(day=1)
        return Period(f"{day.year}-{day.month:02d}", start, _month_end(day.year, day.month))
    if group_by is GroupBy.quarter:
        q = _quarter(day)
        first = 3 * (q - 1) + 1
        return Period(f"{day.year}-Q{q}", date(day.year, first, 1), _month_end(day.year, first + 2))
    return Period(str(day.year), date(day.year, 1, 1), date(day.year, 12, 31))


def iter_periods(start: date, end: date, group_by: GroupBy | str) -> Iterator[Period]:
    """Yield consecutive periods covering ``[start, end]``.

    Weeks are 7-day blocks counted from ``start``; months, quarters and years
    follow the calendar. The first and last periods are clipped to the range,
    while labels keep naming the full calendar bucket.
    """
    group_by = GroupBy(group_by)
    if end < start:
        raise ConfigurationError(f"endDate ({end}) is before startDate ({start})")

    cursor = start
    while cursor <= end:
        bucket = _bucket(cursor, group_by, start)
        yield Period(bucket.label, max(bucket.start, start), min(bucket.end, end))
        cursor = bucket.end + timedelta(days=1)


def partition(start: date, end: date, group_by: GroupBy | str) -> List[Period]:
    return list(iter_periods(start, end, group_by))


def locate(periods: Sequence[Period], day: date) -> int:
    """Index of the period holding ``day``, or -1."""
    lo, hi = 0, len(periods) - 1
    while lo <= hi:
        mid = (lo + hi) // 2
        p = periods[mid]
        if day < p.start:
            hi = mid - 1
        elif day > p.end:
            lo = mid + 1
        else:
            return mid
    return -1
