"""
Enumerations for indicator types, reporting cadences, detector methods and report statuses

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class IndicatorType(str, Enum):
    number = "NUMBER"
    percentage = "PERCENTAGE"
    currency = "CURRENCY"
    boolean = "BOOLEAN"
    text = "TEXT"
    categorical = "CATEGORICAL"

    @classmethod
    def _missing_(cls, value: object) -> Optional[IndicatorType]:
        text = str(value).strip().upper()
        if text == "PERCENT":
            return cls.percentage
        for member in cls:
            if member.value == text:
                return member
        return None

    @property
    def is_numeric(self) -> bool:
        return self in (IndicatorType.number, IndicatorType.percentage, IndicatorType.currency)


class GroupBy(str, Enum):
    day = "day"
    week = "week"
    month = "month"
    quarter = "quarter"
    year = "year"


class Frequency(str, Enum):
    daily = "DAILY"
    weekly = "WEEKLY"
    monthly = "MONTHLY"
    quarterly = "QUARTERLY"
    yearly = "YEARLY"

    @classmethod
    def _missing_(cls, value: object) -> Optional[Frequency]:
        text = str(value).strip().upper()
        for member in cls:
            if member.value == text:
                return member
        return None

    def granularity(self) -> GroupBy:
        return _FREQUENCY_GRANULARITY[self]


_FREQUENCY_GRANULARITY = {
    Frequency.daily: GroupBy.day,
    Frequency.weekly: GroupBy.week,
    Frequency.monthly: GroupBy.month,
    Frequency.quarterly: GroupBy.quarter,
    Frequency.yearly: GroupBy.year,
}


class OutlierMethod(str, Enum):
    mad = "MAD"
    iqr = "IQR"


class TrendMethod(str, Enum):
    slope_shift = "SLOPE_SHIFT"
    mean_shift = "MEAN_SHIFT"


class BackfillPolicy(str, Enum):
    recompute = "recompute"
    insert_only = "insert_only"


class ReportStatus(str, Enum):
    on_time = "on_time"
    late = "late"
    missing = "missing"


class TrendDirection(str, Enum):
    increasing = "increasing"
    decreasing = "decreasing"
    stable = "stable"
