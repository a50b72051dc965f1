"""
Short-term projection of an indicator series by ordinary least squares over the point index, emitted as a connector point on the last actual value followed by evenly spaced forecast points.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple

import numpy as np

from config import settings
from engine.series import parse_numeric


@dataclass(frozen=True)
class ForecastPoint:
    date: date
    value: Optional[float]
    forecast: float
    is_forecast: bool


def _valid_points(points: Iterable[Tuple[date, object]]) -> List[Tuple[date, float]]:
    out: List[Tuple[date, float]] = []
    for day, raw in points:
        num = parse_numeric(raw)
        if num is not None:
            out.append((day, num))
    return out


def _linear_fit(vals: List[float]) -> tuple[float, float]:
    x = np.arange(len(vals), dtype=float)
    slope, intercept = np.polyfit(x, np.array(vals, dtype=float), 1)
    return float(slope), float(intercept)


def forecast(
    points: Iterable[Tuple[date, object]],
    periods: int | None = None,
    step_days: int | None = None,
) -> List[ForecastPoint]:
    """Project ``periods`` future values from chronological ``(date, value)`` pairs.

    Non-finite values are dropped before fitting; fewer than two valid points
    yield an empty list.
    """
    if periods is None:
        periods = settings.forecast_periods
    if step_days is None:
        step_days = settings.forecast_step_days

    valid = _valid_points(points)
    if len(valid) < 2:
        return []

    vals = [v for _, v in valid]
    slope, intercept = _linear_fit(vals)
    n = len(vals)
    last_date, last_value = valid[-1]
    digits = settings.forecast_round_digits

    out = [ForecastPoint(date=last_date, value=last_value, forecast=last_value, is_forecast=False)]
    for i in range(1, max(0, int(periods)) + 1):
        predicted = slope * (n - 1 + i) + intercept
        out.append(
            ForecastPoint(
                date=last_date + timedelta(days=i * step_days),
                value=None,
                forecast=round(predicted, digits),
                is_forecast=True,
            )
        )
    return out
