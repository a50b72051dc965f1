"""
Headline statistics for an indicator: submission and anomaly counts, latest value, spread, a coarse trend label and progress against baseline and target, or the category distribution for categorical indicators.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from config import settings
from engine.categories.distribution import CategoryCount, category_distribution, most_frequent
from engine.enums import IndicatorType, TrendDirection
from engine.indicator import Indicator, Submission
from engine.series import IndicatorSeries


@dataclass(frozen=True)
class IndicatorSummary:
    submission_count: int
    anomaly_count: int
    anomaly_rate: float
    last_submission_date: date
    current_value: Optional[float] = None
    average: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    trend: Optional[TrendDirection] = None
    progress_to_target: Optional[float] = None
    progress_from_baseline: Optional[float] = None
    category_distribution: Tuple[CategoryCount, ...] = ()
    most_frequent: Optional[CategoryCount] = None


def trend_direction(values: Sequence[float], ratio: float | None = None) -> Optional[TrendDirection]:
    """Label a chronological series by the share of step-wise rises and falls."""
    if ratio is None:
        ratio = settings.stats_trend_ratio
    if len(values) < settings.stats_trend_min_points:
        return None

    steps = np.diff(np.asarray(values, dtype=float))
    total = len(steps)
    if np.count_nonzero(steps > 0) / total > ratio:
        return TrendDirection.increasing
    if np.count_nonzero(steps < 0) / total > ratio:
        return TrendDirection.decreasing
    return TrendDirection.stable


def summarize(indicator: Indicator, submissions: Iterable[Submission]) -> Optional[IndicatorSummary]:
    series = IndicatorSeries(submissions)
    if not len(series):
        return None

    count = len(series)
    anomalies = sum(1 for s in series if s.is_anomaly)
    base = dict(
        submission_count=count,
        anomaly_count=anomalies,
        anomaly_rate=anomalies / count * 100,
        last_submission_date=series[count - 1].reported_at,
    )

    if indicator.type is IndicatorType.categorical:
        dist = category_distribution(series, indicator) if indicator.categories else []
        return IndicatorSummary(
            **base,
            category_distribution=tuple(dist),
            most_frequent=most_frequent(dist),
        )

    values: List[float] = [v for _, v in series.numeric_points()]
    if not values:
        return IndicatorSummary(**base)

    current = values[-1]
    return IndicatorSummary(
        **base,
        current_value=current,
        average=float(np.mean(values)),
        min=float(np.min(values)),
        max=float(np.max(values)),
        trend=trend_direction(values),
        progress_to_target=current / indicator.target_value * 100 if indicator.target_value else None,
        progress_from_baseline=current - indicator.baseline_value if indicator.baseline_value is not None else None,
    )
