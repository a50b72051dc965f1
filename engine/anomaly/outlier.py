"""
Pointwise outlier test over a trailing window of indicator values, using either the median absolute deviation (robust z-score) or the interquartile range (boxplot fences).

When MAD or IQR is zero the spread falls back to `outlier_spread_floor` times |median| (5% by default), so [10, 10, 10, 10, 12] under MAD at 3.5 scores about 2.7 and is not flagged. Setting the floor to 0 restores the strict rule for a constant window: flag exactly when the value differs from the median.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Sequence

import numpy as np

from config import settings
from engine.result import DetectionResult
from engine.enums import OutlierMethod
from engine.indicator import OutlierConfig

log = logging.getLogger(__name__)


def _floor_spread(median: float) -> float:
    return max(0.0, float(settings.outlier_spread_floor)) * abs(median)


def _exact_match(x: float, center: float) -> DetectionResult:
    return DetectionResult(
        flag=x != center,
        detail=f"constant window at {center:g}, value {x:g}",
    )


def _mad_test(arr: np.ndarray, threshold: float) -> DetectionResult:
    x = float(arr[-1])
    median = float(np.median(arr))
    mad = float(np.median(np.abs(arr - median)))

    scale = mad if mad > 0 else _floor_spread(median)
    if scale == 0:
        return _exact_match(x, median)

    z = settings.anomaly_mad_scale * (x - median) / scale
    detail = f"{z:+.2f}" if mad > 0 else f"{z:+.2f} (zero MAD, floor spread {scale:.4g})"
    return DetectionResult(flag=abs(z) > threshold, detail=detail, score=round(z, 4))


def _iqr_test(arr: np.ndarray, threshold: float) -> DetectionResult:
    x = float(arr[-1])
    q1, q3 = (float(q) for q in np.percentile(arr, [25, 75]))
    iqr = q3 - q1

    spread = iqr if iqr > 0 else _floor_spread(float(np.median(arr)))
    if spread == 0:
        return _exact_match(x, q1)

    lower = q1 - threshold * spread
    upper = q3 + threshold * spread
    if x > q3:
        score = (x - q3) / spread
    elif x < q1:
        score = (x - q1) / spread
    else:
        score = 0.0
    flagged = x < lower or x > upper
    where = "outside" if flagged else "within"
    return DetectionResult(
        flag=flagged,
        detail=f"{x:g} {where} [{lower:.4g}, {upper:.4g}]",
        score=round(score, 4),
    )


_TESTS: Dict[OutlierMethod, Callable[[np.ndarray, float], DetectionResult]] = {
    OutlierMethod.mad: _mad_test,
    OutlierMethod.iqr: _iqr_test,
}


def detect_outlier(window: Sequence[float], config: OutlierConfig) -> DetectionResult:
    """Test the last value of ``window`` against the values before it.

    ``window`` is chronological and already includes the target value; only
    its ``config.window_size`` most recent entries are used.
    """
    recent = list(window)[-config.window_size:]
    if len(recent) < config.min_points:
        log.debug("outlier test skipped: %d of %d points", len(recent), config.min_points)
        return DetectionResult.not_evaluable(
            f"{len(recent)} of {config.min_points} points required"
        )

    arr = np.asarray(recent, dtype=float)
    return _TESTS[config.method](arr, float(config.threshold))
