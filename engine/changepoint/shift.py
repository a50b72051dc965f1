"""
Trend shift detection comparing the two halves of a trailing window, either by their least-squares slopes or by their means, to flag structural changes in an indicator's trajectory.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Sequence, Tuple

import numpy as np
from scipy.stats import linregress

from engine.result import DetectionResult
from engine.enums import TrendMethod
from engine.indicator import TrendConfig

log = logging.getLogger(__name__)


def _halves(arr: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    half = len(arr) // 2
    # odd windows lose their oldest point
    return arr[len(arr) - 2 * half: len(arr) - half], arr[len(arr) - half:]


def _slope(vals: np.ndarray) -> float:
    return float(linregress(np.arange(len(vals), dtype=float), vals).slope)


def _slope_shift(prior: np.ndarray, recent: np.ndarray, threshold: float) -> DetectionResult:
    before, after = _slope(prior), _slope(recent)
    delta = after - before
    return DetectionResult(
        flag=abs(delta) > threshold,
        detail=f"slope {before:+.3g} -> {after:+.3g}",
        score=round(delta, 4),
    )


def _mean_shift(prior: np.ndarray, recent: np.ndarray, threshold: float) -> DetectionResult:
    before, after = float(np.mean(prior)), float(np.mean(recent))
    delta = after - before
    return DetectionResult(
        flag=abs(delta) > threshold,
        detail=f"mean {before:.4g} -> {after:.4g}",
        score=round(delta, 4),
    )


_TESTS: Dict[TrendMethod, Callable[[np.ndarray, np.ndarray, float], DetectionResult]] = {
    TrendMethod.slope_shift: _slope_shift,
    TrendMethod.mean_shift: _mean_shift,
}


def detect_shift(window: Sequence[float], config: TrendConfig) -> DetectionResult:
    recent = list(window)[-config.window_size:]
    if config.window_size < 4 or len(recent) < config.window_size:
        log.debug("trend test skipped: %d of %d points", len(recent), config.window_size)
        return DetectionResult.not_evaluable(
            f"{len(recent)} of {config.window_size} points required"
        )

    prior, latest = _halves(np.asarray(recent, dtype=float))
    return _TESTS[config.method](prior, latest, float(config.threshold))
