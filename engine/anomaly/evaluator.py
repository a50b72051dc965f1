"""
Anomaly evaluation for indicator submissions: hard range check, then the configured outlier test, then the configured trend shift test, first match wins. Evaluation only ever looks at submissions reported on or before the one being judged.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple

from config import settings
from engine.anomaly.outlier import detect_outlier
from engine.changepoint.shift import detect_shift
from engine.enums import BackfillPolicy
from engine.indicator import Indicator, Submission
from engine.series import IndicatorSeries

log = logging.getLogger(__name__)

CHECK_RANGE = "range"
CHECK_OUTLIER = "outlier"
CHECK_TREND = "trend"


@dataclass(frozen=True)
class AnomalyAssessment:
    submission_id: str
    is_anomaly: bool
    reason: str = ""
    check: Optional[str] = None
    score: Optional[float] = None


def _range_violation(indicator: Indicator, x: float) -> Optional[str]:
    if indicator.min_expected is not None and x < indicator.min_expected:
        return f"Value below expected minimum ({indicator.min_expected:g})"
    if indicator.max_expected is not None and x > indicator.max_expected:
        return f"Value exceeds expected maximum ({indicator.max_expected:g})"
    return None


def evaluate_at(indicator: Indicator, series: IndicatorSeries, position: int) -> AnomalyAssessment:
    submission = series[position]
    clean = AnomalyAssessment(submission_id=submission.id, is_anomaly=False)

    if not indicator.is_numeric:
        return clean
    x = series.value_at(position)
    if x is None:
        return clean

    reason = _range_violation(indicator, x)
    if reason:
        return AnomalyAssessment(submission.id, True, reason, CHECK_RANGE)

    config = indicator.anomaly_config
    if config is None or not config.enabled:
        return clean

    if config.outlier is not None:
        window = series.trailing_values(position, config.outlier.window_size)
        result = detect_outlier(window, config.outlier)
        if result.flag:
            return AnomalyAssessment(
                submission.id,
                True,
                f"{config.outlier.method.value} outlier, score={result.detail}",
                CHECK_OUTLIER,
                result.score,
            )

    if config.trend is not None:
        window = series.trailing_values(position, config.trend.window_size)
        result = detect_shift(window, config.trend)
        if result.flag:
            return AnomalyAssessment(
                submission.id,
                True,
                f"{config.trend.method.value} trend shift detected ({result.detail})",
                CHECK_TREND,
                result.score,
            )

    return clean


def recompute(indicator: Indicator, submissions: Iterable[Submission]) -> List[AnomalyAssessment]:
    """Batch mode: re-run evaluation over the whole series in report order."""
    series = IndicatorSeries(submissions)
    return [evaluate_at(indicator, series, i) for i in range(len(series))]


def place(history: Iterable[Submission], submission_id: str) -> Tuple[IndicatorSeries, int, bool]:
    """Series of ``history`` with ``submission_id`` inserted after its equal-date peers.

    Returns the series, the submission's position and whether it landed
    before existing submissions.
    """
    items = list(history)
    target = next((s for s in items if s.id == submission_id), None)
    if target is None:
        raise KeyError(submission_id)
    series = IndicatorSeries(s for s in items if s.id != submission_id)
    position, backfilled = series.insert(target)
    return series, position, backfilled


def evaluate_insert(
    indicator: Indicator,
    history: Iterable[Submission],
    submission_id: str,
    policy: BackfillPolicy | str | None = None,
) -> List[AnomalyAssessment]:
    """Insert-time mode for a submission already present in ``history``.

    The first assessment is always the inserted submission. When it was
    backfilled before existing submissions and the policy is ``recompute``,
    assessments for every later submission follow in report order.
    """
    policy = BackfillPolicy(policy or settings.backfill_policy)
    series, position, backfilled = place(history, submission_id)

    assessments = [evaluate_at(indicator, series, position)]
    later = range(position + 1, len(series))
    if backfilled and policy is BackfillPolicy.recompute:
        log.debug(
            "backfilled submission %s on indicator %s: re-evaluating %d later points",
            submission_id, indicator.id, len(later),
        )
        assessments.extend(evaluate_at(indicator, series, i) for i in later)
    return assessments


def annotate(submission: Submission, assessment: AnomalyAssessment) -> Submission:
    return replace(
        submission,
        is_anomaly=assessment.is_anomaly,
        anomaly_reason=assessment.reason or None,
    )


def changed(
    submissions: Sequence[Submission],
    assessments: Iterable[AnomalyAssessment],
) -> List[AnomalyAssessment]:
    """Assessments whose flag or reason differs from what is stored."""
    stored = {s.id: s for s in submissions}
    out: List[AnomalyAssessment] = []
    for a in assessments:
        current = stored.get(a.submission_id)
        if current is None:
            out.append(a)
            continue
        if current.is_anomaly != a.is_anomaly or (current.anomaly_reason or "") != a.reason:
            out.append(a)
    return out
