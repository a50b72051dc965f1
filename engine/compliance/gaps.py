"""
Reporting gaps between consecutive submissions that are further apart than the indicator's cadence allows.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List

from config import GAP_CADENCE_DAYS, settings
from engine.enums import Frequency
from engine.indicator import Submission


@dataclass(frozen=True)
class ReportingGap:
    from_date: date
    to_date: date
    days_missing: int
    expected_submissions: int


def detect_gaps(
    submissions: Iterable[Submission],
    frequency: Frequency | str,
    tolerance: float | None = None,
) -> List[ReportingGap]:
    if tolerance is None:
        tolerance = settings.gap_tolerance
    cadence = GAP_CADENCE_DAYS[Frequency(frequency).value]

    days = sorted(s.reported_at for s in submissions)
    gaps: List[ReportingGap] = []
    for prev, curr in zip(days, days[1:]):
        span = (curr - prev).days
        if span > cadence * tolerance:
            gaps.append(
                ReportingGap(
                    from_date=prev,
                    to_date=curr,
                    days_missing=math.floor(span - cadence),
                    expected_submissions=math.floor(span / cadence) - 1,
                )
            )
    return gaps
