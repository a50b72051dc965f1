"""
Reporting compliance of an indicator against its expected cadence: every calendar period in the range is classified on time, late or missing, and the same statistics are repeated per disaggregation key when submissions are tagged.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from config import settings
from engine.enums import Frequency, ReportStatus
from engine.indicator import Submission
from engine.periods import Period, locate, partition

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeriodStatus:
    period: str
    start: date
    end: date
    status: ReportStatus
    submissions: int = 0
    first_arrival: Optional[date] = None


@dataclass(frozen=True)
class ComplianceStats:
    expected_reports: int
    received_reports: int
    on_time_reports: int
    late_reports: int
    missing_reports: int
    compliance_rate: float
    last_reported_at: Optional[date] = None
    periods: Tuple[PeriodStatus, ...] = ()


@dataclass(frozen=True)
class ComplianceReport:
    frequency: Frequency
    start: date
    end: date
    overall: ComplianceStats
    by_disaggregation: Dict[str, ComplianceStats] = field(default_factory=dict)


def _classify(
    periods: Sequence[Period],
    submissions: Iterable[Submission],
    grace: timedelta,
) -> ComplianceStats:
    counts = [0] * len(periods)
    earliest: List[Optional[date]] = [None] * len(periods)
    last: Optional[date] = None

    for sub in submissions:
        idx = locate(periods, sub.reported_at)
        if idx < 0:
            continue
        counts[idx] += 1
        arrived = sub.arrived_at
        if earliest[idx] is None or arrived < earliest[idx]:
            earliest[idx] = arrived
        if last is None or sub.reported_at > last:
            last = sub.reported_at

    statuses: List[PeriodStatus] = []
    on_time = late = 0
    for p, n, first in zip(periods, counts, earliest):
        if n == 0:
            status = ReportStatus.missing
        elif first is not None and first <= p.end + grace:
            status = ReportStatus.on_time
            on_time += 1
        else:
            status = ReportStatus.late
            late += 1
        statuses.append(PeriodStatus(p.label, p.start, p.end, status, n, first))

    expected = len(periods)
    received = on_time + late
    return ComplianceStats(
        expected_reports=expected,
        received_reports=received,
        on_time_reports=on_time,
        late_reports=late,
        missing_reports=expected - received,
        compliance_rate=received / expected if expected else 1.0,
        last_reported_at=last,
        periods=tuple(statuses),
    )


def _disaggregation_keys(submissions: Sequence[Submission], expected_entities: Sequence[str]) -> List[str]:
    keys = list(dict.fromkeys(str(e) for e in expected_entities))
    tagged = sorted({s.disaggregation_key for s in submissions if s.disaggregation_key})
    keys.extend(k for k in tagged if k not in keys)
    return keys


def compute_compliance(
    frequency: Frequency | str,
    start: date,
    end: date,
    submissions: Iterable[Submission],
    grace_days: int | None = None,
    expected_entities: Sequence[str] = (),
) -> ComplianceReport:
    """Expected vs received reports for ``[start, end]`` at ``frequency``.

    A period counts as received when at least one submission reports into
    it; it is on time when the earliest of those arrived no later than the
    period end plus ``grace_days``. With no expected periods the rate is 1.0.
    Untagged submissions count towards the overall figures only.
    """
    frequency = Frequency(frequency)
    if grace_days is None:
        grace_days = settings.compliance_grace_days
    grace = timedelta(days=max(0, int(grace_days)))

    subs = list(submissions)
    periods = partition(start, end, frequency.granularity())
    overall = _classify(periods, subs, grace)

    by_key: Dict[str, ComplianceStats] = {}
    for key in _disaggregation_keys(subs, expected_entities):
        by_key[key] = _classify(periods, (s for s in subs if s.disaggregation_key == key), grace)

    log.debug(
        "compliance %s %s..%s: %d/%d received, %d keys",
        frequency.value, start, end, overall.received_reports, overall.expected_reports, len(by_key),
    )
    return ComplianceReport(frequency, start, end, overall, by_key)


def rank_by_compliance(by_disaggregation: Dict[str, ComplianceStats]) -> List[Tuple[str, ComplianceStats]]:
    return sorted(by_disaggregation.items(), key=lambda kv: (-kv[1].compliance_rate, kv[0]))
