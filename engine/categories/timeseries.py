"""
Category distribution per calendar period for categorical indicators. Every period of the range is emitted, including empty ones, so charts keep a continuous axis.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Tuple

from engine.categories.distribution import CategoryCount, tally, to_counts
from engine.enums import GroupBy
from engine.indicator import Indicator, Submission
from engine.periods import locate, partition

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryPeriod:
    period: str
    start_date: date
    end_date: date
    category_distribution: Tuple[CategoryCount, ...]
    total_submissions: int


def category_time_series(
    indicator: Indicator,
    submissions: Iterable[Submission],
    start: date,
    end: date,
    group_by: GroupBy | str = GroupBy.month,
) -> List[CategoryPeriod]:
    periods = partition(start, end, group_by)
    buckets: List[List[Submission]] = [[] for _ in periods]
    for sub in submissions:
        idx = locate(periods, sub.reported_at)
        if idx >= 0:
            buckets[idx].append(sub)

    out: List[CategoryPeriod] = []
    for p, subs in zip(periods, buckets):
        counts, total = tally(subs, indicator)
        out.append(
            CategoryPeriod(
                period=p.label,
                start_date=p.start,
                end_date=p.end,
                category_distribution=tuple(to_counts(counts, total, indicator)),
                total_submissions=total,
            )
        )

    unknown = {
        c.category_id
        for bucket in out
        for c in bucket.category_distribution
        if indicator.category(c.category_id) is None
    }
    if unknown:
        log.debug("indicator %s: unknown category ids kept as-is: %s", indicator.id, sorted(unknown))
    return out
