"""
Category selections for categorical indicators: parsing and validating comma-joined selections, counting them into a distribution, and deriving the most frequent category, per-disaggregation distributions and a recent-vs-earlier trend.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from config import settings
from engine.exceptions import CategoryValidationError
from engine.indicator import Indicator, Submission

OTHER_CATEGORY = "other"
UNGROUPED_KEY = "_ungrouped"
UNGROUPED_LABEL = "No Disaggregation"

REQUIRED_CATEGORY = "REQUIRED_CATEGORY"
MULTIPLE_NOT_ALLOWED = "MULTIPLE_NOT_ALLOWED"
MAX_SELECTIONS_EXCEEDED = "MAX_SELECTIONS_EXCEEDED"
INVALID_CATEGORY_VALUE = "INVALID_CATEGORY_VALUE"


@dataclass(frozen=True)
class CategoryCount:
    category_id: str
    label: str
    count: int
    percentage: float
    color: Optional[str] = None


@dataclass(frozen=True)
class DisaggregatedDistribution:
    disaggregation_key: str
    disaggregation_label: str
    distribution: Tuple[CategoryCount, ...]
    total_submissions: int
    last_reported_at: Optional[date]


@dataclass(frozen=True)
class CategoryTrend:
    current: Optional[str]
    previous: Optional[str]
    is_changing: bool


def parse_category_value(value: object) -> List[str]:
    """Split a comma-joined selection into distinct, trimmed ids."""
    if value is None:
        return []
    ids = (part.strip() for part in str(value).split(","))
    return list(dict.fromkeys(i for i in ids if i))


def validate_selection(value: object, indicator: Indicator) -> List[str]:
    config = indicator.category_config
    selected = parse_category_value(value)

    if not selected:
        if config.required:
            raise CategoryValidationError(REQUIRED_CATEGORY, "Category selection is required")
        return []

    if not config.allow_multiple and len(selected) > 1:
        raise CategoryValidationError(MULTIPLE_NOT_ALLOWED, "Multiple category selections are not allowed")

    if config.max_selections and len(selected) > config.max_selections:
        raise CategoryValidationError(
            MAX_SELECTIONS_EXCEEDED, f"Maximum {config.max_selections} selections allowed"
        )

    for cid in selected:
        if cid == OTHER_CATEGORY and config.allow_other:
            continue
        if indicator.category(cid) is None:
            raise CategoryValidationError(INVALID_CATEGORY_VALUE, f"Invalid category ID: {cid}")
    return selected


def tally(submissions: Iterable[Submission], indicator: Indicator) -> Tuple[Dict[str, int], int]:
    """Count selections per id and the number of submissions counted.

    Defined categories come first in definition order, unknown ids follow in
    the order they were first seen.
    """
    counts: Dict[str, int] = {cat.id: 0 for cat in indicator.categories}
    total = 0
    for sub in submissions:
        total += 1
        for cid in parse_category_value(sub.value):
            counts[cid] = counts.get(cid, 0) + 1
    return counts, total


def to_counts(counts: Dict[str, int], total: int, indicator: Indicator) -> List[CategoryCount]:
    out: List[CategoryCount] = []
    for cid, n in counts.items():
        cat = indicator.category(cid)
        out.append(
            CategoryCount(
                category_id=cid,
                label=cat.label if cat else cid,
                count=n,
                # multi-select periods can exceed 100 in total
                percentage=n / total * 100 if total else 0.0,
                color=cat.color if cat else None,
            )
        )
    return out


def category_distribution(submissions: Iterable[Submission], indicator: Indicator) -> List[CategoryCount]:
    """Distribution over all ``submissions``, most selected first."""
    counts, total = tally(submissions, indicator)
    return sorted(to_counts(counts, total, indicator), key=lambda c: -c.count)


def most_frequent(distribution: Sequence[CategoryCount]) -> Optional[CategoryCount]:
    best: Optional[CategoryCount] = None
    for c in distribution:
        if c.count > 0 and (best is None or c.count > best.count):
            best = c
    return best


def disaggregated_distribution(
    submissions: Iterable[Submission],
    indicator: Indicator,
) -> List[DisaggregatedDistribution]:
    groups: Dict[str, List[Submission]] = {}
    for sub in submissions:
        groups.setdefault(sub.disaggregation_key or UNGROUPED_KEY, []).append(sub)

    out = [
        DisaggregatedDistribution(
            disaggregation_key=key,
            disaggregation_label=UNGROUPED_LABEL if key == UNGROUPED_KEY else key,
            distribution=tuple(category_distribution(subs, indicator)),
            total_submissions=len(subs),
            last_reported_at=max(s.reported_at for s in subs),
        )
        for key, subs in groups.items()
    ]
    return sorted(out, key=lambda d: -d.total_submissions)


def category_trend(
    submissions: Iterable[Submission],
    indicator: Indicator,
    as_of: date,
    window_days: int | None = None,
) -> CategoryTrend:
    """Most frequent category inside the trailing window vs before it."""
    if window_days is None:
        window_days = settings.category_trend_window_days
    cutoff = as_of - timedelta(days=window_days)

    subs = list(submissions)
    recent = most_frequent(category_distribution((s for s in subs if s.reported_at >= cutoff), indicator))
    earlier = most_frequent(category_distribution((s for s in subs if s.reported_at < cutoff), indicator))

    current = recent.category_id if recent else None
    previous = earlier.category_id if earlier else None
    return CategoryTrend(
        current=current,
        previous=previous,
        is_changing=current is not None and previous is not None and current != previous,
    )
