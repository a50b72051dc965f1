"""
Ordered per-indicator submission series. Submissions live in an append-only list sorted by report date, with a parallel index of the positions that hold finite numeric values so trailing windows are plain slices.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import bisect
import math
from typing import Iterable, Iterator, List, Optional, Tuple

from engine.indicator import Submission


def parse_numeric(value: object) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        num = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    return num if math.isfinite(num) else None


class IndicatorSeries:
    def __init__(self, submissions: Iterable[Submission] = ()) -> None:
        # sorted() is stable, so equal dates keep insertion order
        self._items: List[Submission] = sorted(submissions, key=lambda s: s.reported_at)
        self._values: List[Optional[float]] = [parse_numeric(s.value) for s in self._items]
        self._finite: List[int] = [i for i, v in enumerate(self._values) if v is not None]

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, position: int) -> Submission:
        return self._items[position]

    def __iter__(self) -> Iterator[Submission]:
        return iter(self._items)

    @property
    def submissions(self) -> Tuple[Submission, ...]:
        return tuple(self._items)

    def value_at(self, position: int) -> Optional[float]:
        return self._values[position]

    def position_of(self, submission_id: str) -> int:
        for i, item in enumerate(self._items):
            if item.id == submission_id:
                return i
        raise KeyError(submission_id)

    def insert(self, submission: Submission) -> Tuple[int, bool]:
        """Insert after any entries with the same date; returns (position, backfilled)."""
        position = bisect.bisect_right(
            [s.reported_at for s in self._items], submission.reported_at
        )
        value = parse_numeric(submission.value)
        self._items.insert(position, submission)
        self._values.insert(position, value)
        self._finite = [i for i, v in enumerate(self._values) if v is not None]
        return position, position < len(self._items) - 1

    def trailing_values(self, position: int, size: int) -> List[float]:
        if size <= 0 or not self._items:
            return []
        end = bisect.bisect_right(self._finite, position)
        start = max(0, end - size)
        return [self._values[i] for i in self._finite[start:end]]  # type: ignore[misc]

    def numeric_points(self) -> List[Tuple[Submission, float]]:
        return [(self._items[i], self._values[i]) for i in self._finite]  # type: ignore[misc]
