"""
Domain types for indicators, their anomaly configuration and submissions. Configuration invariants are checked on construction so that an invalid setup fails before any evaluation runs.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple

from engine.enums import Frequency, IndicatorType, OutlierMethod, TrendMethod
from engine.exceptions import ConfigurationError


def _coerce_enum(enum_cls, value, field_name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ConfigurationError(f"{field_name} must be one of: {allowed} (got {value!r})") from exc


def _require_positive(value: float, field_name: str) -> None:
    if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{field_name} must be a positive number (got {value!r})")


def _require_int(value, minimum: int, field_name: str) -> int:
    try:
        whole = int(value)
    except (TypeError, ValueError, OverflowError):
        whole = None
    if whole is None or whole != value or whole < minimum:
        raise ConfigurationError(f"{field_name} must be an integer >= {minimum} (got {value!r})")
    return whole


@dataclass(frozen=True)
class OutlierConfig:
    method: OutlierMethod
    threshold: float
    window_size: int
    min_points: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", _coerce_enum(OutlierMethod, self.method, "outlier.method"))
        _require_positive(self.threshold, "outlier.threshold")
        object.__setattr__(self, "window_size", _require_int(self.window_size, 2, "outlier.windowSize"))
        object.__setattr__(self, "min_points", _require_int(self.min_points, 2, "outlier.minPoints"))
        if self.min_points > self.window_size:
            raise ConfigurationError(
                f"outlier.minPoints ({self.min_points}) cannot exceed outlier.windowSize ({self.window_size})"
            )


@dataclass(frozen=True)
class TrendConfig:
    method: TrendMethod
    threshold: float
    window_size: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", _coerce_enum(TrendMethod, self.method, "trend.method"))
        _require_positive(self.threshold, "trend.threshold")
        object.__setattr__(self, "window_size", _require_int(self.window_size, 4, "trend.windowSize"))


@dataclass(frozen=True)
class AnomalyConfig:
    enabled: bool = False
    outlier: Optional[OutlierConfig] = None
    trend: Optional[TrendConfig] = None

    def history_span(self) -> int:
        """Number of trailing points any configured detector needs."""
        spans = [1]
        if self.outlier is not None:
            spans.append(self.outlier.window_size)
        if self.trend is not None:
            spans.append(self.trend.window_size)
        return max(spans)


@dataclass(frozen=True)
class CategoryDefinition:
    id: str
    label: str
    color: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise ConfigurationError("category id must be a non-empty string")
        if not isinstance(self.label, str) or not self.label.strip():
            raise ConfigurationError(f"category {self.id!r} must have a label")


@dataclass(frozen=True)
class CategoryConfig:
    allow_multiple: bool = False
    max_selections: Optional[int] = None
    required: bool = False
    allow_other: bool = False
    expected_entities: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.max_selections is not None:
            object.__setattr__(self, "max_selections", _require_int(self.max_selections, 1, "maxSelections"))
        object.__setattr__(self, "expected_entities", tuple(str(e) for e in self.expected_entities))


@dataclass(frozen=True)
class Indicator:
    id: str
    type: IndicatorType
    frequency: Frequency = Frequency.monthly
    min_expected: Optional[float] = None
    max_expected: Optional[float] = None
    categories: Tuple[CategoryDefinition, ...] = ()
    category_config: CategoryConfig = field(default_factory=CategoryConfig)
    anomaly_config: Optional[AnomalyConfig] = None
    baseline_value: Optional[float] = None
    target_value: Optional[float] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", _coerce_enum(IndicatorType, self.type, "type"))
        object.__setattr__(self, "frequency", _coerce_enum(Frequency, self.frequency, "frequency"))
        object.__setattr__(self, "categories", tuple(self.categories))

        seen: set[str] = set()
        for cat in self.categories:
            if cat.id in seen:
                raise ConfigurationError(f"Category ID '{cat.id}' is duplicated")
            seen.add(cat.id)

        if (
            self.min_expected is not None
            and self.max_expected is not None
            and self.min_expected > self.max_expected
        ):
            raise ConfigurationError(
                f"minExpected ({self.min_expected}) cannot exceed maxExpected ({self.max_expected})"
            )

    @property
    def is_numeric(self) -> bool:
        return self.type.is_numeric

    def category(self, category_id: str) -> Optional[CategoryDefinition]:
        for cat in self.categories:
            if cat.id == category_id:
                return cat
        return None


@dataclass(frozen=True)
class Submission:
    id: str
    reported_at: date
    value: str
    is_anomaly: bool = False
    anomaly_reason: Optional[str] = None
    evidence: Optional[str] = None
    disaggregation_key: Optional[str] = None
    submitted_at: Optional[date] = None

    @property
    def arrived_at(self) -> date:
        return self.submitted_at or self.reported_at
