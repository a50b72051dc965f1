"""
Translation of registry JSON records into engine domain objects. Both the current field names and the legacy ones (dataType, minValue, maxValue, reportingFrequency, categoryValue, createdAt) are accepted, and omitted anomaly settings fall back to the configured defaults.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import json
import math
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from config import settings
from datasources.exceptions import InvalidQuery
from engine.enums import OutlierMethod
from engine.exceptions import ConfigurationError
from engine.indicator import (
    AnomalyConfig,
    CategoryConfig,
    CategoryDefinition,
    Indicator,
    OutlierConfig,
    Submission,
    TrendConfig,
)


def _pick(record: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    for name in names:
        if record.get(name) is not None:
            return record[name]
    return default


def _maybe_json(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError as exc:
            raise InvalidQuery(f"malformed JSON field in registry record: {value[:80]!r}") from exc
    return value


def _optional_float(value: Any, field_name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        num = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{field_name} must be numeric (got {value!r})") from exc
    if not math.isfinite(num):
        raise ConfigurationError(f"{field_name} must be finite (got {value!r})")
    return num


def parse_date(value: Any, field_name: str = "reportedAt") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    try:
        # full timestamps reduce to their calendar date
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise InvalidQuery(f"{field_name} is not an ISO date: {value!r}") from exc


def parse_outlier(raw: Optional[Mapping[str, Any]]) -> Optional[OutlierConfig]:
    if raw is None:
        return None
    method = raw.get("method") or settings.outlier_default_method
    # unknown methods are rejected by OutlierConfig itself
    default_threshold = (
        settings.outlier_default_threshold_iqr
        if str(method) == OutlierMethod.iqr.value
        else settings.outlier_default_threshold_mad
    )
    return OutlierConfig(
        method=method,
        threshold=_pick(raw, "threshold", default=default_threshold),
        window_size=_pick(raw, "windowSize", "window_size", default=settings.outlier_default_window),
        min_points=_pick(raw, "minPoints", "min_points", default=settings.outlier_default_min_points),
    )


def parse_trend(raw: Optional[Mapping[str, Any]]) -> Optional[TrendConfig]:
    if raw is None:
        return None
    return TrendConfig(
        method=raw.get("method") or settings.trend_default_method,
        threshold=_pick(raw, "threshold", default=settings.trend_default_threshold),
        window_size=_pick(raw, "windowSize", "window_size", default=settings.trend_default_window),
    )


def parse_anomaly_config(raw: Any) -> Optional[AnomalyConfig]:
    raw = _maybe_json(raw)
    if not raw:
        return None
    if not isinstance(raw, Mapping):
        raise ConfigurationError("anomalyConfig must be an object")
    return AnomalyConfig(
        enabled=bool(raw.get("enabled", False)),
        outlier=parse_outlier(raw.get("outlier")),
        trend=parse_trend(raw.get("trend")),
    )


def parse_categories(raw: Any) -> List[CategoryDefinition]:
    raw = _maybe_json(raw) or []
    if not isinstance(raw, list):
        raise ConfigurationError("categories must be a list")
    return [
        CategoryDefinition(
            id=str(item.get("id", "")),
            label=str(item.get("label", "")),
            color=item.get("color"),
            description=item.get("description"),
        )
        for item in raw
    ]


def parse_category_config(raw: Any) -> CategoryConfig:
    raw = _maybe_json(raw) or {}
    if not isinstance(raw, Mapping):
        raise ConfigurationError("categoryConfig must be an object")

    entities = raw.get("expectedEntities")
    if entities is None:
        dims = raw.get("disaggregationDimensions") or []
        if dims and raw.get("expectedReportingEntities"):
            entities = dims[0].get("values") or []
    return CategoryConfig(
        allow_multiple=bool(raw.get("allowMultiple", False)),
        max_selections=raw.get("maxSelections"),
        required=bool(raw.get("required", False)),
        allow_other=bool(raw.get("allowOther", False)),
        expected_entities=tuple(entities or ()),
    )


def parse_indicator(record: Mapping[str, Any]) -> Indicator:
    if record.get("id") is None:
        raise InvalidQuery("registry indicator record has no id")
    return Indicator(
        id=str(record["id"]),
        type=_pick(record, "type", "dataType", default="NUMBER"),
        frequency=_pick(record, "frequency", "reportingFrequency", default="MONTHLY"),
        min_expected=_optional_float(_pick(record, "minExpected", "minValue"), "minExpected"),
        max_expected=_optional_float(_pick(record, "maxExpected", "maxValue"), "maxExpected"),
        categories=tuple(parse_categories(record.get("categories"))),
        category_config=parse_category_config(record.get("categoryConfig")),
        anomaly_config=parse_anomaly_config(record.get("anomalyConfig")),
        baseline_value=_optional_float(record.get("baselineValue"), "baselineValue"),
        target_value=_optional_float(record.get("targetValue"), "targetValue"),
        name=record.get("name"),
    )


def parse_submission(record: Mapping[str, Any]) -> Submission:
    if record.get("id") is None:
        raise InvalidQuery("registry submission record has no id")
    arrived = _pick(record, "submittedAt", "createdAt")
    value = _pick(record, "value", "categoryValue", default="")
    return Submission(
        id=str(record["id"]),
        reported_at=parse_date(record.get("reportedAt")),
        value=str(value).lower() if isinstance(value, bool) else str(value),
        is_anomaly=bool(record.get("isAnomaly", False)),
        anomaly_reason=record.get("anomalyReason") or None,
        evidence=record.get("evidence"),
        disaggregation_key=record.get("disaggregationKey") or None,
        submitted_at=parse_date(arrived, "submittedAt") if arrived is not None else None,
    )


def parse_submissions(records: List[Dict[str, Any]]) -> List[Submission]:
    return [parse_submission(r) for r in records]
