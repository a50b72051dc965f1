"""
Categorical indicator routes: per-period category time series, whole-range distribution and selection validation.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, Query

from api.requests import CategoryValidateRequest
from api.responses import (
    CategoryCountOut,
    CategoryPeriodOut,
    CategoryTrendOut,
    DisaggregatedOut,
    DistributionOut,
    SelectionOut,
)
from api.routes.common import check_range, get_provider, load_series, query_value, safe_call
from api.routes.exception import handle_exceptions
from engine.categories import (
    category_distribution,
    category_time_series,
    category_trend,
    disaggregated_distribution,
    most_frequent,
    validate_selection,
)
from engine.enums import GroupBy, IndicatorType
from engine.indicator import Indicator
from services.security_service import enforce_request_tenant

router = APIRouter(tags=["Categories"])


def _require_categorical(indicator: Indicator) -> None:
    if indicator.type is not IndicatorType.categorical:
        raise HTTPException(
            status_code=400,
            detail=f"Indicator {indicator.id} is {indicator.type.value}, not CATEGORICAL",
        )


@router.get(
    "/indicators/{indicator_id}/category-time-series",
    summary="Category counts and percentages per calendar period",
)
@handle_exceptions
async def category_time_series_route(
    indicator_id: str,
    start_date: date = Query(alias="startDate"),
    end_date: date = Query(alias="endDate"),
    group_by: GroupBy = Query(default=GroupBy.month, alias="groupBy"),
    tenant_id: Optional[str] = Query(default=None, alias="tenantId"),
) -> Dict[str, Any]:
    start_date = query_value(start_date)
    end_date = query_value(end_date)
    group_by = query_value(group_by, GroupBy)
    check_range(start_date, end_date)

    _, indicator, submissions = await load_series(
        query_value(tenant_id), indicator_id, start=start_date, end=end_date, complete=True
    )
    _require_categorical(indicator)

    periods = category_time_series(indicator, submissions, start_date, end_date, group_by)
    return {
        "indicatorId": indicator_id,
        "groupBy": group_by.value,
        "allowMultiple": indicator.category_config.allow_multiple,
        "periods": [CategoryPeriodOut.of(p).to_json() for p in periods],
    }


@router.get(
    "/indicators/{indicator_id}/category-distribution",
    summary="Distribution, most frequent category, per-disaggregation breakdown and trend",
)
@handle_exceptions
async def category_distribution_route(
    indicator_id: str,
    as_of: Optional[date] = Query(default=None, alias="asOf"),
    window_days: Optional[int] = Query(default=None, ge=1, le=3650, alias="windowDays"),
    tenant_id: Optional[str] = Query(default=None, alias="tenantId"),
) -> Dict[str, Any]:
    _, indicator, submissions = await load_series(query_value(tenant_id), indicator_id, complete=True)
    _require_categorical(indicator)

    dist = category_distribution(submissions, indicator)
    top = most_frequent(dist)
    trend = category_trend(
        submissions,
        indicator,
        query_value(as_of) or date.today(),
        query_value(window_days, int),
    )
    return DistributionOut(
        indicator_id=indicator_id,
        total_submissions=len(submissions),
        distribution=[CategoryCountOut.of(c) for c in dist],
        most_frequent=CategoryCountOut.of(top) if top else None,
        by_disaggregation=[DisaggregatedOut.of(d) for d in disaggregated_distribution(submissions, indicator)],
        trend=CategoryTrendOut.of(trend),
    ).to_json()


@router.post(
    "/indicators/{indicator_id}/categories/validate",
    summary="Validate a comma-joined category selection against the indicator's categories",
)
@handle_exceptions
async def validate_categories(indicator_id: str, req: CategoryValidateRequest) -> Dict[str, Any]:
    req = enforce_request_tenant(req)
    provider = get_provider(req.tenant_id)
    indicator = await safe_call(provider.get_indicator(indicator_id))
    _require_categorical(indicator)

    selected = validate_selection(req.value, indicator)
    return SelectionOut(valid=True, selected_ids=selected).to_json()
