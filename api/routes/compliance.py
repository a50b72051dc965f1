"""
Reporting compliance and reporting gap routes.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Query

from api.responses import ComplianceOut, GapOut
from api.routes.common import check_range, load_series, query_value
from api.routes.exception import handle_exceptions
from engine.compliance import compute_compliance, detect_gaps
from engine.enums import Frequency

router = APIRouter(tags=["Compliance"])


@router.get(
    "/indicators/{indicator_id}/reporting-compliance",
    summary="Expected vs received reports per period, overall and per disaggregation key",
)
@handle_exceptions
async def reporting_compliance(
    indicator_id: str,
    start_date: date = Query(alias="startDate"),
    end_date: date = Query(alias="endDate"),
    reporting_frequency: Optional[Frequency] = Query(default=None, alias="reportingFrequency"),
    tenant_id: Optional[str] = Query(default=None, alias="tenantId"),
) -> Dict[str, Any]:
    start_date = query_value(start_date)
    end_date = query_value(end_date)
    check_range(start_date, end_date)

    _, indicator, submissions = await load_series(
        query_value(tenant_id), indicator_id, start=start_date, end=end_date, complete=True
    )
    frequency = query_value(reporting_frequency, Frequency) or indicator.frequency
    report = compute_compliance(
        frequency,
        start_date,
        end_date,
        submissions,
        expected_entities=indicator.category_config.expected_entities,
    )
    return ComplianceOut.of_report(indicator_id, report).to_json()


@router.get("/indicators/{indicator_id}/gaps", summary="Gaps between consecutive submissions")
@handle_exceptions
async def reporting_gaps(
    indicator_id: str,
    frequency: Optional[Frequency] = Query(default=None),
    tenant_id: Optional[str] = Query(default=None, alias="tenantId"),
) -> Dict[str, Any]:
    _, indicator, submissions = await load_series(query_value(tenant_id), indicator_id, complete=True)
    cadence = query_value(frequency, Frequency) or indicator.frequency
    gaps = detect_gaps(submissions, cadence)
    return {
        "indicatorId": indicator_id,
        "frequency": cadence.value,
        "gaps": [GapOut.of(g).to_json() for g in gaps],
    }
