"""
Forecast route projecting the next reporting periods of a numeric indicator.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Query

from api.responses import ForecastPointOut
from api.routes.common import load_series, query_value
from api.routes.exception import handle_exceptions
from config import settings
from engine.forecast import forecast

router = APIRouter(tags=["Forecast"])


@router.get("/indicators/{indicator_id}/forecast", summary="Least-squares projection of future periods")
@handle_exceptions
async def indicator_forecast(
    indicator_id: str,
    periods: Optional[int] = Query(default=None, ge=1, le=settings.forecast_max_periods),
    tenant_id: Optional[str] = Query(default=None, alias="tenantId"),
) -> Dict[str, Any]:
    periods = query_value(periods, int) or settings.forecast_periods
    _, indicator, submissions = await load_series(query_value(tenant_id), indicator_id)

    points = forecast([(s.reported_at, s.value) for s in submissions], periods) if indicator.is_numeric else []
    return {
        "indicatorId": indicator_id,
        "periods": periods,
        "stepDays": settings.forecast_step_days,
        "points": [ForecastPointOut.of(p).to_json() for p in points],
    }
