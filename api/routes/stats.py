"""
Indicator summary statistics route.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Query

from api.responses import SummaryOut
from api.routes.common import load_series, query_value
from api.routes.exception import handle_exceptions
from engine.stats import summarize

router = APIRouter(tags=["Stats"])


@router.get("/indicators/{indicator_id}/stats", summary="Headline statistics for an indicator")
@handle_exceptions
async def indicator_stats(
    indicator_id: str,
    tenant_id: Optional[str] = Query(default=None, alias="tenantId"),
) -> Dict[str, Any]:
    _, indicator, submissions = await load_series(query_value(tenant_id), indicator_id)
    summary = summarize(indicator, submissions)
    return {
        "indicatorId": indicator_id,
        "name": indicator.name,
        "type": indicator.type.value,
        "stats": SummaryOut.of(summary).to_json() if summary else None,
    }
