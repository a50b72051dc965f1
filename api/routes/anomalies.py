"""
Anomaly routes: insert-time evaluation of a single submission and batch recompute over an indicator's full series, with optional write-back of the flags to the registry.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from api.requests import EvaluateRequest, RecomputeRequest
from api.responses import AssessmentOut, EvaluationOut, RecomputeOut
from api.routes.common import load_history, load_series, safe_call
from api.routes.exception import handle_exceptions
from engine.anomaly import changed, evaluate_insert, place, recompute
from services.security_service import enforce_request_tenant

log = logging.getLogger(__name__)

router = APIRouter(tags=["Anomalies"])


@router.post(
    "/indicators/{indicator_id}/anomalies/evaluate",
    summary="Evaluate a newly inserted submission against its trailing history",
)
@handle_exceptions
async def evaluate_submission(indicator_id: str, req: EvaluateRequest) -> Dict[str, Any]:
    req = enforce_request_tenant(req)
    provider, indicator, submissions = await load_history(req.tenant_id, indicator_id, req.submission_id)

    try:
        _, _, backfilled = place(submissions, req.submission_id)
    except KeyError:
        raise HTTPException(
            status_code=404,
            detail=f"Submission {req.submission_id} not found on indicator {indicator_id}",
        )

    assessments = evaluate_insert(indicator, submissions, req.submission_id)

    written = 0
    if req.write_back:
        # the new submission is always written, later ones only when they change
        to_write = assessments[:1] + changed(submissions, assessments[1:])
        written = await safe_call(provider.write_assessments(to_write))

    head = assessments[0]
    log.info(
        "indicator %s submission %s: anomaly=%s backfilled=%s written=%d",
        indicator_id, req.submission_id, head.is_anomaly, backfilled, written,
    )
    return EvaluationOut(
        indicator_id=indicator_id,
        submission_id=req.submission_id,
        backfilled=backfilled,
        assessments=[AssessmentOut.of(a) for a in assessments],
        written=written,
    ).to_json()


@router.post(
    "/indicators/{indicator_id}/anomalies/recompute",
    summary="Re-run anomaly evaluation over the full series in report order",
)
@handle_exceptions
async def recompute_anomalies(indicator_id: str, req: RecomputeRequest) -> Dict[str, Any]:
    req = enforce_request_tenant(req)
    provider, indicator, submissions = await load_series(req.tenant_id, indicator_id, complete=True)

    assessments = recompute(indicator, submissions)
    diff = changed(submissions, assessments)

    rewritten = 0
    if req.write_back and diff:
        rewritten = await safe_call(provider.write_assessments(diff))

    log.info(
        "indicator %s recompute: %d evaluated, %d changed, %d rewritten",
        indicator_id, len(assessments), len(diff), rewritten,
    )
    return RecomputeOut(
        indicator_id=indicator_id,
        evaluated=len(assessments),
        anomalies=sum(1 for a in assessments if a.is_anomaly),
        rewritten=rewritten,
        assessments=[AssessmentOut.of(a) for a in assessments],
    ).to_json()
