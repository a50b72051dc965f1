"""
Indicator Registry Connector

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from datasources.retry import retry

from datasources.base import RegistryConnector
from datasources.helpers import fetch_json, send_json
from datasources.exceptions import DataSourceUnavailable, InvalidQuery, QueryTimeout
from config import TALLY_CONNECTOR_TIMEOUT, TALLY_REGISTRY_HEALTH_PATH

log = logging.getLogger(__name__)

_TRANSIENT = (DataSourceUnavailable, QueryTimeout)


def _unwrap(payload: Any, *keys: str) -> Any:
    # registry responses may or may not be wrapped in an envelope
    if isinstance(payload, dict):
        for key in keys:
            if key in payload:
                return payload[key]
    return payload


class IndicatorRegistryConnector(RegistryConnector):
    health_path = TALLY_REGISTRY_HEALTH_PATH

    def __init__(
        self,
        base_url: str,
        tenant_id: str,
        timeout: int = TALLY_CONNECTOR_TIMEOUT,
        token: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(tenant_id, base_url, timeout, headers)
        self.token = token

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    @retry(attempts=3, delay=0.5, backoff=2.0, exceptions=_TRANSIENT)
    async def get_indicator(self, indicator_id: str) -> Dict[str, Any]:
        url = f"{self.base_url}/indicators/{indicator_id}"
        payload = await fetch_json(
            url,
            headers=self._headers(),
            timeout=self.timeout,
            invalid_msg="Registry indicator lookup failed",
            timeout_msg="Registry indicator lookup timed out",
            not_found_msg=f"Indicator {indicator_id} not found",
        )
        record = _unwrap(payload, "data", "indicator")
        if not isinstance(record, dict):
            raise InvalidQuery(f"Registry returned a malformed indicator record for {indicator_id}")
        return record

    @retry(attempts=3, delay=0.5, backoff=2.0, exceptions=_TRANSIENT)
    async def list_submissions(
        self,
        indicator_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
        order: str = "asc",
    ) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/indicators/{indicator_id}/submissions"
        params: Dict[str, Any] = {"order": order}
        if start is not None:
            params["from"] = start.isoformat()
        if end is not None:
            params["to"] = end.isoformat()
        if limit is not None:
            params["limit"] = int(limit)

        payload = await fetch_json(
            url,
            params=params,
            headers=self._headers(),
            timeout=self.timeout,
            invalid_msg="Registry submission query failed",
            timeout_msg="Registry submission query timed out",
            not_found_msg=f"Indicator {indicator_id} not found",
        )
        rows = _unwrap(payload, "data", "submissions")
        if not isinstance(rows, list):
            raise InvalidQuery(f"Registry returned malformed submissions for {indicator_id}")
        return rows

    @retry(attempts=3, delay=0.5, backoff=2.0, exceptions=_TRANSIENT)
    async def update_anomaly(
        self,
        submission_id: str,
        is_anomaly: bool,
        reason: Optional[str],
    ) -> Optional[Dict[str, Any]]:
        url = f"{self.base_url}/submissions/{submission_id}/anomaly"
        log.info("writing anomaly flag for submission %s: %s", submission_id, is_anomaly)
        return await send_json(
            "PATCH",
            url,
            {"isAnomaly": bool(is_anomaly), "anomalyReason": reason or None},
            headers=self._headers(),
            timeout=self.timeout,
            invalid_msg="Registry anomaly update failed",
            timeout_msg="Registry anomaly update timed out",
            not_found_msg=f"Submission {submission_id} not found",
        )
