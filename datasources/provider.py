"""
Provider for the indicator registry: resolves the tenant's connector and returns engine domain objects instead of raw registry records.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional

from config import settings as app_settings
from connectors.registry import IndicatorRegistryConnector
from engine.anomaly import AnomalyAssessment
from engine.indicator import Indicator, Submission
from engine.series import parse_numeric
from .data_config import DataSourceSettings
from .exceptions import SeriesTruncated
from .records import parse_indicator, parse_submissions

log = logging.getLogger(__name__)


def _covers(newest_first: List[Submission], submission_id: str, span: int) -> bool:
    """True once ``submission_id`` is present with ``span - 1`` numeric points behind it."""
    for k, sub in enumerate(newest_first):
        if sub.id == submission_id:
            older = sum(1 for s in newest_first[k + 1:] if parse_numeric(s.value) is not None)
            return older >= span - 1
    return False


class DataSourceProvider:
    def __init__(self, tenant_id: str, settings: DataSourceSettings):
        self.tenant_id = tenant_id
        self.settings = settings
        self.registry = IndicatorRegistryConnector(
            settings.registry_url,
            tenant_id,
            timeout=settings.connector_timeout,
            token=settings.registry_token,
        )

    async def get_indicator(self, indicator_id: str) -> Indicator:
        return parse_indicator(await self.registry.get_indicator(indicator_id))

    async def list_submissions(
        self,
        indicator_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
        complete: bool = False,
    ) -> List[Submission]:
        """Submissions in report order.

        By default a single page is read newest-first, so a capped listing
        keeps the latest submissions. With ``complete`` the range is paged
        oldest-first until the registry runs out of rows.
        """
        limit = limit or app_settings.registry_page_limit
        if complete:
            return await self._all_submissions(indicator_id, start, end, limit)

        rows = await self.registry.list_submissions(indicator_id, start=start, end=end, limit=limit, order="desc")
        if len(rows) >= limit:
            log.warning("indicator %s: submission listing truncated to the newest %d rows", indicator_id, limit)
        subs = parse_submissions(rows)
        subs.reverse()
        return subs

    async def _all_submissions(
        self,
        indicator_id: str,
        start: Optional[date],
        end: Optional[date],
        limit: int,
    ) -> List[Submission]:
        seen: Dict[str, Submission] = {}
        cursor = start
        while True:
            rows = await self.registry.list_submissions(indicator_id, start=cursor, end=end, limit=limit, order="asc")
            page = parse_submissions(rows)
            fresh = [s for s in page if s.id not in seen]
            seen.update((s.id, s) for s in fresh)
            if len(rows) < limit:
                break
            if not fresh:
                # the cursor is inclusive, so a page that is all one date cannot advance
                raise SeriesTruncated(
                    f"Indicator {indicator_id} has more than {limit} submissions on {cursor}"
                )
            cursor = page[-1].reported_at
            log.debug("indicator %s: %d submissions read, next page from %s", indicator_id, len(seen), cursor)
        return list(seen.values())

    async def trailing_history(self, indicator_id: str, submission_id: str, span: int) -> List[Submission]:
        """Newest submissions back to ``submission_id`` and ``span`` points before it, in report order.

        The page grows until the submission and its trailing window are
        covered, the registry has no older rows, or the page limit is hit.
        """
        cap = app_settings.registry_page_limit
        limit = min(cap, max(span, 1) + 1)
        while True:
            rows = await self.registry.list_submissions(indicator_id, limit=limit, order="desc")
            subs = parse_submissions(rows)
            exhausted = len(rows) < limit
            if exhausted or _covers(subs, submission_id, span):
                break
            if limit >= cap:
                log.warning(
                    "indicator %s: history for submission %s not covered by the newest %d rows",
                    indicator_id, submission_id, cap,
                )
                break
            limit = min(cap, limit * 4)
        subs.reverse()
        return subs

    async def write_assessments(self, assessments: Iterable[AnomalyAssessment]) -> int:
        written = 0
        for a in assessments:
            await self.registry.update_anomaly(a.submission_id, a.is_anomaly, a.reason or None)
            written += 1
        return written

    async def aclose(self) -> None:
        await self.registry.aclose()
