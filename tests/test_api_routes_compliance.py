"""
Test Suite for API Routes - Reporting Compliance and Gaps

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from datetime import date

import pytest
from fastapi import HTTPException

from api.routes import common
from api.routes import compliance as compliance_route
from engine.indicator import CategoryConfig, Indicator, Submission


class DummyProvider:
    def __init__(self, indicator, submissions):
        self.indicator = indicator
        self.submissions = submissions
        self.ranges = []

    async def get_indicator(self, indicator_id):
        return self.indicator

    async def list_submissions(self, indicator_id, start=None, end=None, complete=False):
        self.ranges.append((start, end))
        return [
            s for s in self.submissions
            if (start is None or s.reported_at >= start) and (end is None or s.reported_at <= end)
        ]


def _sub(sid, day, key=None, submitted=None):
    return Submission(id=sid, reported_at=day, value="1", disaggregation_key=key, submitted_at=submitted)


INDICATOR = Indicator(
    id="ind-1",
    type="NUMBER",
    frequency="MONTHLY",
    category_config=CategoryConfig(expected_entities=("east",)),
)


@pytest.mark.asyncio
async def test_compliance_route(monkeypatch):
    subs = [
        _sub("n1", date(2024, 1, 4), "north"),
        _sub("n2", date(2024, 2, 4), "north"),
        _sub("n3", date(2024, 3, 4), "north", submitted=date(2024, 4, 20)),
        _sub("s1", date(2024, 1, 9), "south"),
    ]
    dummy = DummyProvider(INDICATOR, subs)
    monkeypatch.setattr(common, "get_provider", lambda tid: dummy)

    out = await compliance_route.reporting_compliance(
        "ind-1",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 3, 31),
        reporting_frequency=None,
        tenant_id="t1",
    )

    assert dummy.ranges == [(date(2024, 1, 1), date(2024, 3, 31))]
    assert out["frequency"] == "MONTHLY"
    assert out["expectedReports"] == 3
    assert out["receivedReports"] == 3
    assert out["lateReports"] == 1
    assert out["complianceRate"] == 1.0
    assert [p["status"] for p in out["periods"]] == ["on_time", "on_time", "late"]
    assert list(out["byDisaggregation"]) == ["east", "north", "south"]
    assert out["ranking"] == ["north", "south", "east"]


@pytest.mark.asyncio
async def test_compliance_route_frequency_override(monkeypatch):
    dummy = DummyProvider(INDICATOR, [_sub("a", date(2024, 1, 2))])
    monkeypatch.setattr(common, "get_provider", lambda tid: dummy)

    out = await compliance_route.reporting_compliance(
        "ind-1",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 14),
        reporting_frequency="WEEKLY",
        tenant_id=None,
    )
    assert out["frequency"] == "WEEKLY"
    assert out["expectedReports"] == 2
    assert out["complianceRate"] == 0.5


@pytest.mark.asyncio
async def test_compliance_route_rejects_inverted_range(monkeypatch):
    monkeypatch.setattr(common, "get_provider", lambda tid: DummyProvider(INDICATOR, []))
    with pytest.raises(HTTPException) as exc:
        await compliance_route.reporting_compliance(
            "ind-1",
            start_date=date(2024, 3, 1),
            end_date=date(2024, 1, 1),
            reporting_frequency=None,
            tenant_id=None,
        )
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_gaps_route(monkeypatch):
    subs = [_sub("a", date(2024, 1, 1)), _sub("b", date(2024, 3, 1)), _sub("c", date(2024, 4, 1))]
    monkeypatch.setattr(common, "get_provider", lambda tid: DummyProvider(INDICATOR, subs))

    out = await compliance_route.reporting_gaps("ind-1", frequency=None, tenant_id=None)

    assert out["frequency"] == "MONTHLY"
    assert out["gaps"] == [
        {"from": "2024-01-01", "to": "2024-03-01", "daysMissing": 30, "expectedSubmissions": 1}
    ]

    weekly = await compliance_route.reporting_gaps("ind-1", frequency="weekly", tenant_id=None)
    assert weekly["frequency"] == "WEEKLY"
    assert len(weekly["gaps"]) == 2
