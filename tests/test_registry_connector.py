"""
Test cases for the indicator registry connector: request shape, envelope unwrapping, anomaly write-back and retry on transient failures.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import asyncio
from datetime import date

import httpx
import pytest

from connectors.registry import IndicatorRegistryConnector
from datasources.exceptions import DataSourceUnavailable, InvalidQuery, RecordNotFound


class DummyResponse:
    def __init__(self, status_code=200, json_data=None, text=""):
        self.status_code = status_code
        self._json = json_data
        self.text = text
        self.content = b"" if json_data is None else b"x"

    def raise_for_status(self):
        if self.status_code >= 400:
            raise httpx.HTTPStatusError("err", request=None, response=self)

    def json(self):
        return self._json


class DummyClient:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    def _next(self):
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def get(self, url, params=None, headers=None):
        self.calls.append({"method": "GET", "url": url, "params": params, "headers": headers})
        return self._next()

    async def request(self, method, url, json=None, headers=None):
        self.calls.append({"method": method, "url": url, "json": json, "headers": headers})
        return self._next()


@pytest.fixture
def client(monkeypatch):
    holder = DummyClient([])
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: holder)

    async def no_sleep(_):
        return None

    monkeypatch.setattr(asyncio, "sleep", no_sleep)
    return holder


def _connector(token=None):
    return IndicatorRegistryConnector("http://registry/api/", "tenant-a", timeout=5, token=token)


@pytest.mark.asyncio
async def test_get_indicator_unwraps_envelope(client):
    client.responses = [DummyResponse(json_data={"data": {"id": "ind-1", "type": "NUMBER"}})]
    record = await _connector(token="secret").get_indicator("ind-1")

    assert record == {"id": "ind-1", "type": "NUMBER"}
    call = client.calls[0]
    assert call["url"] == "http://registry/api/indicators/ind-1"
    assert call["headers"]["X-Tenant-ID"] == "tenant-a"
    assert call["headers"]["Authorization"] == "Bearer secret"


@pytest.mark.asyncio
async def test_get_indicator_plain_record_and_missing(client):
    client.responses = [DummyResponse(json_data={"id": "ind-2"}), DummyResponse(status_code=404, text="nope")]
    conn = _connector()
    assert (await conn.get_indicator("ind-2"))["id"] == "ind-2"
    assert "Authorization" not in client.calls[0]["headers"]

    with pytest.raises(RecordNotFound, match="Indicator ind-9 not found"):
        await conn.get_indicator("ind-9")


@pytest.mark.asyncio
async def test_list_submissions_params(client):
    client.responses = [DummyResponse(json_data={"submissions": [{"id": "s1"}]})]
    rows = await _connector().list_submissions(
        "ind-1", start=date(2024, 1, 1), end=date(2024, 3, 31), limit=100
    )
    assert rows == [{"id": "s1"}]
    call = client.calls[0]
    assert call["url"] == "http://registry/api/indicators/ind-1/submissions"
    assert call["params"] == {"order": "asc", "from": "2024-01-01", "to": "2024-03-31", "limit": 100}


@pytest.mark.asyncio
async def test_list_submissions_rejects_malformed_payload(client):
    client.responses = [DummyResponse(json_data={"data": "oops"})]
    with pytest.raises(InvalidQuery):
        await _connector().list_submissions("ind-1")


@pytest.mark.asyncio
async def test_update_anomaly_patches_submission(client):
    client.responses = [DummyResponse(status_code=204)]
    result = await _connector().update_anomaly("s-7", True, "Value exceeds expected maximum (100)")

    assert result is None
    call = client.calls[0]
    assert call["method"] == "PATCH"
    assert call["url"] == "http://registry/api/submissions/s-7/anomaly"
    assert call["json"] == {"isAnomaly": True, "anomalyReason": "Value exceeds expected maximum (100)"}


@pytest.mark.asyncio
async def test_update_anomaly_clears_reason(client):
    client.responses = [DummyResponse(status_code=204)]
    await _connector().update_anomaly("s-7", False, "")
    assert client.calls[0]["json"] == {"isAnomaly": False, "anomalyReason": None}


@pytest.mark.asyncio
async def test_transient_failures_are_retried(client):
    client.responses = [httpx.ConnectError("down"), DummyResponse(json_data={"id": "ind-1"})]
    record = await _connector().get_indicator("ind-1")
    assert record["id"] == "ind-1"
    assert len(client.calls) == 2


@pytest.mark.asyncio
async def test_retries_are_bounded(client):
    client.responses = [httpx.ConnectError("down")] * 3
    with pytest.raises(DataSourceUnavailable):
        await _connector().get_indicator("ind-1")
    assert len(client.calls) == 3


@pytest.mark.asyncio
async def test_not_found_is_not_retried(client):
    client.responses = [DummyResponse(status_code=404, text="gone")]
    with pytest.raises(RecordNotFound):
        await _connector().update_anomaly("s-1", True, "x")
    assert len(client.calls) == 1


def test_health_url():
    assert _connector().health_url == "http://registry/api/health"
