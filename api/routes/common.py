"""
Shared utilities and dependencies for API route modules.

Provides a centralized place for creating registry providers, translating
upstream failures to HTTP responses, and loading the indicator and series a
route works on. This keeps individual route files thin and avoids repeating
boilerplate logic.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import date
from typing import Any, Awaitable, List, Optional, Tuple, TypeVar

from fastapi import HTTPException

from config import settings
from datasources.data_config import DataSourceSettings
from datasources.exceptions import RecordNotFound
from datasources.provider import DataSourceProvider
from engine.exceptions import ConfigurationError
from engine.indicator import Indicator, Submission
from services.security_service import get_context_tenant


_T = TypeVar("_T")
_providers: dict[str, DataSourceProvider] = {}


def get_provider(tenant_id: Optional[str]) -> DataSourceProvider:
    resolved_tenant_id = get_context_tenant(tenant_id or settings.default_tenant_id)
    provider = _providers.get(resolved_tenant_id)
    if provider is None:
        provider = DataSourceProvider(tenant_id=resolved_tenant_id, settings=DataSourceSettings())
        _providers[resolved_tenant_id] = provider
    return provider


async def close_providers() -> None:

    providers = list(_providers.values())
    _providers.clear()
    for provider in providers:
        await provider.aclose()


async def safe_call(coro: Awaitable[_T], status_code: int = 502) -> _T:
    try:
        return await coro
    except HTTPException:
        raise
    except RecordNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ConfigurationError as exc:
        raise HTTPException(status_code=422, detail=f"Invalid indicator configuration: {exc}") from exc
    except Exception as exc:
        raise HTTPException(status_code=status_code, detail=str(exc)) from exc


def query_value(value: Any, cast: Any = None) -> Any:
    # Allow direct unit-test invocation without FastAPI Query parsing.
    raw = value.default if hasattr(value, "default") else value
    if raw is None or cast is None:
        return raw
    return cast(raw)


async def load_series(
    tenant_id: Optional[str],
    indicator_id: str,
    start: Optional[date] = None,
    end: Optional[date] = None,
    complete: bool = False,
) -> Tuple[DataSourceProvider, Indicator, List[Submission]]:
    provider = get_provider(tenant_id)
    indicator = await safe_call(provider.get_indicator(indicator_id))
    submissions = await safe_call(
        provider.list_submissions(indicator_id, start=start, end=end, complete=complete)
    )
    return provider, indicator, submissions


def history_span(indicator: Indicator) -> int:
    config = indicator.anomaly_config
    if not indicator.is_numeric or config is None or not config.enabled:
        return 1
    return config.history_span()


async def load_history(
    tenant_id: Optional[str],
    indicator_id: str,
    submission_id: str,
) -> Tuple[DataSourceProvider, Indicator, List[Submission]]:
    """Indicator plus the newest submissions back through the trailing window of ``submission_id``."""
    provider = get_provider(tenant_id)
    indicator = await safe_call(provider.get_indicator(indicator_id))
    submissions = await safe_call(
        provider.trailing_history(indicator_id, submission_id, history_span(indicator))
    )
    return provider, indicator, submissions


def check_range(start: date, end: date) -> None:
    if end < start:
        raise HTTPException(status_code=400, detail="endDate must not be before startDate")
