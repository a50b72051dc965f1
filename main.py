"""
Entry point for the Tally Indicator Analytics Engine API server.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from api.routes import router
from api.routes.common import close_providers
from services.security_service import InternalAuthMiddleware
from datasources.data_config import DataSourceSettings
from config import settings
from datasources.exceptions import BackendStartupTimeout

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    stream=sys.stdout,
)
log = logging.getLogger(__name__)

_backend_ready = False
_backend_status: Dict[str, str] = {}


async def wait_for(
    name: str,
    url: str,
    timeout: float,
    headers: Optional[Dict[str, str]] = None,
    accept_status: tuple = (200, 204),
) -> None:
    deadline = time.monotonic() + timeout
    attempt = 0
    async with httpx.AsyncClient() as client:
        while time.monotonic() < deadline:
            attempt += 1
            try:
                resp = await client.get(url, headers=headers or {}, timeout=3.0)
                if resp.status_code in accept_status:
                    log.info("%s ready (attempt %d, status %d)", name, attempt, resp.status_code)
                    return
                log.debug("%s probe returned %d (attempt %d)", name, resp.status_code, attempt)
            except httpx.HTTPError as exc:
                log.debug("%s not reachable (attempt %d): %s", name, attempt, exc)
            await asyncio.sleep(2)
    raise BackendStartupTimeout(f"{name} did not become ready within {timeout}s")


async def _wait_for_registry_bg(ds: DataSourceSettings, tenant_id: str) -> None:
    global _backend_ready

    headers = {"X-Tenant-ID": tenant_id}
    if ds.registry_token:
        headers["Authorization"] = f"Bearer {ds.registry_token}"

    name = f"registry ({ds.registry_backend})"
    _backend_status[name] = "waiting"
    log.info("Registry readiness check starting (timeout=%ds) ...", ds.startup_timeout)

    try:
        await wait_for(name, f"{ds.registry_url}{ds.registry_health_path}", ds.startup_timeout, headers=headers)
    except BackendStartupTimeout as exc:
        log.error("%s failed readiness: %s", name, exc)
        _backend_status[name] = f"failed: {exc}"
        _backend_ready = False
        return

    _backend_status[name] = "ready"
    _backend_ready = True
    log.info("Registry ready, engine fully operational")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    readiness_task = asyncio.create_task(_wait_for_registry_bg(DataSourceSettings(), settings.default_tenant_id))
    try:
        yield
    finally:
        readiness_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await readiness_task
        await close_providers()


app = FastAPI(
    title="Tally Indicator Analytics Engine",
    description="Anomaly detection, forecasting, reporting compliance and category aggregation for monitoring indicators.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(InternalAuthMiddleware)
app.include_router(router, prefix="/api/v1")


@app.get("/api/v1/ready", tags=["health"], summary="Registry readiness probe")
async def ready() -> JSONResponse:
    code = 200 if _backend_ready else 503
    return JSONResponse(
        status_code=code,
        content={"ready": _backend_ready, "backends": _backend_status},
    )


if __name__ == "__main__":
    uvicorn_kwargs = {
        "host": "0.0.0.0",
        "port": 4330,
        "log_level": "info",
        "access_log": True,
    }
    if settings.ssl_enabled:
        uvicorn_kwargs["ssl_certfile"] = settings.ssl_certfile
        uvicorn_kwargs["ssl_keyfile"] = settings.ssl_keyfile

    uvicorn.run(
        "main:app",
        **uvicorn_kwargs,
    )
