"""
Routes initialization for API endpoints.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.health import router as health_router
from api.routes.anomalies import router as anomalies_router
from api.routes.forecast import router as forecast_router
from api.routes.compliance import router as compliance_router
from api.routes.categories import router as categories_router
from api.routes.stats import router as stats_router

router = APIRouter()

router.include_router(health_router)
router.include_router(anomalies_router)
router.include_router(forecast_router)
router.include_router(compliance_router)
router.include_router(categories_router)
router.include_router(stats_router)

__all__ = ["router"]
