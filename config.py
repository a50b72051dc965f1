"""
Constants and configuration for Tally.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os
from typing import Dict, Optional

from pydantic_settings import BaseSettings


REGISTRY_BACKEND_HTTP = "http"

TALLY_REGISTRY_BACKEND = os.getenv("TALLY_REGISTRY_BACKEND", REGISTRY_BACKEND_HTTP).lower()
TALLY_REGISTRY_URL = os.getenv("TALLY_REGISTRY_URL", "http://registry:4000/api").rstrip("/")
TALLY_REGISTRY_TOKEN = os.getenv("TALLY_REGISTRY_TOKEN", "")
TALLY_REGISTRY_HEALTH_PATH = os.getenv("TALLY_REGISTRY_HEALTH_PATH", "/health")

TALLY_CONNECTOR_TIMEOUT = int(os.getenv("TALLY_CONNECTOR_TIMEOUT", "30"))
TALLY_STARTUP_TIMEOUT = int(os.getenv("TALLY_STARTUP_TIMEOUT", "120"))

# tenant defaults
TALLY_DEFAULT_TENANT_ID = os.getenv("TALLY_DEFAULT_TENANT_ID", "default")

HEALTH_PATH = "/ready"

# cadence length in days used by reporting gap detection
GAP_CADENCE_DAYS: Dict[str, int] = {
    "DAILY": 1,
    "WEEKLY": 7,
    "MONTHLY": 30,
    "QUARTERLY": 91,
    "YEARLY": 365,
}


class Settings(BaseSettings):
    registry_backend: str = TALLY_REGISTRY_BACKEND
    registry_url: str = TALLY_REGISTRY_URL
    registry_token: str = TALLY_REGISTRY_TOKEN
    connector_timeout: int = TALLY_CONNECTOR_TIMEOUT

    # default tenant (used by main and tests)
    default_tenant_id: str = TALLY_DEFAULT_TENANT_ID

    # internal service authentication
    expected_service_token: Optional[str] = None
    context_verify_key: Optional[str] = None
    context_algorithms: str = "HS256"
    context_audience: str = "tally"
    context_issuer: str = "tally-registry"

    ssl_enabled: bool = False
    ssl_certfile: Optional[str] = None
    ssl_keyfile: Optional[str] = None

    # outlier defaults applied when an indicator omits a field
    outlier_default_method: str = "MAD"
    outlier_default_window: int = 8
    outlier_default_min_points: int = 6
    # threshold is one field for both methods; only the defaults differ
    outlier_default_threshold_mad: float = 3.5
    outlier_default_threshold_iqr: float = 1.5

    # trend shift defaults
    trend_default_method: str = "SLOPE_SHIFT"
    trend_default_threshold: float = 2.0
    trend_default_window: int = 6

    # robust z-score scale (normal-consistent MAD)
    anomaly_mad_scale: float = 0.6745
    # spread used when MAD or IQR is zero, as a fraction of |median|;
    # 0 reduces the guard to an exact match against the median
    outlier_spread_floor: float = 0.05
    # "recompute" re-evaluates later points after a backfilled insert,
    # "insert_only" evaluates the new point only
    backfill_policy: str = "recompute"

    # forecast projection
    forecast_periods: int = 4
    forecast_step_days: int = 7
    forecast_round_digits: int = 2
    forecast_max_periods: int = 52

    # reporting compliance
    compliance_grace_days: int = 0

    # reporting gaps: a gap is wider than tolerance * cadence
    gap_tolerance: float = 1.5

    # indicator summary
    stats_trend_ratio: float = 0.6
    stats_trend_min_points: int = 3
    category_trend_window_days: int = 30

    # fetch limits against the registry
    registry_page_limit: int = 5000

    model_config = {
        "env_prefix": "TALLY_",
        "extra": "ignore",
    }


settings = Settings()
