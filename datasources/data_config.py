"""
Connection settings for the upstream indicator registry that stores indicators and their submissions

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings
from config import (
    REGISTRY_BACKEND_HTTP,
    TALLY_REGISTRY_BACKEND,
    TALLY_REGISTRY_URL,
    TALLY_REGISTRY_TOKEN,
    TALLY_REGISTRY_HEALTH_PATH,
    TALLY_CONNECTOR_TIMEOUT,
    TALLY_STARTUP_TIMEOUT,
)

class DataSourceSettings(BaseSettings):
    registry_backend: str = TALLY_REGISTRY_BACKEND
    registry_url: str = TALLY_REGISTRY_URL
    registry_token: Optional[str] = TALLY_REGISTRY_TOKEN or None
    registry_health_path: str = TALLY_REGISTRY_HEALTH_PATH
    connector_timeout: int = TALLY_CONNECTOR_TIMEOUT
    startup_timeout: int = TALLY_STARTUP_TIMEOUT

    @field_validator("registry_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        return str(v).rstrip("/") if v is not None else v

    @field_validator("registry_health_path", mode="before")
    @classmethod
    def leading_slash(cls, v: str) -> str:
        value = str(v or "").strip()
        return value if value.startswith("/") else f"/{value}"

    @field_validator("registry_backend", mode="before")
    @classmethod
    def validate_registry_backend(cls, v: str) -> str:
        value = str(v or "").strip().lower()
        if value not in {REGISTRY_BACKEND_HTTP}:
            raise ValueError(f"Unsupported registry backend: {value!r}")
        return value

    model_config = {"env_prefix": "TALLY_", "extra": "ignore"}
