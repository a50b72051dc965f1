"""
Base connector and shared utilities for the indicator registry

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, List, Optional

class BaseConnector(ABC):
    health_path: str = ""

    def __init__(self, tenant_id: str, base_url: str, timeout: int = 30, headers: Optional[Dict[str, str]] = None):
        self.tenant_id = tenant_id
        self.base_url = str(base_url).rstrip("/")
        self.timeout = timeout
        self.headers = headers or {}

    @property
    def health_url(self) -> str:
        if not self.health_path:
            raise NotImplementedError("connector must define health_path")
        return f"{self.base_url}{self.health_path}"

    def _headers(self) -> Dict[str, str]:
        """Basic header set applied to every outbound request."""
        return {**self.headers, "X-Tenant-ID": self.tenant_id}

    async def aclose(self) -> None:
        # connectors open a client per request; nothing to release by default
        return None


class RegistryConnector(BaseConnector):
    @abstractmethod
    async def get_indicator(self, indicator_id: str) -> Dict[str, Any]: ...

    @abstractmethod
    async def list_submissions(
        self,
        indicator_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
        order: str = "asc",
    ) -> List[Dict[str, Any]]: ...

    @abstractmethod
    async def update_anomaly(
        self,
        submission_id: str,
        is_anomaly: bool,
        reason: Optional[str],
    ) -> Optional[Dict[str, Any]]: ...
