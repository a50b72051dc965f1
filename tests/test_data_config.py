"""
Test cases for registry connection settings.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest
from pydantic import ValidationError

from config import Settings
from datasources.data_config import DataSourceSettings


def test_url_and_health_path_are_normalised():
    ds = DataSourceSettings(registry_url="http://registry:4000/api/", registry_health_path="healthz")
    assert ds.registry_url == "http://registry:4000/api"
    assert ds.registry_health_path == "/healthz"


def test_backend_is_case_insensitive():
    assert DataSourceSettings(registry_backend=" HTTP ").registry_backend == "http"


def test_unsupported_backend_rejected():
    with pytest.raises(ValidationError):
        DataSourceSettings(registry_backend="postgres")


def test_startup_timeout_lives_on_registry_settings(monkeypatch):
    monkeypatch.setenv("TALLY_STARTUP_TIMEOUT", "7")
    assert DataSourceSettings().startup_timeout == 7
    assert "startup_timeout" not in Settings.model_fields
