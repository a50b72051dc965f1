"""
Test cases for linear forecast projection.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from datetime import date, timedelta

import pytest

from config import settings
from engine.forecast import forecast


def _points(values, start=date(2024, 1, 1)):
    return [(start + timedelta(days=7 * i), v) for i, v in enumerate(values)]


def test_two_points_extend_the_line():
    out = forecast(_points([10, 20]), periods=2, step_days=7)
    assert len(out) == 3

    connector = out[0]
    assert connector.is_forecast is False
    assert connector.date == date(2024, 1, 8)
    assert connector.value == 20
    assert connector.forecast == 20

    assert [p.forecast for p in out[1:]] == pytest.approx([30.0, 40.0])
    assert [p.date for p in out[1:]] == [date(2024, 1, 15), date(2024, 1, 22)]
    assert all(p.is_forecast and p.value is None for p in out[1:])


@pytest.mark.parametrize("values", [[], [5], ["nan", 3], ["x", None]])
def test_fewer_than_two_valid_points_gives_nothing(values):
    assert forecast(_points(values)) == []


def test_non_finite_values_are_dropped():
    out = forecast(_points([1, "nan", 2, "inf", 3]), periods=1, step_days=1)
    assert out[0].value == 3
    assert out[1].forecast == pytest.approx(4.0)


def test_defaults_come_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "forecast_periods", 4)
    monkeypatch.setattr(settings, "forecast_step_days", 7)
    out = forecast(_points([1, 2, 3]))
    assert [p.forecast for p in out[1:]] == pytest.approx([4.0, 5.0, 6.0, 7.0])
    assert out[-1].date == date(2024, 1, 15) + timedelta(days=28)


def test_forecast_is_rounded():
    out = forecast(_points([0, 1, 1]), periods=1, step_days=7)
    # slope 0.5, intercept 1/6
    assert out[1].forecast == pytest.approx(1.67)


def test_zero_periods_returns_connector_only():
    out = forecast(_points([1, 2]), periods=0)
    assert len(out) == 1
    assert out[0].is_forecast is False
