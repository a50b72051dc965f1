"""
Test cases for indicator summary statistics.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from dataclasses import replace
from datetime import date

import pytest

from engine.enums import TrendDirection
from engine.indicator import CategoryDefinition, Indicator, Submission
from engine.stats import summarize, trend_direction


def test_trend_direction():
    assert trend_direction([1, 2]) is None
    assert trend_direction([1, 2, 3, 4]) is TrendDirection.increasing
    assert trend_direction([4, 3, 2, 1]) is TrendDirection.decreasing
    assert trend_direction([1, 1, 1]) is TrendDirection.stable
    assert trend_direction([1, 2, 1, 2, 1]) is TrendDirection.stable


def test_summary_of_empty_series_is_none():
    assert summarize(Indicator(id="i", type="NUMBER"), []) is None


def test_numeric_summary(make_weekly):
    subs = make_weekly([10, 12, "oops", 15])
    subs[1] = replace(subs[1], is_anomaly=True)
    ind = Indicator(id="i", type="NUMBER", target_value=30, baseline_value=5)

    s = summarize(ind, reversed(subs))
    assert s.submission_count == 4
    assert s.anomaly_count == 1
    assert s.anomaly_rate == pytest.approx(25.0)
    assert s.last_submission_date == date(2024, 1, 22)
    assert s.current_value == 15
    assert s.average == pytest.approx(37 / 3)
    assert s.min == 10 and s.max == 15
    assert s.trend is TrendDirection.increasing
    assert s.progress_to_target == pytest.approx(50.0)
    assert s.progress_from_baseline == pytest.approx(10.0)


def test_progress_fields_need_target_and_baseline(make_weekly):
    s = summarize(Indicator(id="i", type="NUMBER", target_value=0), make_weekly([1, 2]))
    assert s.progress_to_target is None
    assert s.progress_from_baseline is None
    assert s.trend is None


def test_non_numeric_values_only(make_weekly):
    s = summarize(Indicator(id="i", type="TEXT"), make_weekly(["x", "y"]))
    assert s.submission_count == 2
    assert s.current_value is None


def test_categorical_summary():
    ind = Indicator(
        id="c", type="CATEGORICAL",
        categories=[CategoryDefinition("a", "Alpha"), CategoryDefinition("b", "Beta")],
    )
    subs = [Submission(id=str(i), reported_at=date(2024, 1, 1 + i), value=v) for i, v in enumerate("abb")]
    s = summarize(ind, subs)
    assert s.most_frequent.category_id == "b"
    assert [c.category_id for c in s.category_distribution] == ["b", "a"]
    assert s.current_value is None
