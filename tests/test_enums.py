"""
Test cases for enum parsing and derived properties.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

from engine.enums import BackfillPolicy, Frequency, GroupBy, IndicatorType, ReportStatus


def test_frequency_is_case_insensitive():
    assert Frequency("monthly") is Frequency.monthly
    assert Frequency(" Weekly ") is Frequency.weekly


@pytest.mark.parametrize(
    "freq,group",
    [
        (Frequency.daily, GroupBy.day),
        (Frequency.weekly, GroupBy.week),
        (Frequency.monthly, GroupBy.month),
        (Frequency.quarterly, GroupBy.quarter),
        (Frequency.yearly, GroupBy.year),
    ],
)
def test_frequency_granularity(freq, group):
    assert freq.granularity() is group


def test_indicator_type_aliases_and_numeric():
    assert IndicatorType("PERCENT") is IndicatorType.percentage
    assert IndicatorType("currency") is IndicatorType.currency
    assert IndicatorType.number.is_numeric
    assert not IndicatorType.boolean.is_numeric
    assert not IndicatorType.categorical.is_numeric


def test_unknown_values_raise():
    with pytest.raises(ValueError):
        Frequency("hourly")
    with pytest.raises(ValueError):
        IndicatorType("DATE")
    with pytest.raises(ValueError):
        BackfillPolicy("sometimes")


def test_report_status_values():
    assert [s.value for s in ReportStatus] == ["on_time", "late", "missing"]
