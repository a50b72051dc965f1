"""
Test cases for reporting compliance: expected vs received periods, on-time vs late classification with grace, and per-disaggregation statistics with ranking.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from datetime import date, timedelta

import pytest

from engine.compliance import compute_compliance, rank_by_compliance
from engine.compliance.reporting import _classify
from engine.enums import Frequency, ReportStatus
from engine.indicator import Submission


def _sub(sid, reported, submitted=None, key=None):
    return Submission(id=sid, reported_at=reported, value="1", submitted_at=submitted, disaggregation_key=key)


Q1 = (date(2024, 1, 1), date(2024, 3, 31))


def test_missing_month_lowers_rate():
    subs = [_sub("a", date(2024, 1, 10)), _sub("b", date(2024, 3, 5))]
    report = compute_compliance("MONTHLY", *Q1, subs)
    stats = report.overall

    assert report.frequency is Frequency.monthly
    assert stats.expected_reports == 3
    assert stats.received_reports == 2
    assert stats.missing_reports == 1
    assert stats.compliance_rate == pytest.approx(2 / 3)
    assert stats.last_reported_at == date(2024, 3, 5)
    assert [p.status for p in stats.periods] == [ReportStatus.on_time, ReportStatus.missing, ReportStatus.on_time]


def test_every_period_received_is_full_compliance():
    subs = [_sub(f"s{m}", date(2024, m, 2)) for m in (1, 2, 3)]
    stats = compute_compliance(Frequency.monthly, *Q1, subs).overall
    assert stats.compliance_rate == 1.0
    assert stats.missing_reports == 0


def test_no_expected_periods_is_full_compliance():
    stats = _classify([], [], timedelta(0))
    assert stats.expected_reports == 0
    assert stats.compliance_rate == 1.0


def test_several_submissions_in_one_period_count_once():
    subs = [_sub("a", date(2024, 1, 2)), _sub("b", date(2024, 1, 20))]
    stats = compute_compliance("MONTHLY", *Q1, subs).overall
    assert stats.received_reports == 1
    assert stats.periods[0].submissions == 2


def test_late_arrival_depends_on_grace():
    subs = [_sub("a", date(2024, 1, 20), submitted=date(2024, 2, 5))]
    jan = (date(2024, 1, 1), date(2024, 1, 31))

    strict = compute_compliance("MONTHLY", *jan, subs, grace_days=0).overall
    assert strict.late_reports == 1
    assert strict.on_time_reports == 0
    assert strict.received_reports == 1
    assert strict.periods[0].first_arrival == date(2024, 2, 5)

    lenient = compute_compliance("MONTHLY", *jan, subs, grace_days=7).overall
    assert lenient.on_time_reports == 1
    assert lenient.late_reports == 0


def test_earliest_arrival_decides_timeliness():
    subs = [
        _sub("late", date(2024, 1, 20), submitted=date(2024, 3, 1)),
        _sub("prompt", date(2024, 1, 25), submitted=date(2024, 1, 30)),
    ]
    stats = compute_compliance("MONTHLY", date(2024, 1, 1), date(2024, 1, 31), subs).overall
    assert stats.periods[0].status is ReportStatus.on_time


def test_submissions_outside_range_are_ignored():
    subs = [_sub("before", date(2023, 12, 31)), _sub("after", date(2024, 4, 1))]
    stats = compute_compliance("MONTHLY", *Q1, subs).overall
    assert stats.received_reports == 0
    assert stats.compliance_rate == 0.0
    assert stats.last_reported_at is None


def test_disaggregation_and_ranking():
    subs = [_sub(f"n{m}", date(2024, m, 3), key="north") for m in (1, 2, 3)]
    subs.append(_sub("s1", date(2024, 1, 8), key="south"))
    subs.append(_sub("untagged", date(2024, 2, 8)))

    report = compute_compliance("MONTHLY", *Q1, subs, expected_entities=["east"])
    assert list(report.by_disaggregation) == ["east", "north", "south"]
    assert report.by_disaggregation["north"].compliance_rate == 1.0
    assert report.by_disaggregation["south"].compliance_rate == pytest.approx(1 / 3)
    assert report.by_disaggregation["east"].received_reports == 0
    assert report.overall.received_reports == 3

    ranked = [key for key, _ in rank_by_compliance(report.by_disaggregation)]
    assert ranked == ["north", "south", "east"]


def test_weekly_cadence():
    subs = [_sub("a", date(2024, 1, 2)), _sub("b", date(2024, 1, 16))]
    stats = compute_compliance("weekly", date(2024, 1, 1), date(2024, 1, 21), subs).overall
    assert stats.expected_reports == 3
    assert stats.received_reports == 2
