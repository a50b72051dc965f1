"""
Test cases for reporting gap detection.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from datetime import date

from engine.compliance import detect_gaps
from engine.indicator import Submission


def _subs(*days):
    return [Submission(id=f"s{i}", reported_at=d, value="1") for i, d in enumerate(days)]


def test_weekly_gap():
    gaps = detect_gaps(_subs(date(2024, 1, 29), date(2024, 1, 1), date(2024, 1, 8)), "WEEKLY")
    assert len(gaps) == 1
    gap = gaps[0]
    assert gap.from_date == date(2024, 1, 8)
    assert gap.to_date == date(2024, 1, 29)
    assert gap.days_missing == 14
    assert gap.expected_submissions == 2


def test_monthly_gap():
    gaps = detect_gaps(_subs(date(2024, 1, 1), date(2024, 3, 1)), "monthly")
    assert len(gaps) == 1
    assert gaps[0].days_missing == 30
    assert gaps[0].expected_submissions == 1


def test_regular_cadence_has_no_gaps():
    assert detect_gaps(_subs(date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 16)), "WEEKLY") == []
    assert detect_gaps(_subs(date(2024, 1, 1)), "WEEKLY") == []
    assert detect_gaps([], "DAILY") == []


def test_tolerance_widens_allowed_span():
    subs = _subs(date(2024, 1, 1), date(2024, 1, 22))
    assert detect_gaps(subs, "WEEKLY", tolerance=3.0) == []
    assert len(detect_gaps(subs, "WEEKLY", tolerance=2.0)) == 1
