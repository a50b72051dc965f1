"""
Test cases for trend shift detection between the two halves of a trailing window, by slope and by mean.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

from engine.changepoint import detect_shift
from engine.indicator import TrendConfig


def test_slope_change_is_flagged():
    res = detect_shift([1, 1, 1, 1, 5, 9], TrendConfig("SLOPE_SHIFT", 2.0, 6))
    assert res.flag is True
    assert res.score == pytest.approx(4.0)
    assert res.detail.startswith("slope")


def test_steady_linear_series_is_not_flagged():
    res = detect_shift([1, 2, 3, 4, 5, 6], TrendConfig("SLOPE_SHIFT", 2.0, 6))
    assert res.evaluable
    assert res.flag is False


def test_mean_shift():
    res = detect_shift([10, 10, 10, 20, 20, 20], TrendConfig("MEAN_SHIFT", 2.0, 6))
    assert res.flag is True
    assert res.detail == "mean 10 -> 20"

    calm = detect_shift([10, 11, 10, 11, 10, 11], TrendConfig("MEAN_SHIFT", 2.0, 6))
    assert calm.flag is False


def test_odd_window_drops_oldest_point():
    res = detect_shift([100, 1, 1, 1, 1], TrendConfig("MEAN_SHIFT", 2.0, 5))
    assert res.evaluable
    assert res.flag is False


def test_short_window_is_not_evaluable():
    res = detect_shift([1, 2, 30], TrendConfig("SLOPE_SHIFT", 2.0, 6))
    assert res.evaluable is False
    assert res.flag is False


def test_only_last_window_points_are_used():
    res = detect_shift([50, -50, 1, 2, 3, 4, 5, 6], TrendConfig("SLOPE_SHIFT", 2.0, 6))
    assert res.flag is False
