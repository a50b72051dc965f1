"""
Categorical indicator analytics: selection validation, distributions and per-period category time series.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.categories.distribution import (
    CategoryCount,
    CategoryTrend,
    DisaggregatedDistribution,
    category_distribution,
    category_trend,
    disaggregated_distribution,
    most_frequent,
    parse_category_value,
    validate_selection,
)
from engine.categories.timeseries import CategoryPeriod, category_time_series

__all__ = [
    "CategoryCount",
    "CategoryPeriod",
    "CategoryTrend",
    "DisaggregatedDistribution",
    "category_distribution",
    "category_time_series",
    "category_trend",
    "disaggregated_distribution",
    "most_frequent",
    "parse_category_value",
    "validate_selection",
]
