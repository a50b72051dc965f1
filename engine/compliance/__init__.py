"""
Compliance packages for measuring how reliably an indicator is reported against its cadence and where reporting gaps occur.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.compliance.reporting import (
    ComplianceReport,
    ComplianceStats,
    PeriodStatus,
    compute_compliance,
    rank_by_compliance,
)
from engine.compliance.gaps import ReportingGap, detect_gaps

__all__ = [
    "ComplianceReport",
    "ComplianceStats",
    "PeriodStatus",
    "compute_compliance",
    "rank_by_compliance",
    "ReportingGap",
    "detect_gaps",
]
