"""
Anomaly detection for indicator submissions, combining hard range checks with robust statistical outlier tests (MAD, IQR) and trend shift tests over trailing windows.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.anomaly.evaluator import (
    AnomalyAssessment,
    annotate,
    changed,
    evaluate_at,
    evaluate_insert,
    place,
    recompute,
)
from engine.anomaly.outlier import detect_outlier
from engine.result import DetectionResult

__all__ = [
    "AnomalyAssessment",
    "DetectionResult",
    "annotate",
    "changed",
    "detect_outlier",
    "evaluate_at",
    "evaluate_insert",
    "place",
    "recompute",
]
