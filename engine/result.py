"""
Result type shared by the pointwise outlier and trend shift detectors.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DetectionResult:
    flag: bool
    detail: str
    evaluable: bool = True
    score: Optional[float] = None

    @classmethod
    def not_evaluable(cls, detail: str) -> DetectionResult:
        # cannot decide counts as not anomalous
        return cls(flag=False, detail=detail, evaluable=False)
