"""
Response models for API endpoints. Every model serialises with camelCase keys and is built from the engine's frozen result types.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel

from engine.anomaly import AnomalyAssessment
from engine.categories import CategoryCount, CategoryPeriod, CategoryTrend, DisaggregatedDistribution
from engine.compliance import ComplianceReport, ComplianceStats, PeriodStatus, ReportingGap, rank_by_compliance
from engine.enums import Frequency, ReportStatus, TrendDirection
from engine.forecast import ForecastPoint
from engine.stats import IndicatorSummary


def _coerce(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _coerce(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_coerce(v) for v in obj]
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    return obj


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_serializer(mode="wrap")
    def _serialize(self, handler: Any) -> Any:
        return _coerce(handler(self))

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class AssessmentOut(ApiModel):
    submission_id: str
    is_anomaly: bool
    anomaly_reason: Optional[str] = None
    check: Optional[str] = None
    score: Optional[float] = None

    @classmethod
    def of(cls, a: AnomalyAssessment) -> AssessmentOut:
        return cls(
            submission_id=a.submission_id,
            is_anomaly=a.is_anomaly,
            anomaly_reason=a.reason or None,
            check=a.check,
            score=a.score,
        )


class EvaluationOut(ApiModel):
    indicator_id: str
    submission_id: str
    backfilled: bool
    assessments: List[AssessmentOut]
    written: int = 0


class RecomputeOut(ApiModel):
    indicator_id: str
    evaluated: int
    anomalies: int
    rewritten: int
    assessments: List[AssessmentOut]


class ForecastPointOut(ApiModel):
    day: date = Field(alias="date")
    value: Optional[float] = None
    forecast: float
    is_forecast: bool

    @classmethod
    def of(cls, p: ForecastPoint) -> ForecastPointOut:
        return cls(day=p.date, value=p.value, forecast=p.forecast, is_forecast=p.is_forecast)


class PeriodStatusOut(ApiModel):
    period: str
    start_date: date
    end_date: date
    status: ReportStatus
    submissions: int
    first_arrival: Optional[date] = None

    @classmethod
    def of(cls, p: PeriodStatus) -> PeriodStatusOut:
        return cls(
            period=p.period,
            start_date=p.start,
            end_date=p.end,
            status=p.status,
            submissions=p.submissions,
            first_arrival=p.first_arrival,
        )


class ComplianceStatsOut(ApiModel):
    expected_reports: int
    received_reports: int
    on_time_reports: int
    late_reports: int
    missing_reports: int
    compliance_rate: float
    last_reported_at: Optional[date] = None
    periods: List[PeriodStatusOut] = Field(default_factory=list)

    @classmethod
    def of(cls, s: ComplianceStats) -> ComplianceStatsOut:
        return cls(
            expected_reports=s.expected_reports,
            received_reports=s.received_reports,
            on_time_reports=s.on_time_reports,
            late_reports=s.late_reports,
            missing_reports=s.missing_reports,
            compliance_rate=round(s.compliance_rate, 4),
            last_reported_at=s.last_reported_at,
            periods=[PeriodStatusOut.of(p) for p in s.periods],
        )


class ComplianceOut(ComplianceStatsOut):
    indicator_id: str
    frequency: Frequency
    start_date: date
    end_date: date
    by_disaggregation: Dict[str, ComplianceStatsOut] = Field(default_factory=dict)
    ranking: List[str] = Field(default_factory=list)

    @classmethod
    def of_report(cls, indicator_id: str, report: ComplianceReport) -> ComplianceOut:
        overall = ComplianceStatsOut.of(report.overall)
        return cls(
            **overall.model_dump(),
            indicator_id=indicator_id,
            frequency=report.frequency,
            start_date=report.start,
            end_date=report.end,
            by_disaggregation={k: ComplianceStatsOut.of(v) for k, v in report.by_disaggregation.items()},
            ranking=[k for k, _ in rank_by_compliance(report.by_disaggregation)],
        )


class CategoryCountOut(ApiModel):
    category_id: str
    label: str
    count: int
    percentage: float
    color: Optional[str] = None

    @classmethod
    def of(cls, c: CategoryCount) -> CategoryCountOut:
        return cls(
            category_id=c.category_id,
            label=c.label,
            count=c.count,
            percentage=round(c.percentage, 2),
            color=c.color,
        )


class CategoryStatOut(ApiModel):
    count: int
    percentage: float
    label: str
    color: Optional[str] = None


class CategoryPeriodOut(ApiModel):
    period: str
    start_date: date
    end_date: date
    category_distribution: Dict[str, CategoryStatOut]
    total_submissions: int

    @classmethod
    def of(cls, p: CategoryPeriod) -> CategoryPeriodOut:
        return cls(
            period=p.period,
            start_date=p.start_date,
            end_date=p.end_date,
            category_distribution={
                c.category_id: CategoryStatOut(
                    count=c.count, percentage=round(c.percentage, 2), label=c.label, color=c.color
                )
                for c in p.category_distribution
            },
            total_submissions=p.total_submissions,
        )


class DisaggregatedOut(ApiModel):
    disaggregation_key: str
    disaggregation_label: str
    category_distribution: List[CategoryCountOut]
    total_submissions: int
    last_reported_at: Optional[date] = None

    @classmethod
    def of(cls, d: DisaggregatedDistribution) -> DisaggregatedOut:
        return cls(
            disaggregation_key=d.disaggregation_key,
            disaggregation_label=d.disaggregation_label,
            category_distribution=[CategoryCountOut.of(c) for c in d.distribution],
            total_submissions=d.total_submissions,
            last_reported_at=d.last_reported_at,
        )


class CategoryTrendOut(ApiModel):
    current: Optional[str] = None
    previous: Optional[str] = None
    is_changing: bool = False

    @classmethod
    def of(cls, t: CategoryTrend) -> CategoryTrendOut:
        return cls(current=t.current, previous=t.previous, is_changing=t.is_changing)


class DistributionOut(ApiModel):
    indicator_id: str
    total_submissions: int
    distribution: List[CategoryCountOut]
    most_frequent: Optional[CategoryCountOut] = None
    by_disaggregation: List[DisaggregatedOut] = Field(default_factory=list)
    trend: CategoryTrendOut


class SelectionOut(ApiModel):
    valid: bool
    selected_ids: List[str] = Field(default_factory=list)
    code: Optional[str] = None
    message: Optional[str] = None


class GapOut(ApiModel):
    from_date: date = Field(alias="from")
    to_date: date = Field(alias="to")
    days_missing: int
    expected_submissions: int

    @classmethod
    def of(cls, g: ReportingGap) -> GapOut:
        return cls(
            from_date=g.from_date,
            to_date=g.to_date,
            days_missing=g.days_missing,
            expected_submissions=g.expected_submissions,
        )


class SummaryOut(ApiModel):
    submission_count: int
    anomaly_count: int
    anomaly_rate: float
    last_submission_date: date
    current_value: Optional[float] = None
    average: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    trend: Optional[TrendDirection] = None
    progress_to_target: Optional[float] = None
    progress_from_baseline: Optional[float] = None
    category_distribution: List[CategoryCountOut] = Field(default_factory=list)
    most_frequent: Optional[CategoryCountOut] = None

    @classmethod
    def of(cls, s: IndicatorSummary) -> SummaryOut:
        return cls(
            submission_count=s.submission_count,
            anomaly_count=s.anomaly_count,
            anomaly_rate=round(s.anomaly_rate, 2),
            last_submission_date=s.last_submission_date,
            current_value=s.current_value,
            average=s.average,
            min=s.min,
            max=s.max,
            trend=s.trend,
            progress_to_target=s.progress_to_target,
            progress_from_baseline=s.progress_from_baseline,
            category_distribution=[CategoryCountOut.of(c) for c in s.category_distribution],
            most_frequent=CategoryCountOut.of(s.most_frequent) if s.most_frequent else None,
        )
