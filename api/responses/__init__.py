"""
Response models for API endpoints and internal data structures.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer, model_validator

from engine.enums import AlertSource, Granularity
from engine.timeutil.civil import parse_instant


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


class NpModel(BaseModel):

    @model_serializer(mode="wrap")
    def _serialize(self, handler: Any) -> Any:
        return _coerce(handler(self))


class MetricComparison(NpModel):
    model_config = ConfigDict(frozen=True)

    time_key: Union[int, date]
    metric_name: str
    current_value: float
    baseline_values: Dict[str, Optional[float]] = Field(default_factory=dict)
    deltas: Dict[str, Optional[float]] = Field(default_factory=dict)
    is_anomaly: bool = False


class AnomalyEvent(MetricComparison):

    granularity: Granularity
    anomaly_timestamp: datetime


class DetectionResult(NpModel):

    granularity: Granularity
    metric_name: str
    mode: str
    threshold_pct: float
    rows: List[MetricComparison] = Field(default_factory=list)
    anomalies: List[AnomalyEvent] = Field(default_factory=list)


_OPTIONAL_TEXT_FIELDS = (
    "priority",
    "severity",
    "team",
    "application",
    "subsystem",
    "alert_name",
    "message",
    "alert_query",
    "sample_log",
    "host",
    "path",
    "status_code",
    "threshold",
    "value",
)


class AlertRecord(NpModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    triggered_at: datetime
    source: AlertSource = AlertSource.other
    source_raw: Optional[str] = None
    priority: Optional[str] = None
    severity: Optional[str] = None
    team: Optional[str] = None
    application: Optional[str] = None
    subsystem: Optional[str] = None
    alert_name: Optional[str] = None
    message: Optional[str] = None
    alert_query: Optional[str] = None
    sample_log: Optional[str] = None
    host: Optional[str] = None
    path: Optional[str] = None
    status_code: Optional[str] = None
    threshold: Optional[str] = None
    value: Optional[str] = None
    ingested_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def _normalise_source(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        raw = data.get("source")
        if isinstance(raw, AlertSource):
            return data
        out = dict(data)
        out.setdefault("source_raw", raw)
        out["source"] = AlertSource.from_raw(raw)
        return out

    @field_validator("triggered_at", mode="before")
    @classmethod
    def _parse_triggered_at(cls, v: Any) -> datetime:
        return parse_instant(v)

    @field_validator("ingested_at", mode="before")
    @classmethod
    def _parse_ingested_at(cls, v: Any) -> Optional[datetime]:
        if v is None or v == "":
            return None
        return parse_instant(v)

    @field_validator(*_OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(v)


class AlertMetricMappingRule(NpModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    match_field: str
    match_type: str
    match_value: str = ""
    domain: Optional[str] = None
    metric: Optional[str] = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    notes: Optional[str] = None
    is_active: bool = True

    @field_validator("match_type", mode="before")
    @classmethod
    def _lower_match_type(cls, v: Any) -> str:
        return str(v or "").strip().lower()

    @field_validator("match_value", mode="before")
    @classmethod
    def _text_match_value(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def _parse_confidence(cls, v: Any) -> Optional[float]:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        try:
            value = float(v)
        except (TypeError, ValueError):
            return None
        if value != value:
            return None
        return min(1.0, max(0.0, value))

    @field_validator("is_active", mode="before")
    @classmethod
    def _parse_active(cls, v: Any) -> bool:
        if isinstance(v, str):
            return v.strip().lower() in {"true", "t", "1", "yes"}
        return bool(v)


class CorrelatedAlert(AlertRecord):

    matched_rules: List[AlertMetricMappingRule] = Field(default_factory=list)
    correlation_score: Optional[float] = None


class AnomalyAnalysis(NpModel):

    summary: str
    root_cause: str
    affected_systems: List[str] = Field(default_factory=list)
    timeline: str
    recommendations: List[str] = Field(default_factory=list)
    confidence: float


class CorrelationReport(NpModel):

    granularity: Granularity
    metric: str
    domain: Optional[str] = None
    anomaly_timestamp: datetime
    window_start: datetime
    window_end: datetime
    alerts: List[CorrelatedAlert] = Field(default_factory=list)
    narrative: Optional[AnomalyAnalysis] = None
    narrative_error: Optional[str] = None


class ForecastPoint(NpModel):

    dt: date
    value: float
    is_forecast: bool = True


class AlertSearchResult(NpModel):

    count: int
    alerts: List[AlertRecord] = Field(default_factory=list)


class ForecastResult(NpModel):

    metric: str
    history: List[ForecastPoint] = Field(default_factory=list)
    forecast: List[ForecastPoint] = Field(default_factory=list)


class LatestDate(NpModel):

    dt: Optional[date] = None
