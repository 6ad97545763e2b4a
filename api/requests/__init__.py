from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from config import DAILY_METRIC_FIELDS, HOURLY_METRIC_FIELDS, settings
from engine.enums import Granularity
from engine.timeutil.civil import default_converter, parse_hour

_MAX_WINDOW = settings.alert_window_max_minutes


def _check_metric(value: str, allowed: List[str]) -> str:
    if value not in allowed:
        raise ValueError(f"Unknown metric {value!r}; expected one of {', '.join(allowed)}")
    return value


def _as_civil(value: Optional[datetime]) -> Optional[datetime]:
    # naive request timestamps are civil wall-clock times
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=default_converter().zone)


class AlertFilterRequest(BaseModel):
    sources: List[str] = Field(default_factory=list)
    priorities: List[str] = Field(default_factory=list)
    severities: List[str] = Field(default_factory=list)
    search_text: Optional[str] = None


class HourlyAnomalyRequest(BaseModel):
    dt: Optional[date] = None
    metric: str = settings.hourly_default_metric
    threshold_pct: Optional[float] = Field(default=None, gt=0.0, le=100.0)

    @field_validator("metric")
    @classmethod
    def _metric(cls, v: str) -> str:
        return _check_metric(v, HOURLY_METRIC_FIELDS)


class DailyAnomalyRequest(BaseModel):
    start: Optional[date] = None
    end: Optional[date] = None
    metric: str = settings.daily_default_metric
    threshold_pct: Optional[float] = Field(default=None, gt=0.0, le=100.0)

    @field_validator("metric")
    @classmethod
    def _metric(cls, v: str) -> str:
        return _check_metric(v, DAILY_METRIC_FIELDS)

    @model_validator(mode="after")
    def _range(self) -> "DailyAnomalyRequest":
        if self.start and self.end and self.end < self.start:
            raise ValueError("end must not precede start")
        return self


class AlertSearchRequest(AlertFilterRequest):
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    anchor: Optional[datetime] = None
    limit: int = Field(default=settings.alert_query_limit, ge=1, le=10000)

    @field_validator("start", "end", "anchor")
    @classmethod
    def _civil(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _as_civil(v)

    @model_validator(mode="after")
    def _range(self) -> "AlertSearchRequest":
        if self.start and self.end and self.end < self.start:
            raise ValueError("end must not precede start")
        return self


class CorrelateRequest(BaseModel):
    granularity: Granularity
    metric: str
    dt: date
    hour: Optional[int] = None
    window_before_minutes: int = Field(default=settings.alert_window_before_minutes, ge=0, le=_MAX_WINDOW)
    window_after_minutes: int = Field(default=settings.alert_window_after_minutes, ge=0, le=_MAX_WINDOW)
    current_value: float = 0.0
    baseline_values: Dict[str, Optional[float]] = Field(default_factory=dict)
    deltas: Dict[str, Optional[float]] = Field(default_factory=dict)
    target_metric: Optional[str] = None
    include_narrative: bool = False
    filters: AlertFilterRequest = Field(default_factory=AlertFilterRequest)

    @field_validator("hour", mode="before")
    @classmethod
    def _hour(cls, v: object) -> Optional[int]:
        if v is None:
            return None
        return parse_hour(v)

    @model_validator(mode="after")
    def _metric_for_granularity(self) -> "CorrelateRequest":
        if self.granularity == Granularity.hourly:
            _check_metric(self.metric, HOURLY_METRIC_FIELDS)
            if self.hour is None:
                raise ValueError("hour is required for hourly anomalies")
        else:
            _check_metric(self.metric, DAILY_METRIC_FIELDS)
        return self


class ForecastRequest(BaseModel):
    metric: str = settings.daily_default_metric
    start: Optional[date] = None
    end: Optional[date] = None
    horizon_days: int = Field(default=settings.forecast_horizon_days, ge=1, le=90)

    @field_validator("metric")
    @classmethod
    def _metric(cls, v: str) -> str:
        return _check_metric(v, DAILY_METRIC_FIELDS)

    @model_validator(mode="after")
    def _range(self) -> "ForecastRequest":
        if self.start and self.end and self.end < self.start:
            raise ValueError("end must not precede start")
        return self
