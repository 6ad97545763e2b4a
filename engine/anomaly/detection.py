"""
Detection logic for funnel metric drops. Every mode shares one threshold policy: an observation is anomalous when any available baseline delta falls below the negative threshold. Hourly data is compared against prior-day and prior-week cohorts (or the preceding hour when no cohorts exist) and daily data against the preceding chronological day.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from api.responses import AnomalyEvent, DetectionResult, MetricComparison
from config import settings
from engine.anomaly.series import MetricObservation, has_cohorts
from engine.baseline.compare import deltas as compute_deltas
from engine.enums import BaselineLabel, Granularity
from engine.timeutil.civil import TimeConverter, default_converter

log = logging.getLogger(__name__)

MODE_COHORT = "cohort"
MODE_SEQUENCE = "sequence"
MODE_DAILY = "daily"


def evaluate(
    current: float,
    baselines: Mapping[str, Optional[float]],
    threshold_pct: float | None = None,
) -> Tuple[Dict[str, Optional[float]], bool]:
    if threshold_pct is None:
        threshold_pct = settings.anomaly_threshold_pct
    result = compute_deltas(current, baselines)
    flagged = any(d is not None and d < -threshold_pct for d in result.values())
    return result, flagged


def _event(
    comparison: MetricComparison,
    granularity: Granularity,
    day: date,
    hour: int,
    converter: TimeConverter,
) -> AnomalyEvent:
    return AnomalyEvent(
        **comparison.model_dump(),
        granularity=granularity,
        anomaly_timestamp=converter.construct_civil(day, hour),
    )


def detect_hourly_cohorts(
    observations: Iterable[MetricObservation],
    metric: str,
    threshold_pct: float | None = None,
    converter: TimeConverter | None = None,
) -> DetectionResult:
    if threshold_pct is None:
        threshold_pct = settings.anomaly_threshold_pct
    converter = converter or default_converter()

    current_label = settings.hourly_cohort_current.upper()
    cohort_labels = {
        current_label: "day0",
        settings.hourly_cohort_prior_day.upper(): BaselineLabel.day1.value,
        settings.hourly_cohort_prior_week.upper(): BaselineLabel.day7.value,
    }

    buckets: Dict[int, Dict[str, float]] = {h: {} for h in range(24)}
    current_days: Dict[int, date] = {}
    for obs in observations:
        if obs.hour is None or obs.cohort not in cohort_labels:
            continue
        buckets[obs.hour][cohort_labels[obs.cohort]] = obs.value
        if obs.cohort == current_label:
            current_days[obs.hour] = obs.day

    rows: List[MetricComparison] = []
    anomalies: List[AnomalyEvent] = []
    for hour in range(24):
        bucket = buckets[hour]
        current = bucket.get("day0", 0.0)
        baselines = {
            BaselineLabel.day1.value: bucket.get(BaselineLabel.day1.value, 0.0),
            BaselineLabel.day7.value: bucket.get(BaselineLabel.day7.value, 0.0),
        }
        result, flagged = evaluate(current, baselines, threshold_pct)
        comparison = MetricComparison(
            time_key=hour,
            metric_name=metric,
            current_value=current,
            baseline_values=baselines,
            deltas=result,
            is_anomaly=flagged,
        )
        rows.append(comparison)
        if not flagged:
            continue
        day = current_days.get(hour)
        if day is None:
            log.debug("detect_hourly_cohorts: hour %d flagged but has no %s row", hour, current_label)
            continue
        anomalies.append(_event(comparison, Granularity.hourly, day, hour, converter))

    return DetectionResult(
        granularity=Granularity.hourly,
        metric_name=metric,
        mode=MODE_COHORT,
        threshold_pct=threshold_pct,
        rows=rows,
        anomalies=anomalies,
    )


def detect_hourly_sequence(
    observations: Iterable[MetricObservation],
    metric: str,
    threshold_pct: float | None = None,
    converter: TimeConverter | None = None,
) -> DetectionResult:
    if threshold_pct is None:
        threshold_pct = settings.anomaly_threshold_pct
    converter = converter or default_converter()

    points: Dict[Tuple[date, int], float] = {}
    for obs in observations:
        if obs.hour is None:
            continue
        points[(obs.day, obs.hour)] = obs.value

    rows: List[MetricComparison] = []
    anomalies: List[AnomalyEvent] = []
    for (day, hour), current in sorted(points.items()):
        # a missing preceding hour leaves the baseline unavailable
        reference = points.get((day, hour - 1))
        baselines = {BaselineLabel.previous_hour.value: reference}
        result, flagged = evaluate(current, baselines, threshold_pct)
        comparison = MetricComparison(
            time_key=hour,
            metric_name=metric,
            current_value=current,
            baseline_values=baselines,
            deltas=result,
            is_anomaly=flagged,
        )
        rows.append(comparison)
        if flagged:
            anomalies.append(_event(comparison, Granularity.hourly, day, hour, converter))

    return DetectionResult(
        granularity=Granularity.hourly,
        metric_name=metric,
        mode=MODE_SEQUENCE,
        threshold_pct=threshold_pct,
        rows=rows,
        anomalies=anomalies,
    )


def detect_hourly(
    observations: Iterable[MetricObservation],
    metric: str,
    threshold_pct: float | None = None,
    converter: TimeConverter | None = None,
) -> DetectionResult:
    items = list(observations)
    baseline_cohorts = (settings.hourly_cohort_prior_day, settings.hourly_cohort_prior_week)
    if has_cohorts(items, baseline_cohorts):
        return detect_hourly_cohorts(items, metric, threshold_pct, converter)
    return detect_hourly_sequence(items, metric, threshold_pct, converter)


def detect_daily(
    observations: Iterable[MetricObservation],
    metric: str,
    threshold_pct: float | None = None,
    converter: TimeConverter | None = None,
) -> DetectionResult:
    if threshold_pct is None:
        threshold_pct = settings.anomaly_threshold_pct
    converter = converter or default_converter()

    # chronological regardless of the caller's display order
    by_day: Dict[date, float] = {}
    for obs in observations:
        by_day[obs.day] = obs.value

    rows: List[MetricComparison] = []
    anomalies: List[AnomalyEvent] = []
    previous: Optional[float] = None
    for day in sorted(by_day):
        current = by_day[day]
        baselines = {BaselineLabel.previous_day.value: previous}
        result, flagged = evaluate(current, baselines, threshold_pct)
        comparison = MetricComparison(
            time_key=day,
            metric_name=metric,
            current_value=current,
            baseline_values=baselines,
            deltas=result,
            is_anomaly=flagged,
        )
        rows.append(comparison)
        if flagged:
            anomalies.append(_event(comparison, Granularity.daily, day, 0, converter))
        previous = current

    return DetectionResult(
        granularity=Granularity.daily,
        metric_name=metric,
        mode=MODE_DAILY,
        threshold_pct=threshold_pct,
        rows=rows,
        anomalies=anomalies,
    )
