"""
Correlation service joining an anomaly with nearby alerts and the active mapping rules for its domain, producing a ranked alert list and, optionally, a narrative summary.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import List, Optional, Tuple

from api.requests import CorrelateRequest
from api.responses import AlertRecord, AnomalyAnalysis, AnomalyEvent, CorrelatedAlert, CorrelationReport
from config import settings
from datasources.provider import DataSourceProvider
from engine.alerts import AlertFilters, AlertMatcher
from engine.correlation import correlate, rank
from engine.enums import Granularity
from engine.exceptions import SummarizerError
from engine.summary import build_context, summarize
from engine.timeutil.civil import TimeConverter, default_converter

log = logging.getLogger(__name__)


def anomaly_event(req: CorrelateRequest, converter: TimeConverter) -> AnomalyEvent:
    hour = req.hour if req.granularity == Granularity.hourly else 0
    return AnomalyEvent(
        time_key=req.hour if req.granularity == Granularity.hourly else req.dt,
        metric_name=req.metric,
        current_value=req.current_value,
        baseline_values=req.baseline_values,
        deltas=req.deltas,
        is_anomaly=True,
        granularity=req.granularity,
        anomaly_timestamp=converter.construct_civil(req.dt, hour),
    )


def domain_for(granularity: Granularity) -> str:
    if granularity == Granularity.hourly:
        return settings.hourly_domain
    return settings.daily_domain


async def matching_alerts(
    matcher: AlertMatcher,
    req: CorrelateRequest,
    event: AnomalyEvent,
    filters: AlertFilters,
) -> Tuple[List[AlertRecord], Tuple]:
    converter = matcher.converter
    if req.granularity == Granularity.daily:
        start, end = converter.civil_day_bounds(req.dt)
        alerts = await matcher.find_window_alerts(start, end, filters)
        return alerts, (start, end)
    ts = event.anomaly_timestamp
    start = ts - timedelta(minutes=req.window_before_minutes)
    end = ts + timedelta(minutes=req.window_after_minutes)
    alerts = await matcher.find_nearby_alerts(ts, req.window_before_minutes, req.window_after_minutes, filters)
    return alerts, (start, end)


async def narrate(
    provider: DataSourceProvider,
    event: AnomalyEvent,
    alerts: List[CorrelatedAlert],
    converter: TimeConverter,
) -> Tuple[Optional[AnomalyAnalysis], Optional[str]]:
    try:
        analysis = await summarize(provider.summarizer, build_context(event, alerts, converter))
    except SummarizerError as exc:
        log.warning("Narrative unavailable for %s at %s: %s", event.metric_name, event.anomaly_timestamp, exc)
        return None, str(exc)
    return analysis, None


async def correlate_anomaly(provider: DataSourceProvider, req: CorrelateRequest) -> CorrelationReport:
    converter = default_converter()
    event = anomaly_event(req, converter)
    filters = AlertFilters(**req.filters.model_dump())
    matcher = AlertMatcher(provider, converter)
    domain = domain_for(req.granularity)

    alerts, (start, end) = await matching_alerts(matcher, req, event, filters)
    rules = await provider.fetch_alert_metric_map(domain)
    ranked = rank(correlate(alerts, rules, target_metric=req.target_metric))
    log.info(
        "Correlated %d alerts against %d %s rules for %s at %s",
        len(ranked), len(rules), domain, req.metric, converter.format_civil(event.anomaly_timestamp),
    )

    narrative, narrative_error = None, None
    if req.include_narrative:
        if settings.summarizer_enabled:
            narrative, narrative_error = await narrate(provider, event, ranked, converter)
        else:
            narrative_error = "Narrative summarizer is disabled"

    return CorrelationReport(
        granularity=req.granularity,
        metric=req.metric,
        domain=domain,
        anomaly_timestamp=event.anomaly_timestamp,
        window_start=start,
        window_end=end,
        alerts=ranked,
        narrative=narrative,
        narrative_error=narrative_error,
    )
