"""
Anomaly service loading hourly and daily funnel metrics from the store and running detection over them.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional, Tuple

from api.requests import DailyAnomalyRequest, HourlyAnomalyRequest
from api.responses import DetectionResult
from config import settings
from datasources.provider import DataSourceProvider
from engine.anomaly import detect_daily, detect_hourly, iter_daily, iter_hourly
from engine.timeutil.civil import default_converter

log = logging.getLogger(__name__)


def daily_range(start: Optional[date], end: Optional[date]) -> Tuple[date, date]:
    end = end or default_converter().civil_today()
    start = start or end - timedelta(days=settings.daily_default_days - 1)
    return start, end


async def resolve_hourly_date(provider: DataSourceProvider, requested: Optional[date]) -> date:
    if requested is not None:
        return requested
    latest = await provider.fetch_latest_date()
    if latest is None:
        latest = default_converter().civil_today()
        log.info("No hourly metrics stored; defaulting to civil today %s", latest)
    return latest


async def detect_hourly_anomalies(provider: DataSourceProvider, req: HourlyAnomalyRequest) -> DetectionResult:
    day = await resolve_hourly_date(provider, req.dt)
    rows = await provider.fetch_hourly_metrics(day)
    result = detect_hourly(iter_hourly(rows, req.metric), req.metric, req.threshold_pct)
    log.info(
        "Hourly detection for %s on %s (%s mode): %d rows, %d anomalies",
        req.metric, day, result.mode, len(result.rows), len(result.anomalies),
    )
    return result


async def detect_daily_anomalies(provider: DataSourceProvider, req: DailyAnomalyRequest) -> DetectionResult:
    start, end = daily_range(req.start, req.end)
    rows = await provider.fetch_daily_metrics(start, end)
    result = detect_daily(iter_daily(rows, req.metric), req.metric, req.threshold_pct)
    log.info(
        "Daily detection for %s over %s..%s: %d rows, %d anomalies",
        req.metric, start, end, len(result.rows), len(result.anomalies),
    )
    return result
