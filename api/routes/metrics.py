"""
Metric routes: hourly and daily anomaly detection over the stored funnel metrics, and the latest date with hourly data.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from fastapi import APIRouter

from api.requests import DailyAnomalyRequest, HourlyAnomalyRequest
from api.responses import DetectionResult, LatestDate
from api.routes.common import get_provider, run_with_retry
from api.routes.exception import handle_exceptions
from services.anomaly_service import detect_daily_anomalies, detect_hourly_anomalies

router = APIRouter(tags=["Metrics"])


@router.post("/anomalies/hourly", response_model=DetectionResult, summary="Hourly cohort or hour-over-hour anomalies")
@handle_exceptions
async def hourly_anomalies(req: HourlyAnomalyRequest) -> DetectionResult:
    return await run_with_retry(detect_hourly_anomalies, get_provider(), req)


@router.post("/anomalies/daily", response_model=DetectionResult, summary="Day-over-day anomalies")
@handle_exceptions
async def daily_anomalies(req: DailyAnomalyRequest) -> DetectionResult:
    return await run_with_retry(detect_daily_anomalies, get_provider(), req)


@router.get("/metrics/latest-date", response_model=LatestDate, summary="Most recent date with hourly metrics")
@handle_exceptions
async def latest_date() -> LatestDate:
    provider = get_provider()
    return LatestDate(dt=await run_with_retry(provider.fetch_latest_date))
