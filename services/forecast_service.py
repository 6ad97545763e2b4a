"""
Forecast service projecting a daily funnel metric beyond the last stored day.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

from api.requests import ForecastRequest
from api.responses import ForecastPoint, ForecastResult
from datasources.provider import DataSourceProvider
from engine.anomaly import iter_daily
from engine.forecast import project
from services.anomaly_service import daily_range


async def forecast_daily(provider: DataSourceProvider, req: ForecastRequest) -> ForecastResult:
    start, end = daily_range(req.start, req.end)
    rows = await provider.fetch_daily_metrics(start, end)
    by_day = {obs.day: obs.value for obs in iter_daily(rows, req.metric)}
    history = sorted(by_day.items())
    return ForecastResult(
        metric=req.metric,
        history=[ForecastPoint(dt=d, value=v, is_forecast=False) for d, v in history],
        forecast=project(history, horizon_days=req.horizon_days),
    )
