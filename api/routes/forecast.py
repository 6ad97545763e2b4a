"""
Forecast route projecting a daily metric over the next days.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from fastapi import APIRouter

from api.requests import ForecastRequest
from api.responses import ForecastResult
from api.routes.common import get_provider, run_with_retry
from api.routes.exception import handle_exceptions
from services.forecast_service import forecast_daily

router = APIRouter(tags=["Forecast"])


@router.post("/forecast/daily", response_model=ForecastResult, summary="Daily metric projection")
@handle_exceptions
async def daily_forecast(req: ForecastRequest) -> ForecastResult:
    return await run_with_retry(forecast_daily, get_provider(), req)
