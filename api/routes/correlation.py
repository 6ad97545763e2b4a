"""
Correlation route ranking the alerts around one anomaly by the active mapping rules of its domain.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from fastapi import APIRouter

from api.requests import CorrelateRequest
from api.responses import CorrelationReport
from api.routes.common import get_provider, run_with_retry
from api.routes.exception import handle_exceptions
from services.correlation_service import correlate_anomaly

router = APIRouter(tags=["Correlation"])


@router.post("/correlate", response_model=CorrelationReport, summary="Rank alerts correlated with an anomaly")
@handle_exceptions
async def correlate_alerts(req: CorrelateRequest) -> CorrelationReport:
    return await run_with_retry(correlate_anomaly, get_provider(), req)
