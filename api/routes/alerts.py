"""
Alert explorer route listing stored alerts by civil window, source, priority, severity and free text.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from fastapi import APIRouter

from api.requests import AlertSearchRequest
from api.responses import AlertSearchResult
from api.routes.common import get_provider, run_with_retry
from api.routes.exception import handle_exceptions
from services.alert_service import search_alerts

router = APIRouter(tags=["Alerts"])


@router.post("/alerts", response_model=AlertSearchResult, summary="Search stored alerts")
@handle_exceptions
async def alerts(req: AlertSearchRequest) -> AlertSearchResult:
    return await run_with_retry(search_alerts, get_provider(), req)
