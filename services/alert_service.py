"""
Alert explorer service listing stored alerts for a civil time window, or the most recent alerts when no window is given.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

from api.requests import AlertSearchRequest
from api.responses import AlertSearchResult
from datasources.provider import DataSourceProvider
from engine.alerts import AlertFilters, AlertMatcher


async def search_alerts(provider: DataSourceProvider, req: AlertSearchRequest) -> AlertSearchResult:
    filters = AlertFilters(
        sources=req.sources,
        priorities=req.priorities,
        severities=req.severities,
        search_text=req.search_text,
    )
    matcher = AlertMatcher(provider, limit=req.limit)
    alerts = await matcher.find_alerts(req.start, req.end, filters, anchor=req.anchor)
    return AlertSearchResult(count=len(alerts), alerts=alerts)
