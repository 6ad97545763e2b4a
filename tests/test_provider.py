"""
Test cases for the data source provider's store queries and row parsing.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from datetime import date

import pytest

from conftest import utc
from config import settings
from datasources.data_config import DataSourceSettings
from datasources.provider import DataSourceProvider
from engine.alerts import AlertFilters
from engine.enums import AlertSource


class RecordingStore:
    def __init__(self, rows):
        self.rows = rows
        self.calls = []

    async def select(self, table, query):
        self.calls.append((table, dict(query.to_params()) if table != settings.alerts_table else query.to_params()))
        return self.rows


def provider_with(rows) -> DataSourceProvider:
    provider = DataSourceProvider(DataSourceSettings())
    provider.store = RecordingStore(rows)
    return provider


@pytest.mark.asyncio
async def test_fetch_hourly_metrics_filters_by_date_and_cohort():
    provider = provider_with([{"dt": "2025-12-20"}])
    rows = await provider.fetch_hourly_metrics(date(2025, 12, 20), cohort="DAY-0")
    assert rows == [{"dt": "2025-12-20"}]
    table, params = provider.store.calls[0]
    assert table == settings.hourly_metrics_table
    assert params["dt"] == "eq.2025-12-20"
    assert params["cohort"] == "eq.DAY-0"
    assert params["order"] == "hour.asc"


@pytest.mark.asyncio
async def test_fetch_latest_date():
    provider = provider_with([{"dt": "2025-12-23"}])
    assert await provider.fetch_latest_date() == date(2025, 12, 23)
    _, params = provider.store.calls[0]
    assert params == {"select": "dt", "order": "dt.desc", "limit": "1"}
    assert await provider_with([]).fetch_latest_date() is None
    assert await provider_with([{"dt": "garbage"}]).fetch_latest_date() is None


@pytest.mark.asyncio
async def test_fetch_daily_metrics_range():
    provider = provider_with([])
    await provider.fetch_daily_metrics(date(2025, 12, 1), date(2025, 12, 7))
    table, params = provider.store.calls[0]
    assert table == settings.daily_metrics_table
    assert params["dt"] == "lte.2025-12-07"
    assert params["order"] == "dt.asc"


@pytest.mark.asyncio
async def test_fetch_alerts_sends_utc_bounds_and_predicates_and_skips_bad_rows():
    provider = provider_with([
        {"triggered_at": "2025-12-20T08:10:00+00:00", "source": "sentry", "status_code": 503},
        {"triggered_at": "not a time", "source": "slack"},
    ])
    filters = AlertFilters(sources=["error-tracker"], priorities=["p1"])
    alerts = await provider.fetch_alerts(utc(2025, 12, 20, 8), utc(2025, 12, 20, 9), filters, limit=10)
    assert len(alerts) == 1
    assert alerts[0].source == AlertSource.error_tracker
    assert alerts[0].status_code == "503"
    _, params = provider.store.calls[0]
    assert ("triggered_at", "gte.2025-12-20T08:00:00+00:00") in params
    assert ("triggered_at", "lte.2025-12-20T09:00:00+00:00") in params
    assert ("source", "in.(error-tracker,sentry)") in params
    assert ("priority", "in.(p1)") in params
    assert ("order", "triggered_at.desc") in params
    assert ("limit", "10") in params


@pytest.mark.asyncio
async def test_fetch_alert_metric_map_active_rules_for_domain():
    provider = provider_with([
        {"match_field": "alert_name", "match_type": "contains", "match_value": "x", "confidence": "0.9", "is_active": "true"},
        {"match_type": "contains"},
    ])
    rules = await provider.fetch_alert_metric_map("applications")
    assert len(rules) == 1
    assert rules[0].confidence == pytest.approx(0.9)
    _, params = provider.store.calls[0]
    assert params["is_active"] == "eq.true"
    assert params["domain"] == "eq.applications"
