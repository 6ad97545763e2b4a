"""
Tests for route semantics: anomaly, alert, correlation and forecast handlers with an injected provider, and the translation of engine and store errors into HTTP status codes.
"""

from __future__ import annotations

from datetime import date

import pytest
from fastapi import HTTPException

from api.requests import (
    AlertSearchRequest,
    CorrelateRequest,
    DailyAnomalyRequest,
    ForecastRequest,
    HourlyAnomalyRequest,
)
from api.routes import alerts as alerts_route
from api.routes import correlation as correlation_route
from api.routes import forecast as forecast_route
from api.routes import health as health_route
from api.routes import metrics as metrics_route
from api.routes.exception import handle_exceptions
from conftest import FakeProvider, make_alert, utc
from datasources.exceptions import DataSourceUnavailable, InvalidQuery, QueryTimeout
from engine.exceptions import InvalidHour


def hourly_rows():
    rows = []
    for hour, day0 in ((9, 100), (10, 40)):
        rows += [
            {"dt": "2025-12-20", "hour": hour, "cohort": "DAY-0", "applications_created": day0},
            {"dt": "2025-12-20", "hour": hour, "cohort": "DAY-1", "applications_created": 100},
            {"dt": "2025-12-20", "hour": hour, "cohort": "DAY-7", "applications_created": 100},
        ]
    return rows


@pytest.mark.asyncio
async def test_hourly_anomalies_defaults_to_latest_date(monkeypatch):
    provider = FakeProvider(hourly=hourly_rows(), latest=date(2025, 12, 20))
    monkeypatch.setattr(metrics_route, "get_provider", lambda: provider)
    result = await metrics_route.hourly_anomalies(HourlyAnomalyRequest())
    assert result.mode == "cohort"
    assert [a.time_key for a in result.anomalies] == [10]


@pytest.mark.asyncio
async def test_daily_anomalies_route(monkeypatch):
    provider = FakeProvider(daily=[
        {"dt": "2025-12-01", "disbursed": 100},
        {"dt": "2025-12-02", "disbursed": 100},
        {"dt": "2025-12-03", "disbursed": 60},
    ])
    monkeypatch.setattr(metrics_route, "get_provider", lambda: provider)
    req = DailyAnomalyRequest(start=date(2025, 12, 1), end=date(2025, 12, 3))
    result = await metrics_route.daily_anomalies(req)
    assert [a.time_key for a in result.anomalies] == [date(2025, 12, 3)]


@pytest.mark.asyncio
async def test_latest_date_route(monkeypatch):
    monkeypatch.setattr(metrics_route, "get_provider", lambda: FakeProvider(latest=date(2025, 12, 23)))
    result = await metrics_route.latest_date()
    assert result.dt == date(2025, 12, 23)


@pytest.mark.asyncio
async def test_alert_search_route(monkeypatch):
    provider = FakeProvider(alerts=[
        make_alert(utc(2025, 12, 20, 8, 10), alert_name="Gateway Timeout"),
        make_alert(utc(2025, 12, 20, 8, 20), alert_name="Disk full"),
    ])
    monkeypatch.setattr(alerts_route, "get_provider", lambda: provider)
    req = AlertSearchRequest(start="2025-12-20T13:00:00", end="2025-12-20T15:00:00", search_text="timeout")
    result = await alerts_route.alerts(req)
    assert result.count == 1
    assert result.alerts[0].alert_name == "Gateway Timeout"
    # naive request times are civil
    assert provider.alert_calls[0] == (utc(2025, 12, 20, 7, 30), utc(2025, 12, 20, 9, 30))


@pytest.mark.asyncio
async def test_correlate_route_ranks_alerts(monkeypatch):
    from api.responses import AlertMetricMappingRule

    provider = FakeProvider(
        alerts=[
            make_alert(utc(2025, 12, 20, 8, 20), alert_name="Gateway Timeout", priority="p2"),
            make_alert(utc(2025, 12, 20, 8, 25), alert_name="Disk full", priority="p1"),
        ],
        rules=[AlertMetricMappingRule(
            match_field="alert_name", match_type="contains", match_value="timeout",
            domain="applications", metric="applications_created", confidence=0.9,
        )],
    )
    monkeypatch.setattr(correlation_route, "get_provider", lambda: provider)
    req = CorrelateRequest(granularity="hourly", metric="applications_created", dt=date(2025, 12, 20), hour=14)
    report = await correlation_route.correlate_alerts(req)
    assert report.domain == "applications"
    assert [a.alert_name for a in report.alerts] == ["Gateway Timeout", "Disk full"]
    assert report.alerts[0].correlation_score == pytest.approx(0.9)
    assert report.narrative is None and report.narrative_error is None


@pytest.mark.asyncio
async def test_forecast_route(monkeypatch):
    provider = FakeProvider(daily=[{"dt": f"2025-12-0{i}", "disbursed": 10} for i in range(1, 4)])
    monkeypatch.setattr(forecast_route, "get_provider", lambda: provider)
    req = ForecastRequest(start=date(2025, 12, 1), end=date(2025, 12, 3), horizon_days=2)
    result = await forecast_route.daily_forecast(req)
    assert [p.value for p in result.history] == [10, 10, 10]
    assert [p.dt for p in result.forecast] == [date(2025, 12, 4), date(2025, 12, 5)]


@pytest.mark.asyncio
async def test_health_route(monkeypatch):
    class Summarizer:
        configured = False

    class Provider:
        settings = type("S", (), {"store_backend": "postgrest"})()
        summarizer = Summarizer()

    monkeypatch.setattr(health_route, "get_provider", lambda: Provider())
    assert await health_route.health() == {"status": "ok", "store": "postgrest", "summarizer": "unconfigured"}


@pytest.mark.asyncio
@pytest.mark.parametrize("exc, status", [
    (InvalidHour("bad hour"), 422),
    (QueryTimeout("slow"), 504),
    (DataSourceUnavailable("down"), 502),
    (InvalidQuery("400"), 502),
    (ValueError("bad"), 400),
    (RuntimeError("boom"), 500),
])
async def test_handle_exceptions_maps_errors(exc, status):
    @handle_exceptions
    async def handler():
        raise exc

    with pytest.raises(HTTPException) as exc_info:
        await handler()
    assert exc_info.value.status_code == status


@pytest.mark.asyncio
async def test_store_failure_surfaces_as_bad_gateway(monkeypatch):
    class BrokenProvider(FakeProvider):
        async def fetch_daily_metrics(self, start, end):
            raise DataSourceUnavailable("store down")

    monkeypatch.setattr(metrics_route, "get_provider", lambda: BrokenProvider())
    with pytest.raises(HTTPException) as exc_info:
        await metrics_route.daily_anomalies(DailyAnomalyRequest())
    assert exc_info.value.status_code == 502
