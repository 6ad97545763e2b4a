"""
Test cases for alert matching around anomalies, covering the primary window query, the day-wide fallback under both timestamp interpretations, and query timeouts.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from conftest import FakeProvider, make_alert, utc
from datasources.exceptions import QueryTimeout
from engine.alerts import AlertFilters, AlertMatcher, StoredAsCivil, StoredAsUtc, within_tolerance
from engine.alerts.proximity import build_interpretations
from engine.exceptions import InvalidDate
from engine.timeutil.civil import TimeConverter

IST = timezone(timedelta(hours=5, minutes=30))
ANOMALY = datetime(2025, 12, 20, 14, 0, tzinfo=IST)  # 08:30 UTC


def matcher(provider, **kwargs):
    return AlertMatcher(provider, TimeConverter(330), **kwargs)


@pytest.mark.asyncio
async def test_primary_window_returns_in_range_alerts_descending():
    provider = FakeProvider(alerts=[
        make_alert(utc(2025, 12, 20, 8, 10), alert_name="early"),
        make_alert(utc(2025, 12, 20, 8, 50), alert_name="late"),
        make_alert(utc(2025, 12, 20, 10, 0), alert_name="outside"),
    ])
    found = await matcher(provider).find_nearby_alerts(ANOMALY, 30, 30)
    assert [a.alert_name for a in found] == ["late", "early"]
    start, end = provider.alert_calls[0]
    assert start == utc(2025, 12, 20, 8, 0)
    assert end == utc(2025, 12, 20, 9, 0)
    assert len(provider.alert_calls) == 1


@pytest.mark.asyncio
async def test_fallback_finds_alert_stored_as_civil():
    # 14:05 civil written into the UTC column
    provider = FakeProvider(alerts=[make_alert(utc(2025, 12, 20, 14, 5), alert_name="mislabelled")])
    found = await matcher(provider).find_nearby_alerts(ANOMALY, 30, 30)
    assert [a.alert_name for a in found] == ["mislabelled"]
    assert provider.alert_calls[1] == (utc(2025, 12, 20, 0, 0, 0), utc(2025, 12, 20, 23, 59, 59))


@pytest.mark.asyncio
async def test_fallback_respects_configured_interpretations():
    provider = FakeProvider(alerts=[make_alert(utc(2025, 12, 20, 14, 5))])
    found = await matcher(provider, interpretations=["stored_as_utc"]).find_nearby_alerts(ANOMALY, 30, 30)
    assert found == []


@pytest.mark.asyncio
async def test_fallback_skipped_for_wide_windows():
    provider = FakeProvider(alerts=[make_alert(utc(2025, 12, 20, 14, 5))])
    found = await matcher(provider).find_nearby_alerts(ANOMALY, 60, 60)
    assert found == []
    assert len(provider.alert_calls) == 1


@pytest.mark.asyncio
async def test_fallback_without_match_returns_empty_primary():
    provider = FakeProvider(alerts=[make_alert(utc(2025, 12, 20, 20, 0))])
    found = await matcher(provider).find_nearby_alerts(ANOMALY, 30, 30)
    assert found == []
    assert len(provider.alert_calls) == 2


@pytest.mark.asyncio
async def test_search_text_is_applied_client_side():
    provider = FakeProvider(alerts=[
        make_alert(utc(2025, 12, 20, 8, 20), alert_name="Gateway Timeout"),
        make_alert(utc(2025, 12, 20, 8, 25), alert_name="Disk full", host="db-1"),
    ])
    filters = AlertFilters(search_text="  <timeout>  ")
    found = await matcher(provider).find_nearby_alerts(ANOMALY, 30, 30, filters)
    assert [a.alert_name for a in found] == ["Gateway Timeout"]


@pytest.mark.asyncio
async def test_primary_timeout_raises_query_timeout():
    class SlowProvider(FakeProvider):
        async def fetch_alerts(self, start=None, end=None, filters=None, limit=None):
            await asyncio.sleep(1)
            return []

    with pytest.raises(QueryTimeout):
        await matcher(SlowProvider(), query_timeout=0.01).find_nearby_alerts(ANOMALY, 30, 30)


@pytest.mark.asyncio
async def test_fallback_has_its_own_timeout():
    class SlowFallback(FakeProvider):
        async def fetch_alerts(self, start=None, end=None, filters=None, limit=None):
            self.alert_calls.append((start, end))
            if len(self.alert_calls) > 1:
                await asyncio.sleep(1)
            return []

    provider = SlowFallback()
    with pytest.raises(QueryTimeout):
        await matcher(provider, query_timeout=5, fallback_timeout=0.01).find_nearby_alerts(ANOMALY, 30, 30)


@pytest.mark.asyncio
async def test_naive_anomaly_timestamp_is_rejected():
    with pytest.raises(InvalidDate):
        await matcher(FakeProvider()).find_nearby_alerts(datetime(2025, 12, 20, 14, 0), 30, 30)


@pytest.mark.asyncio
async def test_find_alerts_without_window_returns_recent():
    provider = FakeProvider(alerts=[
        make_alert(utc(2025, 12, 1, 1, 0), alert_name="old"),
        make_alert(utc(2025, 12, 20, 1, 0), alert_name="new"),
    ])
    found = await matcher(provider).find_alerts()
    assert [a.alert_name for a in found] == ["new", "old"]
    assert provider.alert_calls == [(None, None)]


@pytest.mark.asyncio
async def test_find_window_alerts_has_no_fallback():
    provider = FakeProvider(alerts=[make_alert(utc(2025, 12, 21, 1, 0))])
    start, end = TimeConverter(330).civil_day_bounds("2025-12-20")
    found = await matcher(provider).find_window_alerts(start, end)
    assert found == []
    assert len(provider.alert_calls) == 1


@pytest.mark.asyncio
async def test_fallback_candidates_are_not_capped_by_caller_limit():
    decoys = [make_alert(utc(2025, 12, 20, 20, m), alert_name=f"decoy {m}") for m in range(0, 60, 10)]
    provider = FakeProvider(alerts=decoys + [
        make_alert(utc(2025, 12, 20, 14, 5), alert_name="mislabelled"),
        make_alert(utc(2025, 12, 20, 13, 50), alert_name="mislabelled earlier"),
    ])
    found = await matcher(provider, limit=1, fallback_limit=100).find_nearby_alerts(ANOMALY, 30, 30)
    assert [a.alert_name for a in found] == ["mislabelled"]
    assert provider.alert_limits == [1, 100]

def test_stored_as_utc_wraps_around_midnight():
    conv = TimeConverter(330)
    anomaly = datetime(2025, 12, 20, 23, 55, tzinfo=IST)
    alert_at = datetime(2025, 12, 21, 0, 10, tzinfo=IST).astimezone(timezone.utc)
    assert StoredAsUtc(conv).distance_minutes(alert_at, anomaly) == 15
    assert within_tolerance(alert_at, anomaly, [StoredAsUtc(conv)], 30)


def test_stored_as_civil_does_not_wrap():
    conv = TimeConverter(330)
    anomaly = datetime(2025, 12, 20, 23, 55, tzinfo=IST)
    alert_at = utc(2025, 12, 21, 0, 10)
    assert StoredAsCivil(conv).distance_minutes(alert_at, anomaly) == 1425
    assert not within_tolerance(alert_at, anomaly, [StoredAsCivil(conv)], 30)


def test_unknown_interpretation_is_rejected():
    with pytest.raises(ValueError):
        build_interpretations(["stored_as_mars"], TimeConverter(330))
    assert [i.name for i in build_interpretations(["stored-as-civil"], TimeConverter(330))] == ["stored_as_civil"]
