"""
Alert matcher locating operational alerts near an anomaly. A primary store query covers the requested window; when it comes back empty for a short window, the whole UTC day is fetched and filtered client-side under each configured timestamp interpretation so that alerts stored with a mislabelled zone are still found.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, time, timedelta, timezone
from typing import Any, List, Optional, Sequence

from api.responses import AlertRecord
from config import settings
from datasources.exceptions import QueryTimeout
from engine.alerts.filters import AlertFilters, apply_filters
from engine.alerts.proximity import TimestampInterpretation, build_interpretations, within_tolerance
from engine.timeutil.civil import TimeConverter, default_converter

log = logging.getLogger(__name__)


def sort_descending(alerts: Sequence[AlertRecord]) -> List[AlertRecord]:
    return sorted(alerts, key=lambda a: a.triggered_at, reverse=True)


def utc_day_bounds(instant: datetime) -> tuple[datetime, datetime]:
    day = instant.astimezone(timezone.utc).date()
    start = datetime.combine(day, time(0), tzinfo=timezone.utc)
    return start, start + timedelta(hours=23, minutes=59, seconds=59)


class AlertMatcher:
    def __init__(
        self,
        provider: Any,
        converter: TimeConverter | None = None,
        interpretations: Optional[Sequence[str]] = None,
        tolerance_minutes: int | None = None,
        fallback_max_span_minutes: int | None = None,
        query_timeout: float | None = None,
        fallback_timeout: float | None = None,
        limit: int | None = None,
        fallback_limit: int | None = None,
    ):
        self.provider = provider
        self.converter = converter or default_converter()
        names = interpretations if interpretations is not None else settings.alert_timestamp_interpretations
        self.interpretations: List[TimestampInterpretation] = build_interpretations(names, self.converter)
        self.tolerance_minutes = (
            tolerance_minutes if tolerance_minutes is not None else settings.alert_fallback_tolerance_minutes
        )
        self.fallback_max_span = timedelta(
            minutes=fallback_max_span_minutes
            if fallback_max_span_minutes is not None
            else settings.alert_fallback_max_span_minutes
        )
        self.query_timeout = query_timeout if query_timeout is not None else settings.alert_query_timeout
        self.fallback_timeout = fallback_timeout if fallback_timeout is not None else settings.alert_fallback_timeout
        self.limit = limit if limit is not None else settings.alert_query_limit
        self.fallback_limit = (
            fallback_limit if fallback_limit is not None else settings.alert_fallback_query_limit
        )

    async def _query(
        self,
        start: Optional[datetime],
        end: Optional[datetime],
        filters: Optional[AlertFilters],
        timeout: float,
        stage: str,
        limit: int | None = None,
    ) -> List[AlertRecord]:
        try:
            rows = await asyncio.wait_for(
                self.provider.fetch_alerts(start, end, filters, limit or self.limit),
                timeout=timeout,
            )
        except asyncio.TimeoutError as exc:
            raise QueryTimeout(f"Alert {stage} query timed out after {timeout}s") from exc
        return apply_filters(rows, filters)

    async def _search(
        self,
        start: datetime,
        end: datetime,
        anchor: datetime,
        filters: Optional[AlertFilters],
    ) -> List[AlertRecord]:
        start_utc = self.converter.to_utc(start)
        end_utc = self.converter.to_utc(end)
        primary = await self._query(start_utc, end_utc, filters, self.query_timeout, "primary")
        if primary:
            return sort_descending(primary)
        if end_utc - start_utc >= self.fallback_max_span or not self.interpretations:
            return primary

        day_start, day_end = utc_day_bounds(start_utc)
        candidates = await self._query(
            day_start, day_end, filters, self.fallback_timeout, "fallback", limit=self.fallback_limit
        )
        anchor_civil = self.converter.to_civil(anchor)
        matched = [
            a for a in candidates
            if within_tolerance(a.triggered_at, anchor_civil, self.interpretations, self.tolerance_minutes)
        ]
        log.info(
            "Alert fallback over %s: %d candidates, %d within %d minutes of %s",
            day_start.date().isoformat(),
            len(candidates),
            len(matched),
            self.tolerance_minutes,
            self.converter.format_civil(anchor_civil),
        )
        if not matched:
            return primary
        return sort_descending(matched)[: self.limit]

    async def find_nearby_alerts(
        self,
        anomaly_timestamp: datetime,
        window_before_minutes: int | None = None,
        window_after_minutes: int | None = None,
        filters: Optional[AlertFilters] = None,
    ) -> List[AlertRecord]:
        if window_before_minutes is None:
            window_before_minutes = settings.alert_window_before_minutes
        if window_after_minutes is None:
            window_after_minutes = settings.alert_window_after_minutes
        anomaly_civil = self.converter.to_civil(anomaly_timestamp)
        start = anomaly_civil - timedelta(minutes=window_before_minutes)
        end = anomaly_civil + timedelta(minutes=window_after_minutes)
        return await self._search(start, end, anomaly_civil, filters)

    async def find_window_alerts(
        self,
        start: datetime,
        end: datetime,
        filters: Optional[AlertFilters] = None,
    ) -> List[AlertRecord]:
        """Alerts in an explicit window; no fallback, used for whole-day windows."""
        rows = await self._query(
            self.converter.to_utc(start), self.converter.to_utc(end), filters, self.query_timeout, "window"
        )
        return sort_descending(rows)

    async def find_alerts(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        filters: Optional[AlertFilters] = None,
        anchor: Optional[datetime] = None,
    ) -> List[AlertRecord]:
        if start is not None and end is not None:
            if self.converter.to_utc(end) < self.converter.to_utc(start):
                raise ValueError("Window end precedes window start")
            return await self._search(start, end, anchor or start, filters)
        start_utc = self.converter.to_utc(start) if start is not None else None
        end_utc = self.converter.to_utc(end) if end is not None else None
        rows = await self._query(start_utc, end_utc, filters, self.query_timeout, "recent")
        return sort_descending(rows)
