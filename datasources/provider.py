"""
Provider for the table store and summarizer connectors, exposing the metric, alert and mapping-rule queries the engine issues.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from api.responses import AlertMetricMappingRule, AlertRecord
from config import settings as engine_settings
from engine.alerts.filters import AlertFilters
from engine.exceptions import InvalidTimestamp
from engine.timeutil.civil import parse_date
from .data_config import DataSourceSettings
from .factory import DataSourceFactory
from .query import QueryParams

log = logging.getLogger(__name__)


def _iso_utc(instant: datetime) -> str:
    return instant.astimezone(timezone.utc).isoformat()


class DataSourceProvider:
    def __init__(self, settings: DataSourceSettings):
        self.settings = settings
        self.store = DataSourceFactory.create_store(settings)
        self.summarizer = DataSourceFactory.create_summarizer(settings)

    async def fetch_hourly_metrics(self, day: date, cohort: Optional[str] = None) -> List[Dict[str, Any]]:
        query = QueryParams(eq={"dt": day.isoformat()}).order_by("hour", ascending=True)
        if cohort:
            query.eq["cohort"] = cohort
        return await self.store.select(engine_settings.hourly_metrics_table, query)

    async def fetch_latest_date(self) -> Optional[date]:
        query = QueryParams(select="dt", limit=1).order_by("dt", ascending=False)
        rows = await self.store.select(engine_settings.hourly_metrics_table, query)
        if not rows:
            return None
        try:
            return parse_date(rows[0].get("dt"))
        except InvalidTimestamp as exc:
            log.warning("fetch_latest_date: unparseable dt %r: %s", rows[0].get("dt"), exc)
            return None

    async def fetch_daily_metrics(self, start: date, end: date) -> List[Dict[str, Any]]:
        query = QueryParams(
            gte={"dt": start.isoformat()},
            lte={"dt": end.isoformat()},
        ).order_by("dt", ascending=True)
        return await self.store.select(engine_settings.daily_metrics_table, query)

    async def fetch_alerts(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        filters: Optional[AlertFilters] = None,
        limit: Optional[int] = None,
    ) -> List[AlertRecord]:
        query = QueryParams(limit=limit).order_by("triggered_at", ascending=False)
        if start is not None:
            query.gte["triggered_at"] = _iso_utc(start)
        if end is not None:
            query.lte["triggered_at"] = _iso_utc(end)
        if filters is not None:
            query.in_.update(filters.store_predicates())
        rows = await self.store.select(engine_settings.alerts_table, query)
        return self._parse_rows(rows, AlertRecord)

    async def fetch_alert_metric_map(self, domain: Optional[str] = None) -> List[AlertMetricMappingRule]:
        query = QueryParams(eq={"is_active": "true"})
        if domain:
            query.eq["domain"] = domain
        rows = await self.store.select(engine_settings.alert_metric_map_table, query)
        return self._parse_rows(rows, AlertMetricMappingRule)

    async def summarize(self, messages: List[Dict[str, str]]) -> str:
        return await self.summarizer.complete(messages)

    @staticmethod
    def _parse_rows(rows: List[Dict[str, Any]], model: Any) -> List[Any]:
        parsed = []
        for row in rows:
            try:
                parsed.append(model.model_validate(row))
            except ValidationError as exc:
                log.warning("Skipping malformed %s row: %s", model.__name__, exc.errors()[:1])
        return parsed
