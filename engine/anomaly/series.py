"""
Series ingestion for metric store rows, turning loosely typed hourly and daily rows into immutable observations for the selected metric column.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple, Union

from engine.exceptions import InvalidTimestamp
from engine.metrics.parse import parse_metric
from engine.timeutil.civil import parse_date, parse_hour

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricObservation:
    day: date
    metric_name: str
    value: float
    hour: Optional[int] = None
    cohort: Optional[str] = None

    @property
    def timestamp_key(self) -> Union[date, Tuple[date, int]]:
        if self.hour is None:
            return self.day
        return self.day, self.hour


def _cohort(row: Dict[str, Any]) -> Optional[str]:
    raw = row.get("cohort")
    if raw is None:
        return None
    text = str(raw).strip().upper()
    return text or None


def iter_hourly(rows: Iterable[Dict[str, Any]], metric: str) -> Iterator[MetricObservation]:
    for row in rows:
        if not isinstance(row, dict):
            continue
        try:
            day = parse_date(row.get("dt"))
            hour = parse_hour(row.get("hour"))
        except InvalidTimestamp as exc:
            log.debug("iter_hourly: skipping row %r: %s", row, exc)
            continue
        yield MetricObservation(
            day=day,
            metric_name=metric,
            value=parse_metric(row.get(metric)),
            hour=hour,
            cohort=_cohort(row),
        )


def iter_daily(rows: Iterable[Dict[str, Any]], metric: str) -> Iterator[MetricObservation]:
    for row in rows:
        if not isinstance(row, dict):
            continue
        try:
            day = parse_date(row.get("dt"))
        except InvalidTimestamp as exc:
            log.debug("iter_daily: skipping row %r: %s", row, exc)
            continue
        yield MetricObservation(day=day, metric_name=metric, value=parse_metric(row.get(metric)))


def has_cohorts(observations: Iterable[MetricObservation], labels: Iterable[str]) -> bool:
    wanted = {str(label).upper() for label in labels}
    return any(o.cohort in wanted for o in observations)
