"""
Timestamp interpretations used by the day-wide alert fallback. Some ingestion paths wrote civil wall-clock times into the UTC column, so a stored instant can be read either as a true UTC instant or as a civil time mislabelled as UTC; each interpretation measures the minute-of-day distance between an alert and an anomaly under its own reading.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Sequence, Type

from engine.timeutil.civil import TimeConverter

MINUTES_PER_DAY = 1440


def minute_of_day(instant: datetime) -> int:
    return instant.hour * 60 + instant.minute


class TimestampInterpretation:
    name = ""

    def __init__(self, converter: TimeConverter):
        self.converter = converter

    def distance_minutes(self, triggered_at: datetime, anomaly_civil: datetime) -> int:
        raise NotImplementedError


class StoredAsCivil(TimestampInterpretation):
    """The UTC wall clock is really civil time; compared without wraparound."""

    name = "stored_as_civil"

    def distance_minutes(self, triggered_at: datetime, anomaly_civil: datetime) -> int:
        wall = triggered_at.astimezone(timezone.utc)
        return abs(minute_of_day(wall) - minute_of_day(anomaly_civil))


class StoredAsUtc(TimestampInterpretation):
    name = "stored_as_utc"

    def distance_minutes(self, triggered_at: datetime, anomaly_civil: datetime) -> int:
        civil = self.converter.to_civil(triggered_at)
        d = abs(minute_of_day(civil) - minute_of_day(anomaly_civil))
        return min(d, MINUTES_PER_DAY - d)


INTERPRETATIONS: Dict[str, Type[TimestampInterpretation]] = {
    StoredAsCivil.name: StoredAsCivil,
    StoredAsUtc.name: StoredAsUtc,
}


def build_interpretations(names: Iterable[str], converter: TimeConverter) -> List[TimestampInterpretation]:
    built: List[TimestampInterpretation] = []
    for name in names:
        key = str(name or "").strip().lower().replace("-", "_")
        cls = INTERPRETATIONS.get(key)
        if cls is None:
            raise ValueError(f"Unknown timestamp interpretation: {name!r}")
        built.append(cls(converter))
    return built


def within_tolerance(
    triggered_at: datetime,
    anomaly_civil: datetime,
    interpretations: Sequence[TimestampInterpretation],
    tolerance_minutes: int,
) -> bool:
    for interpretation in interpretations:
        if interpretation.distance_minutes(triggered_at, anomaly_civil) <= tolerance_minutes:
            return True
    return False
