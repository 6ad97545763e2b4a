"""
Civil time conversion. Every business timestamp is read and displayed in a fixed UTC offset (UTC+05:30 by default) while stores hand out UTC instants.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Union

from config import settings
from engine.exceptions import InvalidDate, InvalidHour

CIVIL_FORMAT = "%Y-%m-%d %H:%M:%S"

DateLike = Union[date, str]
HourLike = Union[int, str]


def _require_aware(instant: datetime) -> datetime:
    if not isinstance(instant, datetime):
        raise InvalidDate(f"Expected datetime, got {type(instant).__name__}")
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise InvalidDate(f"Ambiguous naive timestamp: {instant.isoformat()}")
    return instant


def parse_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        raise InvalidDate("Date is required")
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise InvalidDate(f"Invalid date format: {value!r}") from exc


def parse_hour(value: HourLike) -> int:
    if isinstance(value, bool):
        raise InvalidHour(f"Invalid hour: {value!r}")
    try:
        hour = int(str(value).strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidHour(f"Invalid hour: {value!r}") from exc
    if hour < 0 or hour > 23:
        raise InvalidHour(f"Invalid hour: {value!r}")
    return hour


def parse_instant(value: Union[str, datetime]) -> datetime:
    """Parse a stored timestamp into an aware UTC datetime.

    Naive values are read as UTC, which is how the store serialises
    ``timestamptz`` columns.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value or "").strip()
        if not text:
            raise InvalidDate("Timestamp is required")
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidDate(f"Invalid timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class TimeConverter:
    def __init__(self, offset_minutes: int | None = None):
        if offset_minutes is None:
            offset_minutes = settings.civil_utc_offset_minutes
        self.offset = timedelta(minutes=offset_minutes)
        self.zone = timezone(self.offset)

    def to_civil(self, instant: datetime) -> datetime:
        return _require_aware(instant).astimezone(self.zone)

    def to_utc(self, instant: datetime) -> datetime:
        return _require_aware(instant).astimezone(timezone.utc)

    def format_civil(self, instant: datetime) -> str:
        return self.to_civil(instant).strftime(CIVIL_FORMAT)

    def construct_civil(self, day: DateLike, hour: HourLike) -> datetime:
        return datetime.combine(parse_date(day), time(parse_hour(hour)), tzinfo=self.zone)

    def civil_day_bounds(self, day: DateLike) -> tuple[datetime, datetime]:
        start = datetime.combine(parse_date(day), time(0), tzinfo=self.zone)
        return start, start + timedelta(hours=23, minutes=59, seconds=59)

    def civil_today(self) -> date:
        return datetime.now(self.zone).date()


def default_converter() -> TimeConverter:
    return TimeConverter(settings.civil_utc_offset_minutes)
