"""
Enumerations for granularity, cohorts, alert sources, priorities and mapping-rule match semantics

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from config import PRIORITY_RANKS, PRIORITY_RANK_OTHER


class Granularity(str, Enum):
    hourly = "hourly"
    daily = "daily"


class BaselineLabel(str, Enum):
    day1 = "day1"
    day7 = "day7"
    previous_hour = "previous_hour"
    previous_day = "previous_day"


class AlertSource(str, Enum):
    logging = "logging"
    cdn = "cdn"
    error_tracker = "error-tracker"
    chat_ops = "chat-ops"
    other = "other"

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> AlertSource:
        value = str(raw or "").strip().lower()
        if value in _SOURCE_ALIASES:
            return _SOURCE_ALIASES[value]
        for member in cls:
            if member.value == value:
                return member
        return cls.other


_SOURCE_ALIASES = {
    "coralogix": AlertSource.logging,
    "cloudflare": AlertSource.cdn,
    "sentry": AlertSource.error_tracker,
    "slack": AlertSource.chat_ops,
}


class Priority(str, Enum):
    p1 = "p1"
    p2 = "p2"
    other = "other"

    @staticmethod
    def rank(raw: Optional[str]) -> int:
        return PRIORITY_RANKS.get(str(raw or "").strip().lower(), PRIORITY_RANK_OTHER)


class MatchType(str, Enum):
    contains = "contains"
    equals = "equals"
    regex = "regex"


class MatchField(str, Enum):
    source = "source"
    priority = "priority"
    severity = "severity"
    team = "team"
    application = "application"
    subsystem = "subsystem"
    alert_name = "alert_name"
    message = "message"
    alert_query = "alert_query"
    sample_log = "sample_log"
    host = "host"
    path = "path"
    status_code = "status_code"
    threshold = "threshold"
    value = "value"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional[MatchField]:
        # accepts column spelling (alert_name) and camel case (alertName)
        key = str(raw or "").strip().replace("_", "").lower()
        if not key:
            return None
        if key == "query":
            return cls.alert_query
        for member in cls:
            if member.value.replace("_", "") == key:
                return member
        return None
