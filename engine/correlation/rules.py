"""
Declarative alert-to-metric mapping rules. Each active rule names an alert column, a match type (contains, equals or regex) and a value; an alert that satisfies a rule inherits the rule's confidence, and its correlation score is the highest confidence among every rule it matched.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Dict, Iterable, List, Optional

from api.responses import AlertMetricMappingRule, AlertRecord, CorrelatedAlert
from config import settings
from engine.enums import MatchField, MatchType

log = logging.getLogger(__name__)

_Getter = Callable[[AlertRecord], Optional[str]]

FIELD_GETTERS: Dict[MatchField, _Getter] = {
    MatchField.source: lambda a: a.source_raw or a.source.value,
    MatchField.priority: lambda a: a.priority,
    MatchField.severity: lambda a: a.severity,
    MatchField.team: lambda a: a.team,
    MatchField.application: lambda a: a.application,
    MatchField.subsystem: lambda a: a.subsystem,
    MatchField.alert_name: lambda a: a.alert_name,
    MatchField.message: lambda a: a.message,
    MatchField.alert_query: lambda a: a.alert_query,
    MatchField.sample_log: lambda a: a.sample_log,
    MatchField.host: lambda a: a.host,
    MatchField.path: lambda a: a.path,
    MatchField.status_code: lambda a: a.status_code,
    MatchField.threshold: lambda a: a.threshold,
    MatchField.value: lambda a: a.value,
}


def field_value(alert: AlertRecord, match_field: str) -> Optional[str]:
    member = MatchField.parse(match_field)
    if member is None:
        return None
    return FIELD_GETTERS[member](alert)


def rule_matches(alert: AlertRecord, rule: AlertMetricMappingRule) -> bool:
    raw = field_value(alert, rule.match_field)
    if raw is None:
        return False
    value = str(raw).lower()
    needle = rule.match_value.lower()

    if rule.match_type == MatchType.contains.value:
        return needle in value
    if rule.match_type == MatchType.equals.value:
        return value == needle
    if rule.match_type == MatchType.regex.value:
        try:
            return re.search(rule.match_value, value, re.IGNORECASE) is not None
        except re.error as exc:
            log.warning("Skipping rule with invalid pattern %r: %s", rule.match_value, exc)
            return False
    return False


def correlate(
    alerts: Iterable[AlertRecord],
    rules: Iterable[AlertMetricMappingRule],
    target_metric: Optional[str] = None,
    default_confidence: float | None = None,
) -> List[CorrelatedAlert]:
    if default_confidence is None:
        default_confidence = settings.rule_default_confidence

    active = [
        r for r in rules
        if r.is_active and (target_metric is None or r.metric == target_metric)
    ]

    correlated: List[CorrelatedAlert] = []
    for alert in alerts:
        matched = [r for r in active if rule_matches(alert, r)]
        score = None
        if matched:
            score = max(r.confidence if r.confidence is not None else default_confidence for r in matched)
        correlated.append(CorrelatedAlert(
            **alert.model_dump(),
            matched_rules=matched,
            correlation_score=score,
        ))
    return correlated
