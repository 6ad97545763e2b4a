"""
Ordering of correlated alerts: scored before unscored with the strongest score first, then priority, then the numeric alert value and finally recency.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from api.responses import CorrelatedAlert
from engine.enums import Priority
from engine.metrics.parse import parse_metric


def _sort_key(alert: CorrelatedAlert) -> Tuple[int, float, int, float, float]:
    scored = alert.correlation_score is not None
    return (
        0 if scored else 1,
        -(alert.correlation_score or 0.0),
        Priority.rank(alert.priority),
        -parse_metric(alert.value),
        -alert.triggered_at.timestamp(),
    )


def rank(alerts: Iterable[CorrelatedAlert]) -> List[CorrelatedAlert]:
    return sorted(alerts, key=_sort_key)
