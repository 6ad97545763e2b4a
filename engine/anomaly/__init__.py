"""
Anomaly detection for hourly and daily funnel metrics, flagging percentage drops against prior-day, prior-week, preceding-hour or preceding-day baselines under a single threshold policy.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.anomaly.detection import (
    detect_daily,
    detect_hourly,
    detect_hourly_cohorts,
    detect_hourly_sequence,
    evaluate,
)
from engine.anomaly.series import MetricObservation, iter_daily, iter_hourly

__all__ = [
    "MetricObservation",
    "detect_daily",
    "detect_hourly",
    "detect_hourly_cohorts",
    "detect_hourly_sequence",
    "evaluate",
    "iter_daily",
    "iter_hourly",
]
