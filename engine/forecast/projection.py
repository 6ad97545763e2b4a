"""
Short-horizon projection of a daily metric. A least-squares line over the most recent window is blended with the average day-over-day growth rate; histories shorter than the window are projected flat at their mean.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, List, Tuple

import numpy as np

from api.responses import ForecastPoint
from config import settings


def _linear_fit(vals: List[float]) -> tuple[float, float]:
    x = np.arange(len(vals), dtype=float)
    slope, intercept = np.polyfit(x, np.array(vals, dtype=float), 1)
    return float(slope), float(intercept)


def _average_growth(vals: List[float]) -> float:
    rates = [
        (cur - prev) / prev
        for prev, cur in zip(vals, vals[1:])
        if prev != 0
    ]
    return float(np.mean(rates)) if rates else 0.0


def project(
    history: Iterable[Tuple[date, float]],
    horizon_days: int | None = None,
    window: int | None = None,
    trend_weight: float | None = None,
    growth_weight: float | None = None,
) -> List[ForecastPoint]:
    if horizon_days is None:
        horizon_days = settings.forecast_horizon_days
    if window is None:
        window = settings.forecast_window
    if trend_weight is None:
        trend_weight = settings.forecast_trend_weight
    if growth_weight is None:
        growth_weight = settings.forecast_growth_weight

    points = sorted(history, key=lambda p: p[0])
    if not points:
        return []
    last_day = points[-1][0]
    days = [last_day + timedelta(days=i) for i in range(1, horizon_days + 1)]

    if len(points) < window:
        mean = float(np.mean([v for _, v in points]))
        return [ForecastPoint(dt=d, value=mean) for d in days]

    vals = [float(v) for _, v in points[-window:]]
    slope, intercept = _linear_fit(vals)
    growth = _average_growth(vals)
    n = len(vals)
    last = vals[-1]

    projected: List[ForecastPoint] = []
    for i, day in enumerate(days, start=1):
        trend_value = intercept + slope * (n + i - 1)
        growth_value = last * (1 + growth * i)
        value = max(0.0, trend_value * trend_weight + growth_value * growth_weight)
        projected.append(ForecastPoint(dt=day, value=float(np.floor(value + 0.5))))
    return projected
