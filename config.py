"""
Constants and configuration for funnelwatch.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os
from typing import Dict, List

from pydantic_settings import BaseSettings


STORE_BACKEND_POSTGREST = "postgrest"
SUMMARIZER_BACKEND_AZURE_OPENAI = "azure_openai"

FUNNELWATCH_STORE_BACKEND = os.getenv("FUNNELWATCH_STORE_BACKEND", STORE_BACKEND_POSTGREST).lower()
FUNNELWATCH_STORE_URL = os.getenv("FUNNELWATCH_STORE_URL", "http://postgrest:3000").rstrip("/")
FUNNELWATCH_STORE_API_KEY = os.getenv("FUNNELWATCH_STORE_API_KEY", "")
FUNNELWATCH_STORE_TIMEOUT = int(os.getenv("FUNNELWATCH_STORE_TIMEOUT", "30"))

FUNNELWATCH_SUMMARIZER_BACKEND = os.getenv(
    "FUNNELWATCH_SUMMARIZER_BACKEND", SUMMARIZER_BACKEND_AZURE_OPENAI
).lower()
FUNNELWATCH_AZURE_OPENAI_BASE = os.getenv("FUNNELWATCH_AZURE_OPENAI_BASE", "").rstrip("/")
FUNNELWATCH_AZURE_OPENAI_KEY = os.getenv("FUNNELWATCH_AZURE_OPENAI_KEY", "")
FUNNELWATCH_AZURE_OPENAI_DEPLOYMENT = os.getenv("FUNNELWATCH_AZURE_OPENAI_DEPLOYMENT", "")
FUNNELWATCH_AZURE_OPENAI_API_VERSION = os.getenv("FUNNELWATCH_AZURE_OPENAI_API_VERSION", "2024-02-15-preview")
FUNNELWATCH_SUMMARIZER_TIMEOUT = int(os.getenv("FUNNELWATCH_SUMMARIZER_TIMEOUT", "60"))

FUNNELWATCH_STARTUP_TIMEOUT = int(os.getenv("FUNNELWATCH_STARTUP_TIMEOUT", "120"))

# table names in the REST-queryable store
HOURLY_METRICS_TABLE = "bharatpe_app_hourly_metrics"
DAILY_METRICS_TABLE = "bharatpe_daybyday_amount_metrics"
ALERTS_TABLE = "bharatpe_alerts_events"
ALERT_METRIC_MAP_TABLE = "bharatpe_alerts_metric_map"

HOURLY_METRIC_FIELDS: List[str] = [
    "applications_created",
    "applications_submitted",
    "applications_approved",
    "applications_pending",
    "applications_nached",
    "autopay_done_applications",
]

DAILY_METRIC_FIELDS: List[str] = [
    "disbursed",
    "approved",
    "submitted",
    "eligible",
    "started",
    "kyc_initiated",
    "kyc_completed",
    "nach_initiated",
    "nach_done",
    "processed",
]

# rank assigned to alert priorities when ordering; anything else sorts last
PRIORITY_RANKS: Dict[str, int] = {
    "p1": 1,
    "p2": 2,
}
PRIORITY_RANK_OTHER = 99

HEALTH_PATH = "/rest/v1/"


class Settings(BaseSettings):
    store_backend: str = FUNNELWATCH_STORE_BACKEND
    store_url: str = FUNNELWATCH_STORE_URL
    store_timeout: int = FUNNELWATCH_STORE_TIMEOUT
    startup_timeout: int = FUNNELWATCH_STARTUP_TIMEOUT

    hourly_metrics_table: str = HOURLY_METRICS_TABLE
    daily_metrics_table: str = DAILY_METRICS_TABLE
    alerts_table: str = ALERTS_TABLE
    alert_metric_map_table: str = ALERT_METRIC_MAP_TABLE

    # business (civil) time zone, minutes east of UTC
    civil_utc_offset_minutes: int = 330

    # anomaly threshold as a percentage drop
    anomaly_threshold_pct: float = 30.0
    hourly_cohort_current: str = "DAY-0"
    hourly_cohort_prior_day: str = "DAY-1"
    hourly_cohort_prior_week: str = "DAY-7"
    hourly_default_metric: str = "applications_created"
    daily_default_metric: str = "disbursed"
    daily_default_days: int = 30

    # metric domains used to pick mapping rules
    hourly_domain: str = "applications"
    daily_domain: str = "collections"

    # alert matching
    alert_window_before_minutes: int = 30
    alert_window_after_minutes: int = 30
    alert_window_max_minutes: int = 1440
    alert_fallback_max_span_minutes: int = 120
    alert_fallback_tolerance_minutes: int = 30
    alert_timestamp_interpretations: List[str] = ["stored_as_civil", "stored_as_utc"]
    alert_query_timeout: float = 20.0
    alert_fallback_timeout: float = 20.0
    alert_query_limit: int = 1000
    # day-wide fallback candidates are fetched independently of the caller row limit
    alert_fallback_query_limit: int = 10000
    alert_search_text_max_length: int = 200

    # correlation scoring
    rule_default_confidence: float = 0.7

    # forecast projection
    forecast_window: int = 7
    forecast_horizon_days: int = 7
    forecast_trend_weight: float = 0.6
    forecast_growth_weight: float = 0.4

    # narrative summarizer
    summarizer_enabled: bool = True
    summarizer_temperature: float = 1.0
    summarizer_max_completion_tokens: int = 10000
    summarizer_default_confidence: float = 0.7

    # caller-side retry policy for idempotent store reads; 1 means no retry
    store_retry_attempts: int = 1
    store_retry_delay: float = 0.5
    store_retry_backoff: float = 2.0

    model_config = {
        "env_prefix": "FUNNELWATCH_",
        "extra": "ignore",
    }


settings = Settings()
