"""
Alert filtering: store-side set-membership predicates for source, priority and severity, plus the client-side free-text search over alert name, message, host and path.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator

from config import settings
from engine.enums import AlertSource

# raw source names written by each ingestion integration
_RAW_SOURCES: Dict[AlertSource, List[str]] = {
    AlertSource.logging: ["coralogix"],
    AlertSource.cdn: ["cloudflare"],
    AlertSource.error_tracker: ["sentry"],
    AlertSource.chat_ops: ["slack"],
}


def sanitize_search_text(text: Optional[str], max_length: int | None = None) -> str:
    if max_length is None:
        max_length = settings.alert_search_text_max_length
    if not text:
        return ""
    return text.strip()[:max_length].replace("<", "").replace(">", "")


class AlertFilters(BaseModel):
    sources: List[str] = Field(default_factory=list)
    priorities: List[str] = Field(default_factory=list)
    severities: List[str] = Field(default_factory=list)
    search_text: Optional[str] = None

    @field_validator("search_text", mode="before")
    @classmethod
    def _sanitize(cls, v: Optional[str]) -> Optional[str]:
        cleaned = sanitize_search_text(v)
        return cleaned or None

    def store_predicates(self) -> Dict[str, List[str]]:
        predicates: Dict[str, List[str]] = {}
        if self.sources:
            predicates["source"] = store_source_values(self.sources)
        if self.priorities:
            predicates["priority"] = list(dict.fromkeys(self.priorities))
        if self.severities:
            predicates["severity"] = list(dict.fromkeys(self.severities))
        return predicates


def store_source_values(sources: Iterable[str]) -> List[str]:
    # canonical names expand to the raw names the integrations store
    values: List[str] = []
    for source in sources:
        text = str(source or "").strip()
        if not text:
            continue
        values.append(text)
        for member, raws in _RAW_SOURCES.items():
            if member.value == text.lower():
                values.extend(raws)
    return list(dict.fromkeys(values))


def matches_search(alert, search_text: Optional[str]) -> bool:
    if not search_text:
        return True
    needle = search_text.lower()
    for value in (alert.alert_name, alert.message, alert.host, alert.path):
        if value and needle in value.lower():
            return True
    return False


def apply_filters(alerts: Iterable, filters: Optional[AlertFilters]) -> list:
    """Apply every filter client-side, store-side predicates included."""
    items = list(alerts)
    if filters is None:
        return items
    if filters.sources:
        wanted = {s.lower() for s in store_source_values(filters.sources)}
        items = [
            a for a in items
            if a.source.value in wanted or str(a.source_raw or "").lower() in wanted
        ]
    if filters.priorities:
        wanted = set(filters.priorities)
        items = [a for a in items if a.priority in wanted]
    if filters.severities:
        wanted = set(filters.severities)
        items = [a for a in items if a.severity and a.severity in wanted]
    if filters.search_text:
        items = [a for a in items if matches_search(a, filters.search_text)]
    return items
