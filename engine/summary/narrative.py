"""
Narrative summarizer contract. An anomaly and its correlated alerts are rendered into a chat prompt asking for a JSON analysis; the reply is parsed from a fenced block or the raw text, and replies that are not JSON degrade to a best-effort decomposition instead of failing the correlation request.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from api.responses import AnomalyAnalysis, AnomalyEvent, CorrelatedAlert
from config import settings
from engine.enums import Granularity
from engine.metrics.parse import parse_number
from engine.timeutil.civil import TimeConverter, default_converter

log = logging.getLogger(__name__)

_JSON_FENCE = re.compile(r"```json\s*([\s\S]*?)\s*```")
_ANY_FENCE = re.compile(r"```\s*([\s\S]*?)\s*```")

SYSTEM_PROMPT = (
    "You are an expert monitoring agent analyzing business metric anomalies. Your role is to:\n"
    "1. Analyze metric drops and spikes in the context of correlated alerts\n"
    "2. Identify root causes by examining alert patterns, sources and metadata\n"
    "3. Determine which systems, domains and metrics are affected\n"
    "4. Provide actionable insights and recommendations\n\n"
    "Always be specific, data-driven and focused on actionable insights."
)

RESPONSE_SCHEMA = """{
  "summary": "...",
  "rootCause": "...",
  "affectedSystems": ["system1", "system2"],
  "timeline": "...",
  "recommendations": ["rec1", "rec2"],
  "confidence": 0.85
}"""


class MappingContext(BaseModel):
    domain: Optional[str] = None
    metric: Optional[str] = None
    confidence: Optional[float] = None
    notes: Optional[str] = None


class AlertContext(BaseModel):
    source: str
    priority: Optional[str] = None
    severity: Optional[str] = None
    alert_name: Optional[str] = None
    message: Optional[str] = None
    triggered_at: str
    host: Optional[str] = None
    path: Optional[str] = None
    status_code: Optional[str] = None
    mappings: List[MappingContext] = Field(default_factory=list)


class AnomalyContext(BaseModel):
    anomaly_type: Granularity
    anomaly_time: str
    metric: str
    metric_value: float
    previous_value: Optional[float] = None
    delta: Optional[float] = None
    alerts: List[AlertContext] = Field(default_factory=list)


def build_context(
    event: AnomalyEvent,
    alerts: Sequence[CorrelatedAlert],
    converter: TimeConverter | None = None,
) -> AnomalyContext:
    converter = converter or default_converter()
    previous_value = next((v for v in event.baseline_values.values() if v is not None), None)
    delta = next((d for d in event.deltas.values() if d is not None), None)
    return AnomalyContext(
        anomaly_type=event.granularity,
        anomaly_time=converter.format_civil(event.anomaly_timestamp),
        metric=event.metric_name,
        metric_value=event.current_value,
        previous_value=previous_value,
        delta=delta,
        alerts=[
            AlertContext(
                source=a.source_raw or a.source.value,
                priority=a.priority,
                severity=a.severity,
                alert_name=a.alert_name,
                message=a.message,
                triggered_at=converter.format_civil(a.triggered_at),
                host=a.host,
                path=a.path,
                status_code=a.status_code,
                mappings=[
                    MappingContext(domain=r.domain, metric=r.metric, confidence=r.confidence, notes=r.notes)
                    for r in a.matched_rules
                ],
            )
            for a in alerts
        ],
    )


def _fmt_number(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def _alert_block(idx: int, alert: AlertContext) -> str:
    lines = [
        f"{idx}. **{alert.alert_name or 'N/A'}**",
        f"   - Source: {alert.source}",
        f"   - Priority: {alert.priority or 'N/A'}",
        f"   - Severity: {alert.severity or 'N/A'}",
        f"   - Time: {alert.triggered_at}",
        f"   - Message: {alert.message or 'N/A'}",
    ]
    if alert.host:
        lines.append(f"   - Host: {alert.host}")
    if alert.path:
        lines.append(f"   - Path: {alert.path}")
    if alert.status_code:
        lines.append(f"   - Status: {alert.status_code}")
    if alert.mappings:
        lines.append("   - Metric Mappings:")
        for m in alert.mappings:
            lines.append(
                f"     * Domain: {m.domain or 'N/A'}, Metric: {m.metric or 'N/A'}, "
                f"Confidence: {m.confidence if m.confidence is not None else 'N/A'}, Notes: {m.notes or 'N/A'}"
            )
    return "\n".join(lines)


def build_messages(context: AnomalyContext) -> List[Dict[str, str]]:
    details = [
        f"- Type: {context.anomaly_type.value.capitalize()} metric anomaly",
        f"- Time: {context.anomaly_time}",
        f"- Metric: {context.metric}",
        f"- Current Value: {_fmt_number(context.metric_value)}",
    ]
    if context.previous_value:
        details.append(f"- Previous Value: {_fmt_number(context.previous_value)}")
    if context.delta is not None:
        details.append(f"- Change: {context.delta:.2f}%")

    alerts = "\n\n".join(_alert_block(i, a) for i, a in enumerate(context.alerts, start=1))
    user_prompt = (
        "Analyze this anomaly and provide a comprehensive analysis:\n\n"
        "**Anomaly Details:**\n"
        + "\n".join(details)
        + f"\n\n**Correlated Alerts ({len(context.alerts)} alerts found):**\n"
        + (alerts or "None")
        + "\n\n**Please provide:**\n"
        "1. A concise summary (2-3 sentences) of what happened\n"
        "2. Root cause analysis based on the alerts and their patterns\n"
        "3. List of affected systems/domains/metrics\n"
        "4. Timeline of events\n"
        "5. Actionable recommendations\n"
        "6. Confidence level (0-1) in your analysis\n\n"
        f"Format your response as JSON:\n{RESPONSE_SCHEMA}"
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


def _text(value: Any, default: str) -> str:
    if isinstance(value, str):
        return value
    if not value:
        return default
    return json.dumps(value)


def _text_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [v if isinstance(v, str) else str(v) for v in value]


def _confidence(value: Any, default: float) -> float:
    parsed = parse_number(value)
    if parsed is None:
        parsed = default
    return min(1.0, max(0.0, parsed))


def _extract_json(content: str) -> Any:
    match = _JSON_FENCE.search(content) or _ANY_FENCE.search(content)
    payload = match.group(1) if match else content
    return json.loads(payload.strip())


def fallback_analysis(content: str, context: AnomalyContext, default_confidence: float | None = None) -> AnomalyAnalysis:
    if default_confidence is None:
        default_confidence = settings.summarizer_default_confidence
    first_line = content.split("\n", 1)[0]
    return AnomalyAnalysis(
        summary=first_line or "Analysis generated",
        root_cause=content,
        affected_systems=[],
        timeline=context.anomaly_time,
        recommendations=[],
        confidence=default_confidence,
    )


def parse_analysis(content: str, context: AnomalyContext, default_confidence: float | None = None) -> AnomalyAnalysis:
    if default_confidence is None:
        default_confidence = settings.summarizer_default_confidence
    try:
        parsed = _extract_json(content)
    except ValueError as exc:
        log.info("Summarizer reply is not JSON, using text decomposition: %s", exc)
        return fallback_analysis(content, context, default_confidence)
    if not isinstance(parsed, dict):
        log.info("Summarizer reply JSON is %s, using text decomposition", type(parsed).__name__)
        return fallback_analysis(content, context, default_confidence)

    return AnomalyAnalysis(
        summary=_text(parsed.get("summary"), "Analysis generated"),
        root_cause=_text(parsed.get("rootCause", parsed.get("root_cause")), "Root cause analysis"),
        affected_systems=_text_list(parsed.get("affectedSystems", parsed.get("affected_systems"))),
        timeline=_text(parsed.get("timeline"), context.anomaly_time),
        recommendations=_text_list(parsed.get("recommendations")),
        confidence=_confidence(parsed.get("confidence"), default_confidence),
    )


async def summarize(connector: Any, context: AnomalyContext) -> AnomalyAnalysis:
    """Run the summarizer for one anomaly.

    Transport and configuration failures surface as ``SummarizerError``; an
    unparseable reply never does.
    """
    content = await connector.complete(build_messages(context))
    return parse_analysis(content, context)
