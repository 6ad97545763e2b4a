"""
Parsing logic that turns loosely typed metric cells (varchar columns that may hold blanks, the literal strings null/NaN, units or junk) into finite floats.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional

_NULL_TOKENS = {"null", "nan"}
_LEADING_NUMBER_RE = re.compile(
    r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
)


def _finite(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def _leading_float(text: str) -> float | None:
    match = _LEADING_NUMBER_RE.match(text)
    if match is None:
        return None
    try:
        return float(match.group(0))
    except ValueError:
        return None


def parse_number(raw: Any) -> Optional[float]:
    """Finite number from `raw`, or None when nothing numeric can be read."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return _finite(float(raw))

    text = str(raw).strip()
    if not text or text.lower() in _NULL_TOKENS:
        return None

    parsed = _leading_float(text)
    if parsed is not None:
        return _finite(parsed)

    try:
        return _finite(float(text))
    except (TypeError, ValueError, OverflowError):
        return None


def parse_metric(raw: Any) -> float:
    parsed = parse_number(raw)
    return 0.0 if parsed is None else parsed
