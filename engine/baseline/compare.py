"""
Baseline comparison: percentage change of a current value against a historical baseline, guarded against missing and zero baselines.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from typing import Dict, Mapping, Optional


def delta(current: float, baseline: Optional[float]) -> Optional[float]:
    # percentage convention: delta(80, 100) == -20.0
    if baseline is None or baseline == 0:
        return None
    result = (current - baseline) / baseline * 100.0
    return result if math.isfinite(result) else None


def deltas(current: float, baselines: Mapping[str, Optional[float]]) -> Dict[str, Optional[float]]:
    return {label: delta(current, value) for label, value in baselines.items()}
