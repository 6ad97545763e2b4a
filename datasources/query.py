"""
Filter predicates for the REST table store: equality, set membership, ranges, ordering and a row limit, rendered as PostgREST query parameters.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

_RESERVED_RE = re.compile(r'[,()"\\:\s]')


def _literal(value: object) -> str:
    text = str(value)
    if isinstance(value, bool):
        text = text.lower()
    if _RESERVED_RE.search(text):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


@dataclass
class QueryParams:
    select: str = "*"
    eq: Dict[str, object] = field(default_factory=dict)
    in_: Dict[str, Sequence[object]] = field(default_factory=dict)
    gte: Dict[str, object] = field(default_factory=dict)
    lte: Dict[str, object] = field(default_factory=dict)
    order: Optional[Tuple[str, bool]] = None
    limit: Optional[int] = None

    def order_by(self, column: str, ascending: bool = True) -> "QueryParams":
        self.order = (column, ascending)
        return self

    def to_params(self) -> List[Tuple[str, str]]:
        # a column may carry several predicates (gte and lte), so a list of pairs
        params: List[Tuple[str, str]] = []
        if self.select:
            params.append(("select", self.select))
        for column, value in self.eq.items():
            if isinstance(value, (list, tuple, set)):
                params.append((column, f"in.({','.join(_literal(v) for v in value)})"))
            else:
                params.append((column, f"eq.{_literal(value)}"))
        for column, values in self.in_.items():
            if values:
                params.append((column, f"in.({','.join(_literal(v) for v in values)})"))
        for column, value in self.gte.items():
            params.append((column, f"gte.{value}"))
        for column, value in self.lte.items():
            params.append((column, f"lte.{value}"))
        if self.order is not None:
            column, ascending = self.order
            params.append(("order", f"{column}.{'asc' if ascending else 'desc'}"))
        if self.limit:
            params.append(("limit", str(int(self.limit))))
        return params
