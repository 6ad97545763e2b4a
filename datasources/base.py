"""
Base connectors and shared utilities for data sources

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from datasources.query import QueryParams


class BaseConnector(ABC):
    health_path: str = ""

    def __init__(self, base_url: str, timeout: int = 30, headers: Optional[Dict[str, str]] = None):
        self.base_url = str(base_url).rstrip("/")
        self.timeout = timeout
        self.headers = headers or {}

    @property
    def health_url(self) -> str:
        if not self.health_path:
            raise NotImplementedError("connector must define health_path")
        return f"{self.base_url}{self.health_path}"

    def _headers(self) -> Dict[str, str]:
        """Basic header set applied to every outbound request."""
        return dict(self.headers)


class TableStoreConnector(BaseConnector):
    @abstractmethod
    async def select(self, table: str, query: QueryParams) -> List[Dict[str, Any]]: ...


class SummarizerConnector(BaseConnector):
    @property
    @abstractmethod
    def configured(self) -> bool: ...

    @abstractmethod
    async def complete(self, messages: List[Dict[str, str]]) -> str: ...
