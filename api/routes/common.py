"""
Shared utilities and dependencies for API route modules.

Provides a centralized place for creating the data source provider and for
running service calls under the configured store retry policy, so individual
route files stay thin.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional, TypeVar

from datasources.data_config import DataSourceSettings
from datasources.provider import DataSourceProvider
from datasources.retry import store_retry

_T = TypeVar("_T")
_provider: Optional[DataSourceProvider] = None


def get_provider() -> DataSourceProvider:
    global _provider
    if _provider is None:
        _provider = DataSourceProvider(settings=DataSourceSettings())
    return _provider


def reset_provider() -> None:
    global _provider
    _provider = None


async def run_with_retry(func: Callable[..., Awaitable[_T]], *args: Any, **kwargs: Any) -> _T:
    return await store_retry()(func)(*args, **kwargs)
