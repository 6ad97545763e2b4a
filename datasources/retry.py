"""
Retry decorator for idempotent store reads. The engine never retries on its own; callers opt in, and the default policy of a single attempt means no retry at all.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from functools import wraps
from typing import Any, Callable, Tuple, Type, TypeVar, cast

from config import settings
from datasources.exceptions import DataSourceUnavailable, QueryTimeout

F = TypeVar("F", bound=Callable[..., Any])

log = logging.getLogger(__name__)

# transient store failures; InvalidQuery is a definite answer and is not retried
TRANSIENT_ERRORS: Tuple[Type[Exception], ...] = (DataSourceUnavailable, QueryTimeout)


def retry(
    *,
    attempts: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = TRANSIENT_ERRORS,
) -> Callable[[F], F]:
    attempts = max(1, attempts)

    def decorator(func: F) -> F:
        name = getattr(func, "__qualname__", repr(func))

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                _attempt = 0
                _delay = delay
                while True:
                    try:
                        return await func(*args, **kwargs)
                    except exceptions as exc:
                        _attempt += 1
                        if _attempt >= attempts:
                            raise
                        log.warning("%s failed (attempt %d/%d): %s; retrying in %.2fs", name, _attempt, attempts, exc, _delay)
                        await asyncio.sleep(_delay)
                        _delay *= backoff

            return cast(F, async_wrapper)

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            _attempt = 0
            _delay = delay
            while True:
                try:
                    return func(*args, **kwargs)
                except exceptions as exc:
                    _attempt += 1
                    if _attempt >= attempts:
                        raise
                    log.warning("%s failed (attempt %d/%d): %s; retrying in %.2fs", name, _attempt, attempts, exc, _delay)
                    time.sleep(_delay)
                    _delay *= backoff

        return cast(F, sync_wrapper)

    return decorator


def store_retry() -> Callable[[F], F]:
    return retry(
        attempts=settings.store_retry_attempts,
        delay=settings.store_retry_delay,
        backoff=settings.store_retry_backoff,
    )
