"""
Decorator translating engine and store exceptions raised inside route handlers into HTTP errors.

Using a decorator eliminates repetitive try/except boilerplate from each
route function and ensures a consistent error translation policy across the
service.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import inspect
import logging
from functools import wraps
from typing import Any, Callable, TypeVar, cast

from fastapi import HTTPException

from datasources.exceptions import DataSourceError, QueryTimeout
from engine.exceptions import InvalidTimestamp

F = TypeVar("F", bound=Callable[..., Any])

log = logging.getLogger(__name__)


def to_http_exception(exc: Exception) -> HTTPException:
    if isinstance(exc, InvalidTimestamp):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, QueryTimeout):
        return HTTPException(status_code=504, detail=str(exc))
    if isinstance(exc, DataSourceError):
        return HTTPException(status_code=502, detail=str(exc))
    if isinstance(exc, ValueError):
        return HTTPException(status_code=400, detail=str(exc))
    log.exception("Unhandled error in route handler")
    return HTTPException(status_code=500, detail=str(exc))


def handle_exceptions(func: F) -> F:
    """Decorator that converts uncaught exceptions to HTTP errors.

    * :class:`HTTPException` is re-raised verbatim.
    * ``InvalidHour``/``InvalidDate`` become 422, store timeouts 504 and any
      other store failure 502.
    * Remaining ``ValueError`` is a 400; everything else a 500.

    The decorator works with both regular and async functions.
    """

    if inspect.iscoroutinefunction(func):
        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except Exception as exc:
                raise to_http_exception(exc) from exc

        return cast(F, async_wrapper)

    @wraps(func)
    def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except HTTPException:
            raise
        except Exception as exc:
            raise to_http_exception(exc) from exc

    return cast(F, sync_wrapper)
