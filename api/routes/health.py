"""
Health check route reporting service liveness and which backends are configured.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter

from api.routes.common import get_provider
from api.routes.exception import handle_exceptions

router = APIRouter(tags=["Health"])


@router.get("/health")
@handle_exceptions
async def health() -> Dict[str, Any]:
    provider = get_provider()
    return {
        "status": "ok",
        "store": provider.settings.store_backend,
        "summarizer": "configured" if provider.summarizer.configured else "unconfigured",
    }
