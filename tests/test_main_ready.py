"""
Readiness behavior tests for API health endpoint.
"""

from __future__ import annotations

import json

import pytest

import main as app_main
from datasources.exceptions import BackendStartupTimeout


@pytest.mark.asyncio
async def test_ready_endpoint_returns_503_with_backend_details_when_not_ready():
    app_main._backend_ready = False
    app_main._backend_status = {"postgrest": "waiting"}
    response = await app_main.ready()
    payload = json.loads(response.body.decode("utf-8"))
    assert response.status_code == 503
    assert payload["ready"] is False
    assert payload["backends"]["postgrest"] == "waiting"


@pytest.mark.asyncio
async def test_wait_for_store_marks_failure_but_stays_available(monkeypatch):
    async def fake_wait_for(name, url, timeout, headers=None, accept_status=(200,)):
        assert url.endswith("/rest/v1/")
        raise BackendStartupTimeout("store down")

    monkeypatch.setattr(app_main, "wait_for", fake_wait_for)
    monkeypatch.setattr(app_main, "_backend_status", {})
    app_main._backend_ready = False

    await app_main._wait_for_store_bg(1)

    assert app_main._backend_ready is True
    assert app_main._backend_status["postgrest"].startswith("failed:")


@pytest.mark.asyncio
async def test_wait_for_store_marks_ready(monkeypatch):
    async def fake_wait_for(name, url, timeout, headers=None, accept_status=(200,)):
        return None

    monkeypatch.setattr(app_main, "wait_for", fake_wait_for)
    monkeypatch.setattr(app_main, "_backend_status", {})

    await app_main._wait_for_store_bg(1)

    assert app_main._backend_status["postgrest"] == "ready"
    response = await app_main.ready()
    assert response.status_code == 200
