"""
Test Suite for Helper Functions

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest
import httpx

from datasources.helpers import fetch_json, post_json
from datasources.exceptions import InvalidQuery, QueryTimeout, DataSourceUnavailable


class DummyResponse:
    def __init__(self, status_code=200, text="", json_data=None):
        self.status_code = status_code
        self.text = text
        self._json = json_data if json_data is not None else {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise httpx.HTTPStatusError("err", request=None, response=self)

    def json(self):
        return self._json


class DummyClient:
    def __init__(self, resp: DummyResponse):
        self.resp = resp
        self.calls = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def get(self, url, params=None, headers=None):
        self.calls.append(("get", url, params, headers))
        return self.resp

    async def post(self, url, json=None, params=None, headers=None):
        self.calls.append(("post", url, json, params))
        return self.resp


@pytest.mark.asyncio
async def test_fetch_json_success(monkeypatch):
    resp = DummyResponse(status_code=200, json_data=[{"foo": "bar"}])
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: DummyClient(resp))
    got = await fetch_json("url", params=[("a", "1")], headers={})
    assert got == [{"foo": "bar"}]


@pytest.mark.asyncio
async def test_fetch_json_http_error(monkeypatch):
    resp = DummyResponse(status_code=404, text="not found")
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: DummyClient(resp))
    with pytest.raises(InvalidQuery) as exc_info:
        await fetch_json("url", invalid_msg="Store query failed")
    assert "404" in str(exc_info.value)


@pytest.mark.asyncio
async def test_fetch_json_timeout(monkeypatch):
    async def get(*args, **kwargs):
        raise httpx.TimeoutException("timeout")
    client = DummyClient(DummyResponse())
    client.get = get
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: client)
    with pytest.raises(QueryTimeout):
        await fetch_json("url")


@pytest.mark.asyncio
async def test_fetch_json_unreachable(monkeypatch):
    async def get(*args, **kwargs):
        raise httpx.ConnectError("refused")
    client = DummyClient(DummyResponse())
    client.get = get
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: client)
    with pytest.raises(DataSourceUnavailable):
        await fetch_json("http://store")


@pytest.mark.asyncio
async def test_post_json_sends_payload(monkeypatch):
    client = DummyClient(DummyResponse(json_data={"ok": True}))
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: client)
    got = await post_json("url", {"x": 1}, params={"api-version": "v"})
    assert got == {"ok": True}
    assert client.calls == [("post", "url", {"x": 1}, {"api-version": "v"})]


class HtmlResponse(DummyResponse):
    def json(self):
        raise ValueError("Expecting value: line 1 column 1 (char 0)")


@pytest.mark.asyncio
async def test_fetch_json_non_json_body_is_invalid_query(monkeypatch):
    resp = HtmlResponse(text="<html>gateway error</html>")
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: DummyClient(resp))
    with pytest.raises(InvalidQuery) as exc_info:
        await fetch_json("url", invalid_msg="Store query failed")
    assert "not JSON" in str(exc_info.value)


@pytest.mark.asyncio
async def test_post_json_non_json_body_is_invalid_query(monkeypatch):
    resp = HtmlResponse(text="<html>gateway error</html>")
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: DummyClient(resp))
    with pytest.raises(InvalidQuery):
        await post_json("url", {"x": 1})
