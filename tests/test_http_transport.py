"""
HttpxTransport against httpx.MockTransport.
"""
from __future__ import annotations

import asyncio

import httpx
import pytest

from anagrafe.adapters.http_transport import HttpxTransport
from anagrafe.core.ports import Cancelled, CancelToken, TransportFailure


def make_transport(handler) -> HttpxTransport:
    client = httpx.AsyncClient(base_url="http://backend.test/base", transport=httpx.MockTransport(handler))
    return HttpxTransport(client=client)


@pytest.mark.asyncio
async def test_returns_status_and_json_without_raising():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        return httpx.Response(405, json={"message": "not allowed"})

    transport = make_transport(handler)
    response = await transport.request("GET", "/persons/search", params={"cognome": "ro", "size": 20})

    assert response.status == 405
    assert response.payload == {"message": "not allowed"}
    assert seen["url"].startswith("http://backend.test/base/persons/search?")
    assert "cognome=ro" in seen["url"]


@pytest.mark.asyncio
async def test_empty_and_non_json_bodies_decode_to_none():
    transport = make_transport(lambda request: httpx.Response(204))
    assert (await transport.request("DELETE", "/persons/X")).payload is None

    transport = make_transport(lambda request: httpx.Response(500, text="<html>oops</html>"))
    assert (await transport.request("GET", "/persons")).payload is None


@pytest.mark.asyncio
async def test_sends_json_body():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = request.content
        seen["method"] = request.method
        return httpx.Response(201, json={"nome": "Mario"})

    transport = make_transport(handler)
    response = await transport.request("POST", "/persons", json={"nome": "Mario"})
    assert seen["method"] == "POST"
    assert b'"nome"' in seen["body"]
    assert response.payload == {"nome": "Mario"}


@pytest.mark.asyncio
async def test_network_error_is_transport_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    transport = make_transport(handler)
    with pytest.raises(TransportFailure) as exc:
        await transport.request("GET", "/persons")
    assert exc.value.status is None


@pytest.mark.asyncio
async def test_cancel_during_request_aborts_it():
    gate = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        await gate.wait()
        return httpx.Response(200, json=[])

    token = CancelToken()
    transport = make_transport(handler)
    pending = asyncio.ensure_future(transport.request("GET", "/persons", cancel=token))
    await asyncio.sleep(0)
    token.cancel()

    with pytest.raises(Cancelled):
        await pending


@pytest.mark.asyncio
async def test_already_cancelled_token_skips_network():
    calls = []
    transport = make_transport(lambda request: calls.append(request) or httpx.Response(200))
    token = CancelToken()
    token.cancel()
    with pytest.raises(Cancelled):
        await transport.request("GET", "/persons", cancel=token)
    assert calls == []


@pytest.mark.asyncio
async def test_context_manager_closes_owned_client():
    async with HttpxTransport("http://backend.test") as transport:
        client = transport._client
    assert client.is_closed
