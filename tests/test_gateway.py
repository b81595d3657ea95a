"""
Tests for the entity gateway (CRUD without cache).
"""
from __future__ import annotations

import pytest

from anagrafe.core.dto import Dialect
from anagrafe.core.gateway import EntityGateway
from anagrafe.core.ports import NotFound, TransportFailure, ValidationFailure

ITEM = "/persons/RSSMRA80A01H501U"


@pytest.mark.asyncio
async def test_get_canonicalizes_and_normalizes(transport, mario_it, mario):
    transport.add("GET", ITEM, 200, mario_it)
    person = await EntityGateway(transport).get("  rssmra80a01h501u ")
    assert person == mario
    assert transport.calls[0].path == ITEM


@pytest.mark.asyncio
async def test_get_missing_identifier_fails_before_network(transport):
    with pytest.raises(ValidationFailure) as exc:
        await EntityGateway(transport).get("   ")
    assert exc.value.reason == "required"
    assert transport.calls == []


@pytest.mark.asyncio
async def test_get_404_is_not_found(transport):
    transport.add("GET", ITEM, 404, {"message": "nope"})
    with pytest.raises(NotFound) as exc:
        await EntityGateway(transport).get("RSSMRA80A01H501U")
    assert exc.value.identifier == "RSSMRA80A01H501U"


@pytest.mark.asyncio
async def test_get_other_status_is_transport_failure(transport):
    transport.add("GET", ITEM, 500)
    with pytest.raises(TransportFailure, match="status 500"):
        await EntityGateway(transport).get("RSSMRA80A01H501U")


@pytest.mark.asyncio
async def test_identifier_is_escaped_in_path(transport):
    transport.add("DELETE", "/persons/A%2FB", 204)
    await EntityGateway(transport).delete("a/b")
    assert transport.calls[-1].path == "/persons/A%2FB"


@pytest.mark.asyncio
async def test_create_sends_configured_dialect_and_returns_canonical(transport, mario):
    transport.add("POST", "/persons", 201, {"taxCode": mario.identifier, "name": "Mario", "surname": "Rossi",
                                            "address": {"street": "Via Roma", "number": 12, "city": "Roma",
                                                        "province": "RM", "country": "Italia"}})
    created = await EntityGateway(transport, dialect=Dialect.EN).create(mario)

    body = transport.calls[0].json
    assert body["taxCode"] == mario.identifier
    assert body["address"]["number"] == 12
    assert created == mario


@pytest.mark.asyncio
async def test_update_keeps_path_identifier_in_body(transport, mario, mario_it):
    transport.add("PUT", ITEM, 200, mario_it)
    mario.identifier = "XXXXXX00X00X000X"
    updated = await EntityGateway(transport).update("RSSMRA80A01H501U", mario)

    assert transport.calls[0].json["codiceFiscale"] == "RSSMRA80A01H501U"
    assert updated.identifier == "RSSMRA80A01H501U"


@pytest.mark.asyncio
async def test_delete_returns_nothing(transport):
    transport.add("DELETE", ITEM, 204)
    assert await EntityGateway(transport).delete("RSSMRA80A01H501U") is None


@pytest.mark.asyncio
async def test_delete_failure_carries_backend_message(transport):
    transport.add("DELETE", ITEM, 409, {"message": "in uso"})
    with pytest.raises(TransportFailure) as exc:
        await EntityGateway(transport).delete("RSSMRA80A01H501U")
    assert exc.value.message == "in uso"
    assert exc.value.status == 409
