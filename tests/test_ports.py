from __future__ import annotations

import asyncio

import pytest

from anagrafe.core.ports import (
    Cancelled,
    CancelToken,
    NotFound,
    TransportFailure,
    TransportResponse,
    backend_message,
    raise_for_status,
)


@pytest.mark.parametrize(
    "payload,expected",
    [({"message": " Codice già presente "}, "Codice già presente"), ({"message": ""}, None), ([1], None), (None, None)],
)
def test_backend_message(payload, expected):
    assert backend_message(payload) == expected


def test_raise_for_status_passes_2xx():
    raise_for_status(TransportResponse(204))


def test_404_is_not_found_only_for_item_lookups():
    with pytest.raises(NotFound):
        raise_for_status(TransportResponse(404), identifier="X")
    with pytest.raises(TransportFailure, match="status 404"):
        raise_for_status(TransportResponse(404))


@pytest.mark.asyncio
async def test_guard_returns_result_when_not_cancelled():
    async def work():
        return 42

    assert await CancelToken().guard(work()) == 42


@pytest.mark.asyncio
async def test_guard_propagates_errors():
    async def work():
        raise TransportFailure("status 500", 500)

    with pytest.raises(TransportFailure):
        await CancelToken().guard(work())


@pytest.mark.asyncio
async def test_guard_aborts_pending_work():
    started = asyncio.Event()
    aborted = []

    async def work():
        started.set()
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            aborted.append(True)
            raise

    token = CancelToken()
    pending = asyncio.ensure_future(token.guard(work()))
    await started.wait()
    token.cancel()

    with pytest.raises(Cancelled):
        await pending
    assert aborted == [True]
