# src/anagrafe/adapters/http_transport.py
# Adapter HTTP (httpx.AsyncClient) para el puerto Transport.
# Python 3.11+

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from ..core.ports import CancelToken, TransportFailure, TransportResponse, check_cancel

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 15.0


def decode_body(response: httpx.Response) -> Any:
    """JSON decodificado; cuerpo vacío o no-JSON → None."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


class HttpxTransport:
    """
    Implementa Transport sobre un único httpx.AsyncClient.
    La base se usa tal cual (no se agrega ningún prefijo fijo). Nunca lanza por
    estado HTTP; red/timeout → TransportFailure.
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        timeout: float = DEFAULT_TIMEOUT_S,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        cancel: Optional[CancelToken] = None,
    ) -> TransportResponse:
        check_cancel(cancel)
        call = self._client.request(method, path, params=params, json=json)
        try:
            response = await (cancel.guard(call) if cancel is not None else call)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TransportFailure("errore di rete") from e

        logger.debug("%s %s -> %s", method, path, response.status_code)
        return TransportResponse(status=response.status_code, payload=decode_body(response))

    async def aclose(self) -> None:
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


__all__ = ["DEFAULT_TIMEOUT_S", "decode_body", "HttpxTransport"]
