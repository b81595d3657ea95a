# src/anagrafe/core/gateway.py
# Orquestador CRUD: compone política de identificador + normalizador + transporte.
# Python 3.11+

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from . import policy
from .dialects import from_canonical, to_canonical
from .dto import Dialect, Person
from .ports import (
    CancelToken,
    Transport,
    ValidationFailure,
    raise_for_status,
)

logger = logging.getLogger(__name__)

PERSONS_PATH = "/persons"


class EntityGateway:
    """
    Caso de uso 'CRUD de personas' (sin caché; ver coordinator.py).

    Responsabilidades:
      - Rechazar identificadores vacíos antes de cualquier llamada de red.
      - Canonicalizar y escapar el identificador para la ruta.
      - Convertir salida con el dialecto configurado y normalizar siempre la entrada:
        el llamador recibe forma canónica sin importar lo que devuelva el backend.
    """

    def __init__(self, transport: Transport, *, dialect: Dialect = Dialect.IT) -> None:
        self._transport = transport
        self._dialect = Dialect(dialect)

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    # ------------------------------- API pública -------------------------------

    async def get(self, identifier: str, cancel: Optional[CancelToken] = None) -> Person:
        """404 → NotFound; otros fallos → TransportFailure."""
        cf = self._require_identifier(identifier)
        response = await self._transport.request("GET", self._item_path(cf), cancel=cancel)
        raise_for_status(response, identifier=cf)
        return to_canonical(response.payload)

    async def create(self, person: Person, cancel: Optional[CancelToken] = None) -> Person:
        body = from_canonical(person, self._dialect)
        response = await self._transport.request("POST", PERSONS_PATH, json=body, cancel=cancel)
        raise_for_status(response)
        return to_canonical(response.payload)

    async def update(
        self, identifier: str, person: Person, cancel: Optional[CancelToken] = None
    ) -> Person:
        """
        El identificador de la ruta manda: el cuerpo siempre lleva el identificador
        ya persistido, nunca el del formulario.
        """
        cf = self._require_identifier(identifier)
        body = from_canonical(replace(person, identifier=cf), self._dialect)
        response = await self._transport.request("PUT", self._item_path(cf), json=body, cancel=cancel)
        raise_for_status(response, identifier=cf)
        return to_canonical(response.payload)

    async def delete(self, identifier: str, cancel: Optional[CancelToken] = None) -> None:
        cf = self._require_identifier(identifier)
        response = await self._transport.request("DELETE", self._item_path(cf), cancel=cancel)
        raise_for_status(response, identifier=cf)

    # ------------------------------ Helpers internos ---------------------------

    @staticmethod
    def _require_identifier(identifier: str) -> str:
        cf = policy.canonicalize(identifier)
        if not cf:
            raise ValidationFailure("identifier", "required", "missing identifier")
        return cf

    @staticmethod
    def _item_path(cf: str) -> str:
        return f"{PERSONS_PATH}/{policy.path_segment(cf)}"


__all__ = ["PERSONS_PATH", "EntityGateway"]
