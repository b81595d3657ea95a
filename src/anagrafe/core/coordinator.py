# src/anagrafe/core/coordinator.py
# Coordinador de lecturas y mutaciones: mantiene la caché coherente con
# create/update/delete realizados contra el backend.
# Python 3.11+

from __future__ import annotations

import copy
import logging
from typing import List, Optional

from . import policy
from .cache import ReadCache, is_search_key, person_key, search_key
from .dto import Person, SearchCriteria, SearchRow
from .gateway import EntityGateway
from .ports import CancelToken, Cancelled, check_cancel
from .search import SearchResolver

logger = logging.getLogger(__name__)


class PersonRepository:
    """
    Fachada con caché sobre EntityGateway y SearchResolver.

    Reglas tras una mutación exitosa (antes de resolver al llamador):
      - create: escribe la entidad nueva por identificador; invalida todas las búsquedas.
      - update: reemplaza (no fusiona) la entrada por identificador; invalida búsquedas.
      - delete: elimina la entrada por identificador; invalida búsquedas.

    Las escrituras de búsqueda usan la clave de los parámetros de la propia petición,
    nunca "la más reciente": una búsqueda superada sólo afecta su propia clave.
    """

    def __init__(
        self,
        gateway: EntityGateway,
        resolver: SearchResolver,
        cache: Optional[ReadCache] = None,
    ) -> None:
        self._gateway = gateway
        self._resolver = resolver
        self._cache = cache if cache is not None else ReadCache()

    @property
    def cache(self) -> ReadCache:
        return self._cache

    # -------------------------------- Lecturas ---------------------------------

    async def get(self, identifier: str, cancel: Optional[CancelToken] = None) -> Person:
        key = person_key(identifier)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("cache hit %s", key)
            return copy.deepcopy(cached)

        person = await self._gateway.get(identifier, cancel)
        check_cancel(cancel)
        self._cache.set(key, copy.deepcopy(person))
        return person

    async def search(
        self, criteria: SearchCriteria, cancel: Optional[CancelToken] = None
    ) -> List[SearchRow]:
        key = search_key(self._resolver.effective(criteria).to_params())
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("cache hit %s", key)
            return copy.deepcopy(cached)

        rows = await self._resolver.search(criteria, cancel)
        check_cancel(cancel)
        self._cache.set(key, copy.deepcopy(rows))
        return rows

    # ------------------------------- Mutaciones --------------------------------

    async def create(self, person: Person, cancel: Optional[CancelToken] = None) -> Person:
        created = await self._gateway.create(person, cancel)
        identifier = policy.canonicalize(created.identifier or person.identifier)
        self._after_mutation(identifier, created, cancel)
        return created

    async def update(
        self, identifier: str, person: Person, cancel: Optional[CancelToken] = None
    ) -> Person:
        updated = await self._gateway.update(identifier, person, cancel)
        self._after_mutation(identifier, updated, cancel)
        return updated

    async def delete(self, identifier: str, cancel: Optional[CancelToken] = None) -> None:
        await self._gateway.delete(identifier, cancel)
        self._after_mutation(identifier, None, cancel)

    def invalidate_searches(self) -> int:
        return self._cache.invalidate(is_search_key)

    # ------------------------------ Helpers internos ---------------------------

    def _after_mutation(
        self, identifier: str, value: Optional[Person], cancel: Optional[CancelToken]
    ) -> None:
        """
        Sólo se escribe una respuesta que trae identificador (un cuerpo vacío no es
        una persona). Con cancelación tardía (el backend ya respondió) no se escribe
        nada: sólo se quitan la entrada y las búsquedas, y se lanza Cancelled.
        La caché guarda copias: editar lo devuelto no altera la entrada.
        """
        key = person_key(identifier)
        dropped = self.invalidate_searches()
        late_cancel = cancel is not None and cancel.cancelled
        if value is None or not value.identifier or late_cancel:
            self._cache.invalidate(key)
        else:
            self._cache.set(key, copy.deepcopy(value))
        logger.debug("mutation on %s: invalidated %d search entries", key, dropped)
        if late_cancel:
            raise Cancelled()


__all__ = ["PersonRepository"]
