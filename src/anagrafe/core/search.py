# src/anagrafe/core/search.py
# Resolvedor de búsqueda: endpoint dedicado con fallback al listado genérico,
# desenvoltura de sobres paginados y filtro local de seguridad.
# Python 3.11+

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .dialects import first_present, to_search_row
from .dto import SearchCriteria, SearchRow
from .policy import (
    DEFAULT_SEARCH_SIZE,
    PROVINCE_CODE_LENGTH,
    PROVINCE_PARAM_ALIASES,
    SIZE_PARAM,
    SURNAME_MIN_LENGTH,
    SURNAME_PARAM_ALIASES,
    is_endpoint_unavailable,
)
from .ports import (
    CancelToken,
    EndpointUnavailable,
    Transport,
    TransportResponse,
    check_cancel,
    raise_for_status,
)

logger = logging.getLogger(__name__)

SEARCH_PATH = "/persons/search"
LIST_PATH = "/persons"

# Campos candidatos por fila (las filas pueden venir en cualquier dialecto)
ROW_SURNAME_FIELDS: Tuple[str, ...] = ("surname", "cognome", "lastName", "last_name")
ROW_PROVINCE_FIELDS: Tuple[str, ...] = ("province", "provincia")


# ------------------------------------------------------------------------------
# Criterios efectivos
# ------------------------------------------------------------------------------

@dataclass(slots=True, frozen=True)
class EffectiveCriteria:
    """
    Criterios ya normalizados. Un criterio inefectivo queda en None y no se
    envía ni se aplica en el filtro local.
    """
    surname: Optional[str]
    province: Optional[str]
    size: int

    @classmethod
    def from_criteria(cls, criteria: SearchCriteria, default_size: int = DEFAULT_SEARCH_SIZE) -> "EffectiveCriteria":
        surname = (criteria.surname_fragment or "").strip()
        province = (criteria.province_code or "").strip().upper()
        size = criteria.max_results if criteria.max_results is not None else default_size
        return cls(
            surname=surname if len(surname) >= SURNAME_MIN_LENGTH else None,
            province=province if len(province) == PROVINCE_CODE_LENGTH and province.isalpha() and province.isascii() else None,
            size=size,
        )

    def to_params(self) -> Dict[str, Any]:
        """
        Conjunto amplio de parámetros: cada criterio bajo todos sus alias, para que
        el backend filtre con el que reconozca (ignora los demás).
        """
        params: Dict[str, Any] = {}
        if self.surname:
            params.update({alias: self.surname for alias in SURNAME_PARAM_ALIASES})
        if self.province:
            params.update({alias: self.province for alias in PROVINCE_PARAM_ALIASES})
        params[SIZE_PARAM] = self.size
        return params


# ------------------------------------------------------------------------------
# Helpers puros
# ------------------------------------------------------------------------------

def unwrap_envelope(payload: Any) -> List[Any]:
    """
    Secuencia pelada → tal cual; {"content": [...]} → content; cualquier otra
    forma → [] (la ausencia de resultados no es un error de transporte).
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping) and isinstance(payload.get("content"), list):
        return payload["content"]
    return []


def row_matches(row: Any, criteria: EffectiveCriteria) -> bool:
    """
    Reaplica los criterios a una fila cruda: apellido por subcadena sin distinguir
    mayúsculas, provincia por igualdad tras mayúsculas. Idempotente.
    """
    if not isinstance(row, Mapping):
        return False

    if criteria.surname:
        surname = first_present(row, ROW_SURNAME_FIELDS)
        if criteria.surname.lower() not in str(surname or "").lower():
            return False

    if criteria.province:
        province = first_present(row, ROW_PROVINCE_FIELDS)
        if province is None:
            address = row.get("address")
            if isinstance(address, Mapping):
                province = first_present(address, ROW_PROVINCE_FIELDS)
        if str(province or "").strip().upper() != criteria.province:
            return False

    return True


def safety_net(rows: Sequence[Any], criteria: EffectiveCriteria) -> List[Any]:
    return [row for row in rows if row_matches(row, criteria)]


# ------------------------------------------------------------------------------
# Resolvedor
# ------------------------------------------------------------------------------

class SearchResolver:
    """
    Caso de uso 'buscar personas'.

    Pipeline explícito de dos pasos:
      1. GET /persons/search con todos los alias de parámetros.
      2. Si el estado cumple `is_endpoint_unavailable` → un único GET /persons con
         los mismos parámetros. Cualquier otro fallo se propaga sin reintento.
    Luego desenvuelve el sobre y aplica el filtro de seguridad local.

    Limitación conocida: el filtro local sólo ve la página que devolvió el backend
    (no hay bucle de paginación); si el backend ignora los filtros y la página es
    chica, coincidencias legítimas pueden quedar fuera.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        default_size: int = DEFAULT_SEARCH_SIZE,
        fallback: bool = True,
    ) -> None:
        self._transport = transport
        self._default_size = default_size
        self._fallback = fallback

    # ------------------------------- API pública -------------------------------

    def effective(self, criteria: SearchCriteria) -> EffectiveCriteria:
        return EffectiveCriteria.from_criteria(criteria, self._default_size)

    async def search(
        self,
        criteria: SearchCriteria,
        cancel: Optional[CancelToken] = None,
    ) -> List[SearchRow]:
        """
        Lanza Cancelled si la señal se activa antes o durante la red;
        TransportFailure ante cualquier fallo no absorbido por el fallback.
        """
        eff = self.effective(criteria)
        rows = await self.fetch_rows(eff, cancel)
        return [to_search_row(row) for row in safety_net(rows, eff)]

    async def fetch_rows(
        self,
        criteria: EffectiveCriteria,
        cancel: Optional[CancelToken] = None,
    ) -> List[Any]:
        """Filas crudas ya desenvueltas (sin filtro local)."""
        check_cancel(cancel)
        params = criteria.to_params()
        response = await self._get(SEARCH_PATH, params, cancel)

        if is_endpoint_unavailable(response.status):
            if not self._fallback:
                raise EndpointUnavailable(response.status)
            logger.info("search endpoint unavailable (status %s), falling back to %s", response.status, LIST_PATH)
            response = await self._get(LIST_PATH, params, cancel)

        raise_for_status(response)
        return unwrap_envelope(response.payload)

    # ------------------------------ Helpers internos ---------------------------

    async def _get(
        self, path: str, params: Mapping[str, Any], cancel: Optional[CancelToken]
    ) -> TransportResponse:
        return await self._transport.request("GET", path, params=dict(params), cancel=cancel)


__all__ = [
    "SEARCH_PATH",
    "LIST_PATH",
    "EffectiveCriteria",
    "unwrap_envelope",
    "row_matches",
    "safety_net",
    "SearchResolver",
]
