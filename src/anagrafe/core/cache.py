# src/anagrafe/core/cache.py
# Caché de lectura en memoria con ventana de frescura y reloj inyectable.
# Python 3.11+

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Mapping, Optional, Tuple, Union

from .policy import CACHE_TTL_S, canonicalize

Clock = Callable[[], float]
CacheKey = Tuple[Hashable, ...]
KeyPredicate = Callable[[CacheKey], bool]

PERSON_FAMILY = "person"
SEARCH_FAMILY = "search"


# ------------------------------------------------------------------------------
# Claves
# ------------------------------------------------------------------------------

def person_key(identifier: str) -> CacheKey:
    return (PERSON_FAMILY, canonicalize(identifier))


def search_key(params: Mapping[str, Any]) -> CacheKey:
    """Clave estable para un conjunto de parámetros (orden irrelevante)."""
    return (SEARCH_FAMILY, tuple(sorted((str(k), str(v)) for k, v in params.items())))


def is_search_key(key: CacheKey) -> bool:
    return bool(key) and key[0] == SEARCH_FAMILY


# ------------------------------------------------------------------------------
# Caché
# ------------------------------------------------------------------------------

@dataclass(slots=True)
class CacheEntry:
    value: Any
    stored_at: float
    expires_at: float


class ReadCache:
    """
    Acelerador de lecturas, no fuente de verdad. Sin locks: la ejecución es de un
    solo hilo y un read-modify-write no se intercala con otra lógica.
    Las entradas expiradas se tratan como ausentes en el siguiente `get`.
    """

    def __init__(self, ttl_s: float = CACHE_TTL_S, clock: Optional[Clock] = None) -> None:
        if ttl_s <= 0:
            raise ValueError(f"ttl_s debe ser > 0; valor actual={ttl_s}")
        self._ttl_s = ttl_s
        self._clock: Clock = clock or time.monotonic
        self._entries: Dict[CacheKey, CacheEntry] = {}

    @property
    def ttl_s(self) -> float:
        return self._ttl_s

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return self.get(key) is not None  # type: ignore[arg-type]

    def get(self, key: CacheKey) -> Any:
        """Valor fresco o None (ausente o expirado; lo expirado se descarta)."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: CacheKey, value: Any, ttl: Optional[float] = None) -> None:
        now = self._clock()
        self._entries[key] = CacheEntry(
            value=value,
            stored_at=now,
            expires_at=now + (self._ttl_s if ttl is None else ttl),
        )

    def invalidate(self, target: Union[CacheKey, KeyPredicate]) -> int:
        """Elimina una clave exacta o todas las que cumplan el predicado. Devuelve cuántas."""
        if callable(target):
            doomed = [key for key in self._entries if target(key)]
        else:
            doomed = [target] if target in self._entries else []
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()


__all__ = [
    "Clock",
    "CacheKey",
    "KeyPredicate",
    "PERSON_FAMILY",
    "SEARCH_FAMILY",
    "person_key",
    "search_key",
    "is_search_key",
    "CacheEntry",
    "ReadCache",
]
