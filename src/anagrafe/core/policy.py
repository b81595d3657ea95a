# src/anagrafe/core/policy.py
# Parámetros del acceso a datos y política del identificador (codice fiscale).
# Centraliza umbrales, alias y estados de fallback para que search.py, gateway.py
# y coordinator.py puedan usarlos sin tocar la orquestación.
# Python 3.11+

from __future__ import annotations

import re
from typing import Final, FrozenSet, Tuple
from urllib.parse import quote

from .dto import IdentifierCheck


# ------------------------------------------------------------------------------
# Identificador (codice fiscale)
# ------------------------------------------------------------------------------
IDENTIFIER_LENGTH: Final[int] = 16
"""
Longitud fija exigida al identificador tras trim + mayúsculas.
"""

IDENTIFIER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^[A-Z]{6}[0-9]{2}[A-Z][0-9]{2}[A-Z][0-9]{3}[A-Z]$"
)
"""
6 letras, 2 dígitos, 1 letra, 2 dígitos, 1 letra, 3 dígitos, 1 letra.
"""


# ------------------------------------------------------------------------------
# Búsqueda
# ------------------------------------------------------------------------------
SURNAME_MIN_LENGTH: Final[int] = 2
"""
Un fragmento de apellido sólo filtra si tiene al menos este largo (tras trim).
"""

PROVINCE_CODE_LENGTH: Final[int] = 2

DEFAULT_SEARCH_SIZE: Final[int] = 20

SEARCH_FALLBACK_STATUSES: Final[FrozenSet[int]] = frozenset({404, 405, 501})
"""
Estados que indican que /persons/search no existe, no admite GET o no está
implementado. Sólo estos disparan el reintento contra /persons.
"""

SURNAME_PARAM_ALIASES: Final[Tuple[str, ...]] = (
    "lastName",
    "surnameLike",
    "surname",
    "cognome",
    "cognomeLike",
)
PROVINCE_PARAM_ALIASES: Final[Tuple[str, ...]] = ("province", "provincia")
SIZE_PARAM: Final[str] = "size"


# ------------------------------------------------------------------------------
# Caché
# ------------------------------------------------------------------------------
CACHE_TTL_S: Final[float] = 60.0
"""
Ventana de frescura por defecto. No hay revalidación en segundo plano:
una lectura vieja es aceptable hasta que expira o hay una mutación.
"""


# ------------------------------------------------------------------------------
# Política del identificador (pura, sin I/O)
# ------------------------------------------------------------------------------
def canonicalize(raw: object) -> str:
    """Trim + mayúsculas. None → ""."""
    return str(raw if raw is not None else "").strip().upper()


def validate(raw: object) -> IdentifierCheck:
    """
    Tres motivos distintos y comprobables por separado:
      - "required": vacío tras trim
      - "length":   largo distinto de 16
      - "format":   largo correcto pero no calza el patrón
    """
    v = canonicalize(raw)
    if not v:
        return IdentifierCheck(False, "required")
    if len(v) != IDENTIFIER_LENGTH:
        return IdentifierCheck(False, "length")
    if not IDENTIFIER_PATTERN.match(v):
        return IdentifierCheck(False, "format")
    return IdentifierCheck(True)


def path_segment(raw: object) -> str:
    """Identificador canónico escapado para usarse como segmento de ruta."""
    return quote(canonicalize(raw), safe="")


def is_endpoint_unavailable(status: int) -> bool:
    """Guarda del fallback de búsqueda (404/405/501)."""
    return status in SEARCH_FALLBACK_STATUSES


def validate_policy() -> None:
    """
    Chequeos básicos de consistencia. No hace I/O.
    build_service la invoca al inicio, antes de cablear nada.
    """
    if SURNAME_MIN_LENGTH < 1:
        raise ValueError(f"SURNAME_MIN_LENGTH debe ser >= 1; valor actual={SURNAME_MIN_LENGTH}")
    for name, val in [
        ("CACHE_TTL_S", CACHE_TTL_S),
        ("DEFAULT_SEARCH_SIZE", DEFAULT_SEARCH_SIZE),
    ]:
        if val <= 0:
            raise ValueError(f"{name} debe ser > 0; valor actual={val}")
    if not SEARCH_FALLBACK_STATUSES <= {404, 405, 501}:
        raise ValueError("SEARCH_FALLBACK_STATUSES sólo admite 404, 405 y 501")


__all__ = [
    "IDENTIFIER_LENGTH",
    "IDENTIFIER_PATTERN",
    "SURNAME_MIN_LENGTH",
    "PROVINCE_CODE_LENGTH",
    "DEFAULT_SEARCH_SIZE",
    "SEARCH_FALLBACK_STATUSES",
    "SURNAME_PARAM_ALIASES",
    "PROVINCE_PARAM_ALIASES",
    "SIZE_PARAM",
    "CACHE_TTL_S",
    "canonicalize",
    "validate",
    "path_segment",
    "is_endpoint_unavailable",
    "validate_policy",
]
