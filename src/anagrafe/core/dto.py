# src/anagrafe/core/dto.py
# Tipos del dominio (sin lógica de negocio ni I/O).
# Python 3.11+

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Optional, Union, Any

# --- Enums / Literals ---------------------------------------------------------

class Dialect(str, Enum):
    """
    Convención de nombres usada al serializar hacia el backend.
    IT = claves en italiano (dialecto canónico), EN = claves en inglés.
    """
    IT = "it"
    EN = "en"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Dialect":
        # Valores desconocidos o vacíos → dialecto canónico
        v = (value or "").strip().lower()
        return cls.EN if v == cls.EN.value else cls.IT


# Motivos de rechazo del identificador (independientes entre sí)
IdentifierReason = Literal["required", "length", "format"]


# --- Forma canónica -----------------------------------------------------------

@dataclass(slots=True)
class Address:
    """
    Dirección canónica.

    Campos:
      - house_number: string mientras se edita ("" si falta); int aceptado en salida.
      - province: código de 2 letras para filtrar (no se valida estrictamente al guardar).
    """
    street: str = ""
    house_number: Union[str, int] = ""
    city: str = ""
    province: str = ""
    country: str = ""


@dataclass(slots=True)
class Person:
    """
    Persona en forma canónica, independiente del dialecto del backend.

    Invariante: `identifier` se fija al crear y nunca lo modifica un update;
    es la única clave de búsqueda posterior.
    """
    identifier: str = ""
    first_name: str = ""
    last_name: str = ""
    address: Address = field(default_factory=Address)


@dataclass(slots=True)
class SearchRow:
    """
    Proyección reducida para listados. `address` puede ser un Address estructurado
    o un texto opaco (sólo para mostrar).
    """
    identifier: str = ""
    first_name: str = ""
    last_name: str = ""
    address: Union[Address, str] = ""
    province: str = ""


@dataclass(slots=True, frozen=True)
class SearchCriteria:
    """
    Criterios de búsqueda tal como los entrega la UI (sin normalizar).
    La normalización/efectividad vive en search.py.
    """
    surname_fragment: Optional[str] = None
    province_code: Optional[str] = None
    max_results: Optional[int] = None

    @classmethod
    def from_options(cls, **opts: Any) -> "SearchCriteria":
        """
        Acepta los alias de la UI: surnameLike | lastName, province, size.
        """
        surname = opts.get("surnameLike")
        if surname is None:
            surname = opts.get("lastName")
        size = opts.get("size")
        return cls(
            surname_fragment=None if surname is None else str(surname),
            province_code=None if opts.get("province") is None else str(opts["province"]),
            max_results=size if isinstance(size, int) and not isinstance(size, bool) else None,
        )


@dataclass(slots=True, frozen=True)
class IdentifierCheck:
    """Resultado de validar un identificador. `reason` es None si es válido."""
    valid: bool
    reason: Optional[IdentifierReason] = None


__all__ = [
    "Dialect",
    "IdentifierReason",
    "Address",
    "Person",
    "SearchRow",
    "SearchCriteria",
    "IdentifierCheck",
]
