# src/anagrafe/core/dialects.py
# Normalizador de dialectos: mapeo bidireccional puro entre la forma canónica y
# los dialectos del backend (sin I/O, sin estado).
# Python 3.11+

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .dto import Address, Dialect, Person, SearchRow

# ------------------------------------------------------------------------------
# Tablas de alias (orden = prioridad): clave italiana, luego inglesas, luego snake-case
# ------------------------------------------------------------------------------

PERSON_ALIASES: Dict[str, Tuple[str, ...]] = {
    "identifier": ("codiceFiscale", "taxCode", "tax_code"),
    "first_name": ("nome", "name", "firstName", "first_name"),
    "last_name": ("cognome", "surname", "lastName", "last_name"),
}

ADDRESS_ALIASES: Dict[str, Tuple[str, ...]] = {
    "street": ("via", "street"),
    "house_number": ("numeroCivico", "number", "streetNumber", "street_number", "house_number"),
    "city": ("citta", "city"),
    "province": ("provincia", "province"),
    "country": ("nazione", "country"),
}

# Claves de salida por dialecto (exactamente una por campo)
OUTBOUND_KEYS: Dict[Dialect, Dict[str, str]] = {
    Dialect.IT: {
        "identifier": "codiceFiscale",
        "first_name": "nome",
        "last_name": "cognome",
        "street": "via",
        "house_number": "numeroCivico",
        "city": "citta",
        "province": "provincia",
        "country": "nazione",
    },
    Dialect.EN: {
        "identifier": "taxCode",
        "first_name": "name",
        "last_name": "surname",
        "street": "street",
        # el backend inglés espera 'number' (no 'streetNumber')
        "house_number": "number",
        "city": "city",
        "province": "province",
        "country": "country",
    },
}


# ------------------------------------------------------------------------------
# Helpers puros
# ------------------------------------------------------------------------------

def first_present(raw: Mapping[str, Any], aliases: Tuple[str, ...]) -> Any:
    """Primer alias presente y no None; None si ninguno."""
    for key in aliases:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


HOUSE_NUMBER_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_house_number(value: Union[str, int, None]) -> Optional[int]:
    """
    Entero base 10 o None si falta / no es parseable ("12a" → None).
    Sólo dígitos ASCII con signo opcional: "1_2" o dígitos no latinos → None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not HOUSE_NUMBER_PATTERN.fullmatch(text):
        return None
    return int(text, 10)


# ------------------------------------------------------------------------------
# Entrada: cualquier dialecto → canónico
# ------------------------------------------------------------------------------

def address_to_canonical(raw: Any) -> Address:
    a = _as_mapping(raw)
    return Address(**{
        name: _text(first_present(a, aliases))
        for name, aliases in ADDRESS_ALIASES.items()
    })


def to_canonical(raw: Any = None) -> Person:
    """
    Tolera entradas parciales o con claves distintas; los campos ausentes quedan
    en "" (nunca None). `{}` o None significan "sin campos".
    """
    d = _as_mapping(raw)
    fields = {name: _text(first_present(d, aliases)) for name, aliases in PERSON_ALIASES.items()}
    return Person(address=address_to_canonical(d.get("address")), **fields)


def to_search_row(raw: Any) -> SearchRow:
    """
    Proyección de listado. Una dirección estructurada se normaliza; un texto se
    conserva opaco. La provincia cae a la de la dirección si la fila no la trae.
    """
    d = _as_mapping(raw)
    person_fields = {name: _text(first_present(d, aliases)) for name, aliases in PERSON_ALIASES.items()}

    raw_address = d.get("address")
    address: Union[Address, str]
    if isinstance(raw_address, Mapping):
        address = address_to_canonical(raw_address)
        fallback_province = address.province
    else:
        address = _text(raw_address)
        fallback_province = ""

    province = first_present(d, ADDRESS_ALIASES["province"])
    return SearchRow(
        address=address,
        province=_text(province) if province is not None else fallback_province,
        **person_fields,
    )


# ------------------------------------------------------------------------------
# Salida: canónico → un dialecto
# ------------------------------------------------------------------------------

def from_canonical(person: Person, dialect: Dialect = Dialect.IT) -> Dict[str, Any]:
    """
    Escribe exactamente un dialecto. Textos vacíos de la dirección salen como None;
    el número civil se omite si falta o no es parseable (nunca None).
    """
    keys = OUTBOUND_KEYS[Dialect(dialect)]
    a = person.address if person.address is not None else Address()

    address: Dict[str, Any] = {}
    for name in ("street", "house_number", "city", "province", "country"):
        if name == "house_number":
            number = parse_house_number(a.house_number)
            if number is not None:
                address[keys[name]] = number
            continue
        address[keys[name]] = getattr(a, name) or None

    return {
        keys["identifier"]: person.identifier,
        keys["first_name"]: person.first_name,
        keys["last_name"]: person.last_name,
        "address": address,
    }


__all__ = [
    "PERSON_ALIASES",
    "ADDRESS_ALIASES",
    "OUTBOUND_KEYS",
    "first_present",
    "parse_house_number",
    "address_to_canonical",
    "to_canonical",
    "to_search_row",
    "from_canonical",
]
