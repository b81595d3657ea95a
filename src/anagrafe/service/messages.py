# src/anagrafe/service/messages.py
# Textos para el usuario (italiano por defecto). La traducción es externa:
# se inyecta un callable (key, default) -> str.
# Python 3.11+

from __future__ import annotations

from typing import Callable, Dict, Final, Optional

from ..core.ports import (
    Cancelled,
    NotFound,
    TransportFailure,
    ValidationFailure,
)

Translate = Callable[[str, str], str]

DEFAULT_MESSAGES: Final[Dict[str, str]] = {
    # Validación
    "validation.cfRequired": "Inserisci il Codice Fiscale.",
    "validation.cfLength": "Il Codice Fiscale deve essere di 16 caratteri.",
    "validation.cfFormat": "Formato CF non valido.",
    "validation.nomeRequired": "Inserisci il Nome.",
    "validation.cognomeRequired": "Inserisci il Cognome.",
    "validation.viaRequired": "Inserisci la Via.",
    "validation.numeroCivicoInvalid": "Numero Civico non valido (deve essere un intero ≥ 1).",
    "validation.cittaRequired": "Inserisci la Città.",
    "validation.provinciaRequired": "Inserisci la Provincia.",
    "validation.nazioneRequired": "Inserisci la Nazione.",
    "validation.invalid": "Dati non validi.",
    # Resultados
    "messages.personFound": "Persona trovata.",
    "messages.personCreated": "Persona creata.",
    "messages.personUpdated": "Persona aggiornata.",
    "messages.personDeleted": "Persona cancellata.",
    "messages.notFound": "Nessuna persona trovata.",
    # Fallos por operación
    "errors.search": "Errore durante la ricerca.",
    "errors.create": "Errore durante la creazione.",
    "errors.update": "Errore durante l'aggiornamento.",
    "errors.delete": "Errore durante la cancellazione.",
    "errors.network": "Errore di rete.",
}

# (campo, motivo) → clave de mensaje
VALIDATION_KEYS: Final[Dict[tuple, str]] = {
    ("identifier", "required"): "validation.cfRequired",
    ("identifier", "length"): "validation.cfLength",
    ("identifier", "format"): "validation.cfFormat",
    ("first_name", "required"): "validation.nomeRequired",
    ("last_name", "required"): "validation.cognomeRequired",
    ("street", "required"): "validation.viaRequired",
    ("house_number", "invalid"): "validation.numeroCivicoInvalid",
    ("city", "required"): "validation.cittaRequired",
    ("province", "required"): "validation.provinciaRequired",
    ("country", "required"): "validation.nazioneRequired",
}


def _identity(key: str, default: str) -> str:
    return default


def text(key: str, translate: Optional[Translate] = None) -> str:
    default = DEFAULT_MESSAGES.get(key, key)
    return (translate or _identity)(key, default)


def validation_key(field: str, reason: str) -> str:
    return VALIDATION_KEYS.get((field, reason), "validation.invalid")


def message_for(
    error: BaseException,
    failure_key: str,
    translate: Optional[Translate] = None,
) -> Optional[str]:
    """
    Texto corto y localizado para un fallo. Nunca devuelve el texto crudo del
    transporte; Cancelled → None (no se muestra).
    """
    if isinstance(error, Cancelled):
        return None
    if isinstance(error, ValidationFailure):
        return text(validation_key(error.field, error.reason), translate)
    if isinstance(error, NotFound):
        return text("messages.notFound", translate)
    if isinstance(error, TransportFailure) and error.status is None:
        return text("errors.network", translate)
    return text(failure_key, translate)


__all__ = [
    "Translate",
    "DEFAULT_MESSAGES",
    "VALIDATION_KEYS",
    "text",
    "validation_key",
    "message_for",
]
