# src/anagrafe/service/person_service.py
# Frontera hacia la UI: ejecuta cada operación del repositorio y la traduce a un
# Outcome tipado con mensaje localizado (nunca el texto crudo del transporte).
# Python 3.11+

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Generic, List, Literal, Optional, TypeVar

from ..core import policy
from ..core.coordinator import PersonRepository
from ..core.dto import Person, SearchCriteria, SearchRow
from ..core.ports import (
    CancelToken,
    Cancelled,
    NotFound,
    PersonAccessError,
    ValidationFailure,
)
from . import messages
from .logging_setup import report_error
from .models.person_contract import validate_for_save

logger = logging.getLogger(__name__)

T = TypeVar("T")

OutcomeKind = Literal["ok", "validation", "not_found", "failure", "cancelled"]


@dataclass(slots=True, frozen=True)
class Outcome(Generic[T]):
    """
    Resultado de una operación para la UI.
      - kind: ok | validation | not_found | failure | cancelled
      - message: texto localizado; None en cancelled (no se muestra).
      - field: campo inválido (sólo validation).
    """
    kind: OutcomeKind
    value: Optional[T] = None
    message: Optional[str] = None
    field: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind == "ok"


class PersonService:
    """
    Caso de uso de la pantalla de personas.

    Validación local antes de la red (identificador y campos obligatorios);
    NotFound y fallos de transporte vuelven como Outcome, no como defaults
    silenciosos. Cancelled nunca se reporta como error.
    """

    def __init__(self, repository: PersonRepository, *, translate: Optional[messages.Translate] = None) -> None:
        self._repo = repository
        self._translate = translate

    @property
    def repository(self) -> PersonRepository:
        return self._repo

    # ------------------------------- API pública -------------------------------

    async def find(self, identifier: str, cancel: Optional[CancelToken] = None) -> Outcome[Person]:
        """Búsqueda exacta por codice fiscale (valida antes de la red)."""
        check = policy.validate(identifier)
        if not check.valid:
            return self._validation(ValidationFailure("identifier", check.reason or "format"))
        return await self._run(
            self._repo.get(policy.canonicalize(identifier), cancel),
            "errors.search",
            success_key="messages.personFound",
            context={"op": "find", "identifier": policy.canonicalize(identifier)},
        )

    async def search(self, criteria: SearchCriteria, cancel: Optional[CancelToken] = None) -> Outcome[List[SearchRow]]:
        return await self._run(
            self._repo.search(criteria, cancel),
            "errors.search",
            context={"op": "search"},
        )

    async def create(self, person: Person, cancel: Optional[CancelToken] = None) -> Outcome[Person]:
        try:
            clean = validate_for_save(person)
        except ValidationFailure as e:
            return self._validation(e)
        return await self._run(
            self._repo.create(clean, cancel),
            "errors.create",
            success_key="messages.personCreated",
            context={"op": "create", "identifier": clean.identifier},
        )

    async def update(
        self, identifier: str, person: Person, cancel: Optional[CancelToken] = None
    ) -> Outcome[Person]:
        """`identifier` es el ya cargado/bloqueado en el editor."""
        check = policy.validate(identifier)
        if not check.valid:
            return self._validation(ValidationFailure("identifier", check.reason or "format"))
        cf = policy.canonicalize(identifier)
        try:
            clean = validate_for_save(replace(person, identifier=cf))
        except ValidationFailure as e:
            return self._validation(e)
        return await self._run(
            self._repo.update(cf, clean, cancel),
            "errors.update",
            success_key="messages.personUpdated",
            context={"op": "update", "identifier": cf},
        )

    async def delete(self, identifier: str, cancel: Optional[CancelToken] = None) -> Outcome[None]:
        cf = policy.canonicalize(identifier)
        if not cf:
            return self._validation(ValidationFailure("identifier", "required"))
        return await self._run(
            self._repo.delete(cf, cancel),
            "errors.delete",
            success_key="messages.personDeleted",
            context={"op": "delete", "identifier": cf},
        )

    # ------------------------------ Helpers internos ---------------------------

    async def _run(
        self,
        call: Awaitable[Any],
        failure_key: str,
        *,
        success_key: Optional[str] = None,
        context: Optional[dict] = None,
    ) -> Outcome[Any]:
        try:
            value = await call
        except Cancelled as e:
            report_error(e, context)
            return Outcome("cancelled")
        except ValidationFailure as e:
            return self._validation(e)
        except NotFound as e:
            report_error(e, context)
            return Outcome("not_found", message=messages.message_for(e, failure_key, self._translate))
        except PersonAccessError as e:
            report_error(e, context)
            return Outcome("failure", message=messages.message_for(e, failure_key, self._translate))

        message = messages.text(success_key, self._translate) if success_key else None
        return Outcome("ok", value=value, message=message)

    def _validation(self, error: ValidationFailure) -> Outcome[Any]:
        logger.debug("validation failed: %s/%s", error.field, error.reason)
        return Outcome(
            "validation",
            message=messages.message_for(error, "validation.invalid", self._translate),
            field=error.field,
        )


__all__ = ["OutcomeKind", "Outcome", "PersonService"]
