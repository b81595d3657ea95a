from __future__ import annotations

from typing import Annotated, Any, Tuple

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from ...core import policy
from ...core.dialects import parse_house_number
from ...core.dto import Address, Person
from ...core.ports import ValidationFailure


# ---------- Types with restrictions ----------
def _required(v: Any) -> str:
    # Blank after trim counts as missing
    text = "" if v is None else str(v).strip()
    if not text:
        raise PydanticCustomError("required", "Campo obbligatorio.")
    return text


RequiredStr = Annotated[str, BeforeValidator(_required)]


def _house_number(v: Any) -> int:
    n = parse_house_number(v)
    if n is None or n < 1:
        raise PydanticCustomError("invalid", "Numero Civico non valido (deve essere un intero ≥ 1).")
    return n


HouseNumber = Annotated[int, BeforeValidator(_house_number)]


def _identifier(v: Any) -> str:
    check = policy.validate(v)
    if not check.valid:
        raise PydanticCustomError(check.reason or "format", "Codice Fiscale non valido.")
    return policy.canonicalize(v)


IdentifierStr = Annotated[str, BeforeValidator(_identifier)]


# ---------- Save (create/update) ----------
class AddressSaveModel(BaseModel):
    """
    Dirección exigida para persistir.
    """
    model_config = ConfigDict(from_attributes=True)

    street: RequiredStr = Field(..., description="Via.")
    house_number: HouseNumber = Field(..., description="Numero civico, intero ≥ 1.")
    city: RequiredStr = Field(..., description="Città.")
    province: RequiredStr = Field(..., description="Provincia (sigla, normalizzata in maiuscolo).")
    country: RequiredStr = Field(..., description="Nazione.")

    @field_validator("province")
    @classmethod
    def upper_province(cls, v: str) -> str:
        return v.upper()


class PersonSaveModel(BaseModel):
    """
    Validación estricta previa a create/update (UI → guardar).
    """
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "identifier": "RSSMRA80A01H501U",
                "first_name": "Mario",
                "last_name": "Rossi",
                "address": {
                    "street": "Via Roma",
                    "house_number": 12,
                    "city": "Roma",
                    "province": "RM",
                    "country": "Italia",
                },
            }
        },
    )

    identifier: IdentifierStr = Field(..., description="Codice fiscale (16 caratteri).")
    first_name: RequiredStr = Field(..., description="Nome.")
    last_name: RequiredStr = Field(..., description="Cognome.")
    address: AddressSaveModel

    def to_person(self) -> Person:
        a = self.address
        return Person(
            identifier=self.identifier,
            first_name=self.first_name,
            last_name=self.last_name,
            address=Address(
                street=a.street,
                house_number=str(a.house_number),
                city=a.city,
                province=a.province,
                country=a.country,
            ),
        )


def first_issue(err: ValidationError) -> Tuple[str, str]:
    """(campo, motivo) del primer error, en orden de declaración de campos."""
    issue = err.errors()[0]
    loc = [part for part in issue.get("loc", ()) if isinstance(part, str)]
    field = loc[-1] if loc else "person"
    reason = issue.get("type", "invalid")
    if reason == "missing":
        reason = "required"
    return field, reason


def validate_for_save(person: Person) -> Person:
    """
    Devuelve la persona saneada (trim, provincia en mayúscula, número como texto)
    o lanza ValidationFailure con el primer campo inválido.
    """
    try:
        return PersonSaveModel.model_validate(person).to_person()
    except ValidationError as err:
        field, reason = first_issue(err)
        raise ValidationFailure(field, reason, err.errors()[0].get("msg", "")) from err


__all__ = [
    "RequiredStr",
    "HouseNumber",
    "IdentifierStr",
    "AddressSaveModel",
    "PersonSaveModel",
    "first_issue",
    "validate_for_save",
]

# This file defines the pydantic contract used to validate a Person before it is saved.
# Field-level failures carry a stable reason (required, length, format, invalid)
# so the UI can pick the localized message for each field independently.
