# src/anagrafe/core/ports.py
# Contratos (Ports) del núcleo: definen QUÉ necesita el core del exterior.
# Incluye la taxonomía de errores y el token de cancelación cooperativa.
# Python 3.11+

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Mapping, Optional, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


# ------------------------------------------------------------------------------
# Excepciones de dominio para la superficie de error uniforme
# ------------------------------------------------------------------------------

class PersonAccessError(Exception):
    """Base para todos los errores de la capa de acceso."""


class ValidationFailure(PersonAccessError):
    """
    Validación local, previa a la red (identificador o campo obligatorio).
    Nunca llega al transporte.
    """

    def __init__(self, field: str, reason: str, message: str = "") -> None:
        self.field = field
        self.reason = reason
        self.message = message or f"{field}: {reason}"
        super().__init__(self.message)


class NotFound(PersonAccessError):
    """
    El backend no encontró la entidad. Recuperable desde la UI ("crear nueva"),
    no se registra como fatal.
    """

    def __init__(self, identifier: str = "") -> None:
        self.identifier = identifier
        super().__init__(f"person not found: {identifier}" if identifier else "person not found")


class EndpointUnavailable(PersonAccessError):
    """
    El endpoint dedicado no existe / no admite el método (404, 405, 501).
    Sólo lo absorbe el resolvedor de búsqueda.
    """

    def __init__(self, status: int) -> None:
        self.status = status
        super().__init__(f"endpoint unavailable (status {status})")


class TransportFailure(PersonAccessError):
    """
    Red, timeout o estado HTTP no específico. `message` es el texto del backend
    si lo provee, si no "status N".
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        self.status = status
        self.message = message
        super().__init__(message)


class Cancelled(PersonAccessError):
    """Cancelación iniciada por el llamador. Nunca se muestra como error."""


# ------------------------------------------------------------------------------
# Cancelación cooperativa
# ------------------------------------------------------------------------------

class CancelToken:
    """
    Señal de cancelación cooperativa compartida entre el llamador y la operación.
    Se consulta en la frontera de transporte y antes de cada escritura en caché.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise Cancelled()

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """
        Ejecuta `awaitable` compitiendo con la señal. Si la señal gana, aborta la
        tarea en curso y lanza Cancelled.
        """
        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise Cancelled()
        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            raise Cancelled()
        return task.result()


def check_cancel(cancel: Optional[CancelToken]) -> None:
    if cancel is not None:
        cancel.raise_if_cancelled()


# ------------------------------------------------------------------------------
# Transporte
# ------------------------------------------------------------------------------

@dataclass(slots=True, frozen=True)
class TransportResponse:
    """
    Respuesta cruda del transporte. No lanza por estado HTTP: el llamador decide
    con predicados explícitos (policy.is_endpoint_unavailable, raise_for_status).
    """
    status: int
    payload: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@runtime_checkable
class Transport(Protocol):
    """
    Puerto de salida HTTP.
    Reglas:
      - `path` es relativo a la base configurada (nunca con prefijo fijo).
      - Devuelve TransportResponse para cualquier estado HTTP.
      - Fallas de red/timeout → TransportFailure (status None).
      - Debe respetar `cancel`: si la señal se activa antes o durante la llamada → Cancelled.
    """

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        cancel: Optional[CancelToken] = None,
    ) -> TransportResponse: ...


def backend_message(payload: Any) -> Optional[str]:
    """Mensaje legible que el backend adjunta (payload["message"]) o None."""
    if isinstance(payload, Mapping):
        msg = payload.get("message")
        if isinstance(msg, str) and msg.strip():
            return msg.strip()
    return None


def raise_for_status(response: TransportResponse, *, identifier: Optional[str] = None) -> None:
    """
    Traduce un estado no-2xx a la taxonomía. Con `identifier`, 404 → NotFound.
    """
    if response.ok:
        return
    if identifier is not None and response.status == 404:
        raise NotFound(identifier)
    raise TransportFailure(
        backend_message(response.payload) or f"status {response.status}",
        status=response.status,
    )


__all__ = [
    # Exceptions
    "PersonAccessError",
    "ValidationFailure",
    "NotFound",
    "EndpointUnavailable",
    "TransportFailure",
    "Cancelled",
    # Cancellation
    "CancelToken",
    "check_cancel",
    # Ports
    "TransportResponse",
    "Transport",
    "backend_message",
    "raise_for_status",
]
