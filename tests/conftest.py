from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

# Garantiza que el paquete sea importable durante los tests locales
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from anagrafe.core.dto import Address, Person
from anagrafe.core.ports import CancelToken, TransportResponse, check_cancel


@dataclass
class Call:
    method: str
    path: str
    params: Optional[Dict[str, Any]] = None
    json: Any = None


@dataclass
class FakeTransport:
    """Transporte guionado: (método, ruta) → cola de respuestas; registra cada llamada."""

    routes: Dict[Tuple[str, str], List[TransportResponse]] = field(default_factory=dict)
    calls: List[Call] = field(default_factory=list)

    def add(self, method: str, path: str, status: int, payload: Any = None) -> "FakeTransport":
        self.routes.setdefault((method, path), []).append(TransportResponse(status, payload))
        return self

    def calls_to(self, method: str, path: str) -> List[Call]:
        return [c for c in self.calls if c.method == method and c.path == path]

    async def request(self, method, path, *, params=None, json=None, cancel: Optional[CancelToken] = None):
        check_cancel(cancel)
        self.calls.append(Call(method, path, dict(params) if params is not None else None, json))
        queue = self.routes.get((method, path))
        if not queue:
            return TransportResponse(404, None)
        # La última respuesta se repite si la cola se agota
        return queue.pop(0) if len(queue) > 1 else queue[0]


class ManualClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def mario() -> Person:
    return Person(
        identifier="RSSMRA80A01H501U",
        first_name="Mario",
        last_name="Rossi",
        address=Address(street="Via Roma", house_number="12", city="Roma", province="RM", country="Italia"),
    )


@pytest.fixture
def mario_it() -> Dict[str, Any]:
    return {
        "codiceFiscale": "RSSMRA80A01H501U",
        "nome": "Mario",
        "cognome": "Rossi",
        "address": {
            "via": "Via Roma",
            "numeroCivico": 12,
            "citta": "Roma",
            "provincia": "RM",
            "nazione": "Italia",
        },
    }
