# src/anagrafe/service/bootstrap.py
# Cableado: arma un PersonService listo a partir de Settings.
# Python 3.11+

from __future__ import annotations

import logging
from typing import Optional

from ..adapters.http_transport import HttpxTransport
from ..core import policy
from ..core.cache import Clock, ReadCache
from ..core.coordinator import PersonRepository
from ..core.gateway import EntityGateway
from ..core.ports import Transport
from ..core.search import SearchResolver
from .config import Settings, get_settings
from .logging_setup import configure_logging
from .messages import Translate
from .person_service import PersonService

logger = logging.getLogger(__name__)


def build_repository(
    settings: Settings,
    transport: Transport,
    *,
    clock: Optional[Clock] = None,
) -> PersonRepository:
    return PersonRepository(
        EntityGateway(transport, dialect=settings.api_dto),
        SearchResolver(transport, default_size=settings.search_default_size),
        ReadCache(ttl_s=settings.cache_ttl_s, clock=clock),
    )


def build_service(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[Transport] = None,
    clock: Optional[Clock] = None,
    translate: Optional[Translate] = None,
) -> PersonService:
    """
    Compone transporte, gateway, resolvedor y caché. El transporte puede
    inyectarse (tests); si no, se construye un HttpxTransport desde Settings.
    Las constantes de policy se verifican antes de cablear nada.
    """
    policy.validate_policy()
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    if transport is None:
        transport = HttpxTransport(settings.api_base, timeout=settings.http_timeout_s)
    logger.info("person service ready (base=%r, dialect=%s)", settings.api_base, settings.api_dto.value)
    return PersonService(build_repository(settings, transport, clock=clock), translate=translate)


__all__ = ["build_repository", "build_service"]
