# src/anagrafe/service/logging_setup.py
# Configuración de logging y reporte estructurado de errores.
# Python 3.11+

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..core.ports import Cancelled, NotFound, PersonAccessError

LOGGER_NAME = "anagrafe"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Instala un único StreamHandler en el logger del paquete (idempotente)."""
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(level.strip().upper())

    # Evita handlers duplicados
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)
    return root


def error_kind(error: BaseException) -> str:
    if isinstance(error, PersonAccessError):
        return type(error).__name__
    return "Unexpected"


def report_error(error: BaseException, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Registra un registro estructurado de la falla y lo devuelve.

    NotFound es flujo esperado de la UI (info), Cancelled nunca es error (debug);
    todo lo demás va a nivel error.
    """
    record = {
        "kind": error_kind(error),
        "message": str(error) or type(error).__name__,
        "context": dict(context or {}),
        "ts": datetime.now(timezone.utc).isoformat(),
    }
    if isinstance(error, Cancelled):
        logger.debug("cancelled: %s", record)
    elif isinstance(error, NotFound):
        logger.info("not found: %s", record)
    else:
        logger.error("operation failed: %s", record)
    return record


__all__ = ["LOGGER_NAME", "LOG_FORMAT", "configure_logging", "error_kind", "report_error"]
