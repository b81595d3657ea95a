# src/anagrafe/service/config.py
# Configuración de la capa de acceso: se lee de variables de entorno (y de un
# .env opcional) para que transporte, dialecto y caché no toquen os.environ.
# Python 3.11+

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.dto import Dialect
from ..core.policy import CACHE_TTL_S, DEFAULT_SEARCH_SIZE


class Settings(BaseSettings):
    """Vista tipada de las variables de entorno."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # La base se usa tal cual: nunca se agrega un prefijo fijo como "/api"
    api_base: str = Field(default="", alias="API_BASE")
    api_dto: Dialect = Field(default=Dialect.IT, alias="API_DTO")

    http_timeout_s: float = Field(default=15.0, gt=0, alias="HTTP_TIMEOUT_S")
    cache_ttl_s: float = Field(default=CACHE_TTL_S, gt=0, alias="CACHE_TTL_S")
    search_default_size: int = Field(default=DEFAULT_SEARCH_SIZE, gt=0, alias="SEARCH_DEFAULT_SIZE")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("api_dto", mode="before")
    @classmethod
    def parse_dialect(cls, v: object) -> Dialect:
        # Selector desconocido → dialecto canónico (italiano)
        return v if isinstance(v, Dialect) else Dialect.parse(None if v is None else str(v))

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_level(cls, v: object) -> str:
        return str(v or "INFO").strip().upper()


@lru_cache
def get_settings() -> Settings:
    """Lee el entorno actual y construye Settings (una vez por proceso)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
