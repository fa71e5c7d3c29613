"""
Configuración del sync de schema.

Este módulo no realiza I/O: solo define configuración.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from dsi_engine.core.config import Settings

DEFAULT_OWNER_TYPE = "PRODUCT"
DEFAULT_PAGE_SIZE = 250
DEFAULT_CHUNK_SIZE = 50


@dataclass(frozen=True)
class SchemaSyncConfig:
    """
    Parametros de una corrida de sync.

    - owner_type: categoria de entidad consultada y guardada (p.ej. PRODUCT)
    - page_size: argumento `first` de la consulta (solo primera pagina)
    - chunk_size: registros por transaccion
    - fetch_timeout_s / chunk_timeout_s: None = sin limite
    """

    owner_type: str = DEFAULT_OWNER_TYPE
    page_size: int = DEFAULT_PAGE_SIZE
    chunk_size: int = DEFAULT_CHUNK_SIZE
    fetch_timeout_s: Optional[float] = None
    chunk_timeout_s: Optional[float] = None


def sync_config_from_settings(settings: Settings) -> SchemaSyncConfig:
    return SchemaSyncConfig(
        owner_type=settings.SCHEMA_OWNER_TYPE,
        page_size=settings.SCHEMA_PAGE_SIZE,
        chunk_size=settings.SCHEMA_CHUNK_SIZE,
        fetch_timeout_s=settings.SHOPIFY_TIMEOUT_S or None,
        chunk_timeout_s=settings.DB_CHUNK_TIMEOUT_S or None,
    )
