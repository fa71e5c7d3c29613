"""
Servicio de sincronización Shopify (metafield definitions) -> store local.

Diseño (resumen):
- Consulta la Admin API (una página, owner type configurable)
- Si no hay definiciones: retorna no_definitions sin tocar el store
- Normaliza cada definición a un comando de upsert (clave compuesta)
- UPSERT por (shop, owner_type, key) en chunks transaccionales

Todas las etapas corren en secuencia dentro de la tarea del llamador.
Los errores de cada etapa se propagan sin cambios (fail-fast): la
traducción a respuestas HTTP es responsabilidad del endpoint.
"""

from __future__ import annotations

from loguru import logger

from dsi_engine.infrastructure.external.shopify.admin_client import AdminContext

from .chunked_upserter import ChunkedUpserter
from .normalizer import normalize_definition
from .schema_fetcher import RemoteSchemaFetcher
from .schema_repository import SchemaDefinitionStore
from .sync_config import SchemaSyncConfig
from .types import STATUS_NO_DEFINITIONS, STATUS_SUCCESS, SyncResult


class SchemaSyncOrchestrator:
    """
    Orquestador del pipeline: Fetcher -> Normalizer -> Upserter.
    """

    def __init__(
        self,
        *,
        fetcher: RemoteSchemaFetcher,
        upserter: ChunkedUpserter,
    ) -> None:
        self._fetcher = fetcher
        self._upserter = upserter

    async def run(self, context: AdminContext) -> SyncResult:
        """
        Ejecuta una corrida completa para la tienda del contexto.

        Raises:
            RemoteFetchError / RemoteQueryError: fallo al consultar la API
            UpsertError: fallo al confirmar un chunk (los anteriores quedan)
        """
        shop = context.session.shop
        owner_type = self._fetcher.owner_type
        logger.info(f"Sync de schema: tienda={shop} ownerType={owner_type}")

        definitions = await self._fetcher.fetch(context.admin)
        if not definitions:
            logger.info(f"Sin definiciones remotas para {shop}; no se toca el store")
            return SyncResult(status=STATUS_NO_DEFINITIONS, count=0)

        commands = [
            normalize_definition(definition, shop=shop, owner_type=owner_type)
            for definition in definitions
        ]
        applied = await self._upserter.apply(commands)

        logger.info(f"Sync completado para {shop}: upserts={applied}")
        return SyncResult(status=STATUS_SUCCESS, count=applied)


def build_orchestrator(
    store: SchemaDefinitionStore,
    *,
    config: SchemaSyncConfig,
) -> SchemaSyncOrchestrator:
    """
    Constructor del pipeline a partir de un store ya construido y la config.
    """
    fetcher = RemoteSchemaFetcher(
        owner_type=config.owner_type,
        page_size=config.page_size,
        timeout_s=config.fetch_timeout_s,
    )
    upserter = ChunkedUpserter(
        store,
        chunk_size=config.chunk_size,
        chunk_timeout_s=config.chunk_timeout_s,
    )
    return SchemaSyncOrchestrator(fetcher=fetcher, upserter=upserter)
