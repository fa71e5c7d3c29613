"""
Endpoints administrativos del schema de metafields.
Permiten disparar el sync desde el panel admin y consultar el espejo local.
Protegidos con la llave maestra (Authorization: Bearer <DSI_MASTER_KEY>).
"""
import time
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from loguru import logger

from dsi_engine.application.dto.schema_dto import (
    SchemaDefinitionDTO,
    SchemaListResponseDTO,
    SchemaSyncResponseDTO,
)
from dsi_engine.api.v1.dependencies.service_deps import (
    get_admin_authenticator,
    get_schema_repository,
    get_schema_sync_service,
)
from dsi_engine.core.config import settings
from dsi_engine.core.security import require_master_key
from dsi_engine.infrastructure.external.schema_sync.schema_repository import (
    SqlAlchemySchemaRepository,
)
from dsi_engine.infrastructure.external.schema_sync.sync_service import SchemaSyncOrchestrator
from dsi_engine.infrastructure.external.shopify.admin_client import OfflineTokenAuthenticator
from dsi_engine.shared.exceptions.sync import SchemaSyncError, UpsertError
from dsi_engine.shared.utils.audit_logger import AuditLogger


router = APIRouter(
    prefix="/admin",
    tags=["Schema"],
    dependencies=[Depends(require_master_key)],
)


def _sync_failed_response() -> JSONResponse:
    """Respuesta generica: ningun detalle interno cruza la frontera HTTP."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "SYNC_FAILED", "message": "sync failed"},
    )


@router.post(
    "/sync-schema",
    response_model=SchemaSyncResponseDTO,
    status_code=status.HTTP_200_OK,
    summary="Sincronizar metafield definitions de Shopify"
)
async def sync_schema(
    authenticator: OfflineTokenAuthenticator = Depends(get_admin_authenticator),
    service: SchemaSyncOrchestrator = Depends(get_schema_sync_service),
):
    """
    Ejecuta una corrida de sync de schema.

    - Consulta la primera pagina de definiciones del owner type configurado
    - Aplica upserts en chunks transaccionales
    - Sin reintentos: un fallo deja confirmados los chunks previos

    Returns:
        SchemaSyncResponseDTO con status y registros aplicados
    """
    shop = settings.SHOPIFY_SHOP or "<sin tienda>"
    started = time.monotonic()
    try:
        context = await authenticator.authenticate_admin()
        shop = context.session.shop
        result = await service.run(context)
    except UpsertError as e:
        logger.error(f"Sync de schema fallo en el chunk {e.chunk_index} para {shop}: {e}")
        AuditLogger.log_sync_failure(shop, type(e).__name__, applied_count=e.applied_count)
        return _sync_failed_response()
    except SchemaSyncError as e:
        logger.error(f"Sync de schema fallo para {shop}: {e}")
        AuditLogger.log_sync_failure(shop, type(e).__name__)
        return _sync_failed_response()
    except Exception as e:
        logger.exception(f"Error inesperado en sync de schema para {shop}: {type(e).__name__}")
        AuditLogger.log_sync_failure(shop, type(e).__name__)
        return _sync_failed_response()

    AuditLogger.log_sync_run(shop, result.status, result.count, time.monotonic() - started)
    return SchemaSyncResponseDTO.from_result(result)


@router.get(
    "/schema",
    response_model=SchemaListResponseDTO,
    summary="Listar definiciones locales de una tienda"
)
async def list_schema(
    shop: Optional[str] = Query(default=None, description="Dominio de la tienda; por defecto SHOPIFY_SHOP"),
    owner_type: Optional[str] = Query(default=None, description="Filtrar por owner type"),
    repository: SqlAlchemySchemaRepository = Depends(get_schema_repository),
) -> SchemaListResponseDTO:
    """
    Retorna las filas locales ordenadas por key, con la fecha de la
    ultima auditoria de la tienda.
    """
    target_shop = shop or settings.SHOPIFY_SHOP
    rows = await repository.list_for_shop(target_shop, owner_type=owner_type)
    last_audited = await repository.last_audited_for_shop(target_shop)
    return SchemaListResponseDTO(
        shop=target_shop,
        count=len(rows),
        last_audited=last_audited,
        definitions=[SchemaDefinitionDTO.from_model(row) for row in rows],
    )
