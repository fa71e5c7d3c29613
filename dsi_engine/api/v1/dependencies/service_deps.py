"""
Dependencias para inyeccion de servicios del sync y de webhooks.

Los recursos compartidos (Database, httpx.AsyncClient) viven en app.state;
aqui solo se arman los objetos por request. En tests se reemplazan con
app.dependency_overrides.
"""
import httpx
from fastapi import Depends, Request

from dsi_engine.application.use_cases.webhook_use_cases import WebhookHandler
from dsi_engine.core.config import settings
from dsi_engine.infrastructure.database.session import Database, get_database
from dsi_engine.infrastructure.external.schema_sync.schema_repository import (
    SqlAlchemySchemaRepository,
)
from dsi_engine.infrastructure.external.schema_sync.sync_config import sync_config_from_settings
from dsi_engine.infrastructure.external.schema_sync.sync_service import (
    SchemaSyncOrchestrator,
    build_orchestrator,
)
from dsi_engine.infrastructure.external.shopify.admin_client import OfflineTokenAuthenticator


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_admin_authenticator(
    http_client: httpx.AsyncClient = Depends(get_http_client)
) -> OfflineTokenAuthenticator:
    """
    Dependencia para obtener el colaborador de autenticacion admin.

    Returns:
        OfflineTokenAuthenticator: arma el AdminContext desde la sesion offline
    """
    return OfflineTokenAuthenticator(
        shop=settings.SHOPIFY_SHOP,
        access_token=settings.SHOPIFY_ACCESS_TOKEN,
        http_client=http_client,
        api_version=settings.SHOPIFY_API_VERSION,
    )


def get_schema_repository(
    database: Database = Depends(get_database)
) -> SqlAlchemySchemaRepository:
    return SqlAlchemySchemaRepository(database.session_factory)


def get_schema_sync_service(
    repository: SqlAlchemySchemaRepository = Depends(get_schema_repository)
) -> SchemaSyncOrchestrator:
    """
    Dependencia para obtener el orquestador del sync.

    Args:
        repository: Store local de definiciones

    Returns:
        SchemaSyncOrchestrator: pipeline listo para una corrida
    """
    return build_orchestrator(repository, config=sync_config_from_settings(settings))


def get_webhook_handler() -> WebhookHandler:
    return WebhookHandler(settings.SHOPIFY_WEBHOOK_SECRET)
