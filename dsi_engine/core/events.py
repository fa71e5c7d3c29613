"""
Manejadores de eventos de inicio y cierre de la aplicacion.

Aqui se construyen (y se liberan) los recursos compartidos del proceso:
Database y el httpx.AsyncClient usado contra la Admin API. Se guardan en
app.state y llegan a los endpoints por inyeccion de dependencias.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

import httpx
from fastapi import FastAPI
from loguru import logger

from dsi_engine.core.config import settings
from dsi_engine.infrastructure.database.session import Database
from dsi_engine.shared.utils.audit_logger import AuditLogger


def startup_handler(app: FastAPI) -> Callable[[], Awaitable[None]]:
    """
    Manejador de eventos de inicio de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de inicio
    """
    async def startup() -> None:
        """Inicializa recursos al inicio de la aplicacion."""
        try:
            logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
            logger.info(f"Entorno: {settings.ENVIRONMENT}")

            # Validar configuracion critica
            _validate_config()

            # Store local (explicito, sin singleton de modulo)
            app.state.database = Database.from_url(
                settings.effective_database_url,
                debug=settings.DEBUG,
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
            )
            if settings.is_development:
                await app.state.database.create_all()
            logger.info("Base de datos inicializada")

            # Cliente HTTP compartido para la Admin API
            app.state.http_client = httpx.AsyncClient(timeout=settings.SHOPIFY_TIMEOUT_S)

            # Inicializar sistema de auditoria
            AuditLogger.initialize()

            # Configurar logging adicional
            logger.add(
                settings.LOG_FILE,
                rotation="500 MB",
                retention="10 days",
                level=settings.LOG_LEVEL
            )

            logger.success("Aplicacion iniciada correctamente")

        except Exception as e:
            logger.error(f"Error durante startup: {e}")
            logger.exception("Detalle del error:")
            raise

    return startup


def _validate_config() -> None:
    """Valida que la configuracion critica este presente."""
    warnings = []

    if not settings.DSI_MASTER_KEY:
        warnings.append("DSI_MASTER_KEY no configurada - el trigger de sync respondera 403")
    if not settings.SHOPIFY_WEBHOOK_SECRET:
        warnings.append("SHOPIFY_WEBHOOK_SECRET no configurado - todo webhook sera rechazado")
    if not (settings.SHOPIFY_SHOP and settings.SHOPIFY_ACCESS_TOKEN):
        warnings.append("SHOPIFY_SHOP / SHOPIFY_ACCESS_TOKEN no configurados - el sync fallara")

    # Mostrar advertencias
    for warning in warnings:
        logger.warning(f"CONFIG: {warning}")


def shutdown_handler(app: FastAPI) -> Callable[[], Awaitable[None]]:
    """
    Manejador de eventos de cierre de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de cierre
    """
    async def shutdown() -> None:
        """Libera recursos al cerrar la aplicacion."""
        logger.info("Cerrando aplicacion...")

        http_client = getattr(app.state, "http_client", None)
        if http_client is not None:
            await http_client.aclose()
            logger.info("Cliente HTTP cerrado")

        database = getattr(app.state, "database", None)
        if database is not None:
            await database.dispose()
            logger.info("Conexiones de base de datos cerradas")

        logger.success("Aplicacion cerrada correctamente")

    return shutdown


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Ciclo de vida de la app: startup -> requests -> shutdown."""
    await startup_handler(app)()
    try:
        yield
    finally:
        await shutdown_handler(app)()
