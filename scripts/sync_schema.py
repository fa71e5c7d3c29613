"""
CLI: Shopify metafield definitions -> store local (una corrida).

Uso recomendado:
  - Ejecutar como job (cron/systemd timer) o a mano para diagnostico.
  - Mismo pipeline que POST /admin/sync-schema, sin pasar por HTTP.

Variables de entorno requeridas:
  - SHOPIFY_SHOP
  - SHOPIFY_ACCESS_TOKEN
  - DATABASE_URL (o DATABASE_HOST/PORT/USER/PASSWORD/NAME)

Ejecución:
  python scripts/sync_schema.py
  python scripts/sync_schema.py --list
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import httpx
from dotenv import load_dotenv
from loguru import logger

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

load_dotenv(_ROOT / ".env", override=False)

from dsi_engine.core.config import settings
from dsi_engine.infrastructure.database.session import Database
from dsi_engine.infrastructure.external.schema_sync.normalizer import split_composite_key
from dsi_engine.infrastructure.external.schema_sync.schema_repository import SqlAlchemySchemaRepository
from dsi_engine.infrastructure.external.schema_sync.sync_config import sync_config_from_settings
from dsi_engine.infrastructure.external.schema_sync.sync_service import build_orchestrator
from dsi_engine.infrastructure.external.shopify.admin_client import (
    AdminAuthenticationError,
    OfflineTokenAuthenticator,
)
from dsi_engine.shared.exceptions.sync import SchemaSyncError


async def _run_sync(database: Database) -> int:
    repository = SqlAlchemySchemaRepository(database.session_factory)
    service = build_orchestrator(repository, config=sync_config_from_settings(settings))

    async with httpx.AsyncClient(timeout=settings.SHOPIFY_TIMEOUT_S) as http_client:
        authenticator = OfflineTokenAuthenticator(
            shop=settings.SHOPIFY_SHOP,
            access_token=settings.SHOPIFY_ACCESS_TOKEN,
            http_client=http_client,
            api_version=settings.SHOPIFY_API_VERSION,
        )
        logger.info("Iniciando sync de schema Shopify -> store local...")
        try:
            context = await authenticator.authenticate_admin()
            result = await service.run(context)
        except (AdminAuthenticationError, SchemaSyncError) as e:
            logger.error(f"Sync fallido: {e}")
            return 1

    logger.info(f"Sync OK: status={result.status}, count={result.count}")
    return 0


async def _list_schema(database: Database) -> int:
    repository = SqlAlchemySchemaRepository(database.session_factory)
    rows = await repository.list_for_shop(settings.SHOPIFY_SHOP)
    for row in rows:
        namespace, local_key = split_composite_key(row.key)
        print(f"{namespace:<24} {local_key:<32} {row.type or '-':<28} {row.name}")
    logger.info(f"{len(rows)} definicion(es) locales para {settings.SHOPIFY_SHOP}")
    return 0


async def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--list",
        action="store_true",
        help="Solo lista las definiciones locales de SHOPIFY_SHOP (no ejecuta sync).",
    )
    args = parser.parse_args()

    database = Database.from_url(settings.effective_database_url, debug=settings.DEBUG)
    try:
        if args.list:
            return await _list_schema(database)
        return await _run_sync(database)
    finally:
        await database.dispose()


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
