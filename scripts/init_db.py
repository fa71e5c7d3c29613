"""
Script para inicializar la base de datos (sin migraciones).
Para entornos gestionados usar `alembic upgrade head`.
"""
import asyncio
import sys
from pathlib import Path

from loguru import logger

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from dsi_engine.core.config import settings
from dsi_engine.infrastructure.database.session import Database


async def main():
    """Crea las tablas registradas en los modelos."""
    logger.info("Inicializando base de datos...")

    database = Database.from_url(settings.effective_database_url, debug=settings.DEBUG)
    try:
        await database.create_all()
        logger.success("Base de datos inicializada correctamente")
    except Exception as e:
        logger.error(f"Error al inicializar base de datos: {e}")
        raise
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
