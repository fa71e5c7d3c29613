"""
Gestion de engine y sesiones de base de datos.

No existe un engine global: la aplicacion (o el script CLI) construye un
Database explicito y es dueno de su ciclo de vida (startup -> dispose).
"""
from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker
)
from sqlalchemy.orm import declarative_base


# Base para modelos de SQLAlchemy
Base = declarative_base()


def _create_engine_args(database_url: str, *, debug: bool, pool_size: int, max_overflow: int) -> dict:
    """
    Construye los argumentos del engine segun el tipo de base de datos.
    PostgreSQL usa pool de conexiones, SQLite no lo soporta.
    """
    args = {
        "echo": debug,
        "future": True,
    }

    # Configuracion de pool solo para PostgreSQL
    if "postgresql" in database_url:
        args.update({
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_pre_ping": True,  # Verifica conexion antes de usar
        })

    return args


class Database:
    """
    Engine + session factory del store local.

    Se construye una vez en el entry point y se inyecta a repositorios
    y servicios.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False
        )

    @classmethod
    def from_url(
        cls,
        database_url: str,
        *,
        debug: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
    ) -> "Database":
        engine = create_async_engine(
            database_url,
            **_create_engine_args(
                database_url, debug=debug, pool_size=pool_size, max_overflow=max_overflow
            )
        )
        return cls(engine)

    async def create_all(self) -> None:
        """Crea todas las tablas registradas en Base (desarrollo / tests)."""
        # Registrar modelos en Base.metadata
        from dsi_engine.infrastructure.database import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Cierra las conexiones de la base de datos."""
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """Dependencia FastAPI: Database creado en el startup de la app."""
    return request.app.state.database

