"""
Store local de definiciones (SQLAlchemy async).

Contrato que usa el pipeline: upsert atomico por (shop, owner_type, key)
de un lote de comandos dentro de UNA transaccion. El resto del modulo
son lecturas para el endpoint de listado y el CLI.

El UPSERT usa INSERT ... ON CONFLICT DO UPDATE del dialecto
(PostgreSQL en produccion, SQLite en tests).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dsi_engine.infrastructure.database.models import SchemaDefinitionModel

from .types import SchemaUpsertCommand, utc_now

_CONFLICT_COLUMNS = ["shop", "owner_type", "key"]


class SchemaDefinitionStore(Protocol):
    async def upsert_chunk(self, commands: Sequence[SchemaUpsertCommand]) -> int:
        """Aplica todos los comandos en una transaccion. Retorna cuantos aplico."""
        ...


def _insert_for_dialect(dialect_name: str):
    if dialect_name == "postgresql":
        return postgresql.insert
    if dialect_name == "sqlite":
        return sqlite.insert
    raise ValueError(f"Dialecto sin soporte de upsert: {dialect_name}")


def build_upsert_statement(dialect_name: str, command: SchemaUpsertCommand, *, audited_at: datetime):
    """
    INSERT sin last_audited; en conflicto actualiza name/type/description
    y refresca last_audited.
    """
    insert = _insert_for_dialect(dialect_name)
    stmt = insert(SchemaDefinitionModel).values(
        shop=command.shop,
        owner_type=command.owner_type,
        key=command.key,
        name=command.name,
        type=command.type,
        description=command.description,
    )
    return stmt.on_conflict_do_update(
        index_elements=_CONFLICT_COLUMNS,
        set_={
            "name": stmt.excluded["name"],
            "type": stmt.excluded["type"],
            "description": stmt.excluded["description"],
            "last_audited": audited_at,
        },
    )


class SqlAlchemySchemaRepository:
    """Implementacion de SchemaDefinitionStore sobre un async_sessionmaker."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def upsert_chunk(self, commands: Sequence[SchemaUpsertCommand]) -> int:
        if not commands:
            return 0

        audited_at = utc_now()
        # begin(): commit al salir, rollback si algo falla dentro del bloque
        async with self._session_factory.begin() as session:
            dialect_name = session.get_bind().dialect.name
            for command in commands:
                await session.execute(
                    build_upsert_statement(dialect_name, command, audited_at=audited_at)
                )
        return len(commands)

    async def list_for_shop(
        self, shop: str, *, owner_type: Optional[str] = None
    ) -> list[SchemaDefinitionModel]:
        """Filas locales de una tienda ordenadas por key."""
        query = select(SchemaDefinitionModel).where(SchemaDefinitionModel.shop == shop)
        if owner_type:
            query = query.where(SchemaDefinitionModel.owner_type == owner_type)
        query = query.order_by(SchemaDefinitionModel.key.asc())

        async with self._session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def last_audited_for_shop(self, shop: str) -> Optional[datetime]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.max(SchemaDefinitionModel.last_audited)).where(
                    SchemaDefinitionModel.shop == shop
                )
            )
            return result.scalar_one_or_none()
