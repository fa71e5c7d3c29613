"""
Tests del store SQLAlchemy contra SQLite en memoria.

Verifica el contrato de upsert por (shop, owner_type, key), la atomicidad
por chunk y que last_audited solo se fija en la rama UPDATE.
"""
from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from dsi_engine.infrastructure.database.models import SchemaDefinitionModel
from dsi_engine.infrastructure.external.schema_sync.chunked_upserter import ChunkedUpserter
from dsi_engine.infrastructure.external.schema_sync.schema_repository import (
    SqlAlchemySchemaRepository,
    build_upsert_statement,
)
from dsi_engine.infrastructure.external.schema_sync.types import SchemaUpsertCommand, utc_now
from dsi_engine.shared.exceptions.sync import UpsertError

SHOP = "tienda-test.myshopify.com"


def _command(key: str = "seo.title_override", *, name: str = "Title override", shop: str = SHOP,
             owner_type: str = "PRODUCT", type_: str | None = "single_line_text_field",
             description: str | None = None) -> SchemaUpsertCommand:
    return SchemaUpsertCommand(
        shop=shop, owner_type=owner_type, key=key, name=name, type=type_, description=description
    )


async def _count_rows(database) -> int:
    async with database.session_factory() as session:
        result = await session.execute(select(func.count()).select_from(SchemaDefinitionModel))
        return result.scalar_one()


@pytest.mark.asyncio
async def test_first_upsert_creates_row_without_audit_timestamp(database) -> None:
    repo = SqlAlchemySchemaRepository(database.session_factory)

    assert await repo.upsert_chunk([_command(description="SEO")]) == 1

    rows = await repo.list_for_shop(SHOP)
    assert len(rows) == 1
    row = rows[0]
    assert (row.shop, row.owner_type, row.key) == (SHOP, "PRODUCT", "seo.title_override")
    assert row.name == "Title override"
    assert row.type == "single_line_text_field"
    assert row.description == "SEO"
    assert row.last_audited is None


@pytest.mark.asyncio
async def test_second_upsert_updates_instead_of_duplicating(database) -> None:
    repo = SqlAlchemySchemaRepository(database.session_factory)

    await repo.upsert_chunk([_command(name="Nombre viejo", type_=None)])
    await repo.upsert_chunk([_command(name="Nombre nuevo", description="Actualizada")])

    rows = await repo.list_for_shop(SHOP)
    assert len(rows) == 1
    assert rows[0].name == "Nombre nuevo"
    assert rows[0].type == "single_line_text_field"
    assert rows[0].description == "Actualizada"
    assert rows[0].last_audited is not None


@pytest.mark.asyncio
async def test_same_key_in_other_shop_or_owner_type_is_a_different_row(database) -> None:
    repo = SqlAlchemySchemaRepository(database.session_factory)

    await repo.upsert_chunk([
        _command(),
        _command(shop="otra-tienda.myshopify.com"),
        _command(owner_type="COLLECTION"),
    ])

    assert await _count_rows(database) == 3
    assert len(await repo.list_for_shop(SHOP)) == 2
    assert len(await repo.list_for_shop(SHOP, owner_type="COLLECTION")) == 1


@pytest.mark.asyncio
async def test_list_for_shop_is_ordered_by_key(database) -> None:
    repo = SqlAlchemySchemaRepository(database.session_factory)

    await repo.upsert_chunk([_command("seo.title"), _command("custom.material"), _command("custom.care")])

    assert [r.key for r in await repo.list_for_shop(SHOP)] == ["custom.care", "custom.material", "seo.title"]


@pytest.mark.asyncio
async def test_failing_chunk_is_rolled_back_entirely(database) -> None:
    repo = SqlAlchemySchemaRepository(database.session_factory)
    # name NULL viola NOT NULL: falla a mitad del chunk
    chunk = [_command("custom.a"), _command("custom.b"), _command("custom.c", name=None)]

    with pytest.raises(IntegrityError):
        await repo.upsert_chunk(chunk)

    assert await _count_rows(database) == 0


@pytest.mark.asyncio
async def test_partial_failure_keeps_committed_chunks(database) -> None:
    repo = SqlAlchemySchemaRepository(database.session_factory)
    commands = [_command(f"custom.field_{i:02d}") for i in range(12)]
    # Chunk 2 (indices 8..11) contiene un registro invalido
    commands[9] = _command("custom.field_09", name=None)

    with pytest.raises(UpsertError) as exc_info:
        await ChunkedUpserter(repo, chunk_size=4).apply(commands)

    assert exc_info.value.chunk_index == 2
    assert exc_info.value.applied_count == 8
    keys = [r.key for r in await repo.list_for_shop(SHOP)]
    assert keys == [f"custom.field_{i:02d}" for i in range(8)]


@pytest.mark.asyncio
async def test_last_audited_for_shop(database) -> None:
    repo = SqlAlchemySchemaRepository(database.session_factory)

    await repo.upsert_chunk([_command()])
    assert await repo.last_audited_for_shop(SHOP) is None

    await repo.upsert_chunk([_command()])
    assert await repo.last_audited_for_shop(SHOP) is not None


def test_postgres_statement_uses_on_conflict_on_composite_key() -> None:
    from sqlalchemy.dialects import postgresql

    stmt = build_upsert_statement("postgresql", _command(), audited_at=utc_now())
    sql = str(stmt.compile(dialect=postgresql.dialect())).replace('"', "")

    assert "ON CONFLICT (shop, owner_type, key) DO UPDATE" in sql
    assert "last_audited" in sql.split("DO UPDATE", 1)[1]
    assert "last_audited" not in sql.split("ON CONFLICT", 1)[0]


def test_unsupported_dialect_is_rejected() -> None:
    with pytest.raises(ValueError):
        build_upsert_statement("mysql", _command(), audited_at=utc_now())
