"""
Tests para SchemaSyncOrchestrator.

- unitarios con un store falso (particion, short-circuit, propagacion)
- integracion con SQLite en memoria (idempotencia entre corridas)
"""
from __future__ import annotations

from typing import Sequence
from unittest.mock import AsyncMock

import httpx
import pytest

from conftest import TEST_SHOP, admin_context_for, make_node, make_payload
from dsi_engine.infrastructure.external.schema_sync.schema_repository import SqlAlchemySchemaRepository
from dsi_engine.infrastructure.external.schema_sync.sync_config import SchemaSyncConfig
from dsi_engine.infrastructure.external.schema_sync.sync_service import build_orchestrator
from dsi_engine.infrastructure.external.schema_sync.types import SchemaUpsertCommand, SyncResult
from dsi_engine.shared.exceptions.sync import RemoteFetchError, RemoteQueryError, UpsertError


class RecordingStore:
    def __init__(self) -> None:
        self.transactions: list[list[SchemaUpsertCommand]] = []

    async def upsert_chunk(self, commands: Sequence[SchemaUpsertCommand]) -> int:
        self.transactions.append(list(commands))
        return len(commands)


def _nodes(n: int) -> list[dict]:
    return [make_node("custom", f"field_{i:03d}") for i in range(n)]


class TestSchemaSyncOrchestrator:

    @pytest.mark.asyncio
    async def test_end_to_end_120_records(self) -> None:
        store = RecordingStore()
        service = build_orchestrator(store, config=SchemaSyncConfig(chunk_size=50))

        result = await service.run(admin_context_for(make_payload(_nodes(120))))

        assert result == SyncResult(status="success", count=120)
        assert [len(t) for t in store.transactions] == [50, 50, 20]
        keys = [cmd.key for t in store.transactions for cmd in t]
        assert keys == [f"custom.field_{i:03d}" for i in range(120)]
        assert all(cmd.shop == TEST_SHOP and cmd.owner_type == "PRODUCT" for t in store.transactions for cmd in t)

    @pytest.mark.asyncio
    async def test_empty_remote_result_short_circuits(self) -> None:
        store = AsyncMock()
        service = build_orchestrator(store, config=SchemaSyncConfig())

        result = await service.run(admin_context_for(make_payload([])))

        assert result == SyncResult(status="no_definitions", count=0)
        store.upsert_chunk.assert_not_called()

    @pytest.mark.asyncio
    async def test_configured_owner_type_reaches_query_and_rows(self) -> None:
        store = RecordingStore()
        service = build_orchestrator(store, config=SchemaSyncConfig(owner_type="COLLECTION", page_size=100))
        context = admin_context_for(make_payload(_nodes(2)))

        await service.run(context)

        assert context.admin.calls[0][1] == {"first": 100, "ownerType": "COLLECTION"}
        assert {cmd.owner_type for cmd in store.transactions[0]} == {"COLLECTION"}

    @pytest.mark.asyncio
    async def test_fetch_error_propagates_without_store_access(self) -> None:
        store = AsyncMock()
        service = build_orchestrator(store, config=SchemaSyncConfig())

        with pytest.raises(RemoteFetchError):
            await service.run(admin_context_for(error=httpx.ReadTimeout("timeout")))

        store.upsert_chunk.assert_not_called()

    @pytest.mark.asyncio
    async def test_query_error_propagates(self) -> None:
        service = build_orchestrator(RecordingStore(), config=SchemaSyncConfig())
        payload = {"errors": [{"message": "Throttled"}]}

        with pytest.raises(RemoteQueryError):
            await service.run(admin_context_for(payload))

    @pytest.mark.asyncio
    async def test_upsert_error_propagates_unchanged(self) -> None:
        store = AsyncMock()
        store.upsert_chunk.side_effect = [50, RuntimeError("store caido")]
        service = build_orchestrator(store, config=SchemaSyncConfig(chunk_size=50))

        with pytest.raises(UpsertError) as exc_info:
            await service.run(admin_context_for(make_payload(_nodes(120))))

        assert exc_info.value.chunk_index == 1
        assert exc_info.value.applied_count == 50
        assert store.upsert_chunk.await_count == 2


@pytest.mark.asyncio
async def test_running_twice_is_idempotent(database) -> None:
    repo = SqlAlchemySchemaRepository(database.session_factory)
    service = build_orchestrator(repo, config=SchemaSyncConfig(chunk_size=50))
    nodes = [
        make_node("seo", "title_override", name="Title override", description="SEO"),
        make_node("custom", "material", name="Material", type_name=None),
    ] + _nodes(60)

    first = await service.run(admin_context_for(make_payload(nodes)))
    after_first = {
        r.key: (r.name, r.type, r.description, r.last_audited)
        for r in await repo.list_for_shop(TEST_SHOP)
    }

    second = await service.run(admin_context_for(make_payload(nodes)))
    after_second = {
        r.key: (r.name, r.type, r.description, r.last_audited)
        for r in await repo.list_for_shop(TEST_SHOP)
    }

    assert first == second == SyncResult(status="success", count=62)
    assert after_first.keys() == after_second.keys()
    assert len(after_second) == 62
    for key in after_first:
        assert after_first[key][:3] == after_second[key][:3]
        assert after_first[key][3] is None
        assert after_second[key][3] is not None
    assert after_second["custom.material"][1] is None


@pytest.mark.asyncio
async def test_duplicate_key_in_same_run_updates_the_row(database) -> None:
    repo = SqlAlchemySchemaRepository(database.session_factory)
    service = build_orchestrator(repo, config=SchemaSyncConfig())
    nodes = [
        make_node("seo", "title_override", name="Primera", remote_id="gid://1"),
        make_node("seo", "title_override", name="Segunda", remote_id="gid://2"),
    ]

    result = await service.run(admin_context_for(make_payload(nodes)))

    rows = await repo.list_for_shop(TEST_SHOP)
    assert result.count == 2
    assert len(rows) == 1
    assert rows[0].key == "seo.title_override"
    assert rows[0].name == "Segunda"
