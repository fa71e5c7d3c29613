"""
Configuración de fixtures para pytest.
"""
from typing import Any, AsyncGenerator, Optional

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from dsi_engine.infrastructure.database.session import Database
from dsi_engine.infrastructure.external.shopify.admin_client import AdminContext, ShopSession


# URL de base de datos de prueba
TEST_DATABASE_URL = "sqlite+aiosqlite://"

TEST_SHOP = "tienda-test.myshopify.com"


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Database, None]:
    """
    Database en memoria para cada test.

    StaticPool: todas las sesiones comparten la misma conexion, si no cada
    sesion veria una base :memory: distinta.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    db = Database(engine)
    await db.create_all()

    yield db

    await db.dispose()


def make_node(namespace: str, key: str, *, name: Optional[str] = None, type_name: Optional[str] = "single_line_text_field",
              description: Optional[str] = None, remote_id: Optional[str] = None) -> dict[str, Any]:
    """Nodo GraphQL de metafieldDefinitions."""
    return {
        "id": remote_id or f"gid://shopify/MetafieldDefinition/{namespace}-{key}",
        "namespace": namespace,
        "key": key,
        "name": name or f"{namespace} {key}",
        "description": description,
        "type": {"name": type_name} if type_name else None,
        "validationStatus": "ALL_VALID",
    }


def make_payload(nodes: list[dict[str, Any]], *, has_next_page: bool = False) -> dict[str, Any]:
    return {
        "data": {
            "metafieldDefinitions": {
                "edges": [{"node": node} for node in nodes],
                "pageInfo": {"hasNextPage": has_next_page},
            }
        }
    }


class FakeAdminClient:
    """AdminGraphQLClient que devuelve respuestas preparadas y registra llamadas."""

    def __init__(self, response: Optional[httpx.Response] = None, *, error: Optional[BaseException] = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple[str, Optional[dict[str, Any]]]] = []

    async def graphql(self, query: str, variables: Optional[dict[str, Any]] = None) -> httpx.Response:
        self.calls.append((query, variables))
        if self.error is not None:
            raise self.error
        return self.response


def admin_context_for(payload: Any = None, *, status_code: int = 200, error: Optional[BaseException] = None,
                      shop: str = TEST_SHOP) -> AdminContext:
    response = httpx.Response(status_code, json=payload) if error is None else None
    return AdminContext(
        admin=FakeAdminClient(response, error=error),
        session=ShopSession(shop=shop, access_token="shpat_test"),
    )


@pytest.fixture
def shop() -> str:
    return TEST_SHOP
