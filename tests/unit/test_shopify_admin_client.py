"""
Tests del cliente minimo de la Admin API y del autenticador por token offline.

Se usa httpx.MockTransport: no hay red real.
"""
import json

import httpx
import pytest

from dsi_engine.infrastructure.external.shopify.admin_client import (
    AdminAuthenticationError,
    OfflineTokenAuthenticator,
    ShopifyAdminClient,
    ShopSession,
)


def _recording_client(captured: list) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"data": {}})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_graphql_posts_to_admin_endpoint_with_token() -> None:
    captured: list = []
    async with _recording_client(captured) as http_client:
        client = ShopifyAdminClient(
            ShopSession(shop="tienda.myshopify.com", access_token="shpat_abc"),
            http_client=http_client,
            api_version="2026-01",
        )
        response = await client.graphql("query { shop { name } }", {"first": 10})

    assert response.status_code == 200
    request = captured[0]
    assert request.method == "POST"
    assert str(request.url) == "https://tienda.myshopify.com/admin/api/2026-01/graphql.json"
    assert request.headers["X-Shopify-Access-Token"] == "shpat_abc"
    body = json.loads(request.content)
    assert body == {"query": "query { shop { name } }", "variables": {"first": 10}}


@pytest.mark.asyncio
async def test_authenticator_builds_context_for_configured_shop() -> None:
    captured: list = []
    async with _recording_client(captured) as http_client:
        authenticator = OfflineTokenAuthenticator(
            shop="tienda.myshopify.com",
            access_token="shpat_abc",
            http_client=http_client,
        )
        context = await authenticator.authenticate_admin()
        await context.admin.graphql("query { shop { name } }")

    assert context.session.shop == "tienda.myshopify.com"
    assert "variables" not in json.loads(captured[0].content)


@pytest.mark.asyncio
@pytest.mark.parametrize("shop,token", [("", "shpat_abc"), ("tienda.myshopify.com", "")])
async def test_authenticator_without_credentials_fails(shop: str, token: str) -> None:
    async with httpx.AsyncClient() as http_client:
        authenticator = OfflineTokenAuthenticator(shop=shop, access_token=token, http_client=http_client)

        assert authenticator.is_configured() is False
        with pytest.raises(AdminAuthenticationError):
            await authenticator.authenticate_admin()
