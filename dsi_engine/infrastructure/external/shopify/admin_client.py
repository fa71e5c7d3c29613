"""
Cliente minimo de la Shopify Admin GraphQL API (httpx, sin SDK).

El pipeline de sync solo depende del protocolo AdminGraphQLClient:
"un callable que ejecuta una query y devuelve una respuesta con status,
body y JSON parseado". httpx.Response cumple ese contrato.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol

import httpx
from loguru import logger


class GraphQLResponse(Protocol):
    """Lo minimo que el fetcher lee de una respuesta."""

    status_code: int

    @property
    def text(self) -> str: ...

    def json(self) -> Any: ...


class AdminGraphQLClient(Protocol):
    async def graphql(
        self, query: str, variables: Optional[dict[str, Any]] = None
    ) -> GraphQLResponse: ...


@dataclass(frozen=True)
class ShopSession:
    """Sesion autenticada de una tienda (tenant)."""

    shop: str
    access_token: str


@dataclass(frozen=True)
class AdminContext:
    """Resultado del handshake de autenticacion: cliente admin + sesion."""

    admin: AdminGraphQLClient
    session: ShopSession


class ShopifyAdminClient:
    """
    Ejecuta queries GraphQL contra https://{shop}/admin/api/{version}/graphql.json.

    No reintenta ni interpreta la respuesta: el status HTTP, el body y los
    errores GraphQL los evalua el llamador.
    """

    def __init__(
        self,
        session: ShopSession,
        *,
        http_client: httpx.AsyncClient,
        api_version: str = "2026-01",
    ) -> None:
        self._session = session
        self._http = http_client
        self._url = f"https://{session.shop}/admin/api/{api_version}/graphql.json"

    async def graphql(
        self, query: str, variables: Optional[dict[str, Any]] = None
    ) -> httpx.Response:
        headers = {
            "X-Shopify-Access-Token": self._session.access_token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        logger.debug(f"Shopify GraphQL POST {self._url}")
        return await self._http.post(self._url, json=payload, headers=headers)


class AdminAuthenticationError(RuntimeError):
    """No hay credenciales offline configuradas para la tienda."""


class OfflineTokenAuthenticator:
    """
    Colaborador de autenticacion basado en un token offline ya emitido.

    El flujo OAuth / embedded-app que emite el token vive fuera de este
    servicio; aqui solo se arma el AdminContext a partir de la configuracion.
    """

    def __init__(
        self,
        *,
        shop: str,
        access_token: str,
        http_client: httpx.AsyncClient,
        api_version: str = "2026-01",
    ) -> None:
        self._shop = shop
        self._access_token = access_token
        self._http = http_client
        self._api_version = api_version

    def is_configured(self) -> bool:
        return bool(self._shop and self._access_token)

    async def authenticate_admin(self) -> AdminContext:
        if not self.is_configured():
            raise AdminAuthenticationError("SHOPIFY_SHOP / SHOPIFY_ACCESS_TOKEN no configurados")

        session = ShopSession(shop=self._shop, access_token=self._access_token)
        admin = ShopifyAdminClient(
            session, http_client=self._http, api_version=self._api_version
        )
        return AdminContext(admin=admin, session=session)
