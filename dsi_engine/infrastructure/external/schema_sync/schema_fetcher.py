"""
Lectura de metafield definitions desde la Shopify Admin API.

Requisitos cubiertos:
- una sola query por corrida (primera pagina, `first: page_size`)
- owner type parametrizable
- errores HTTP/transporte -> RemoteFetchError (status + body acotado)
- errores GraphQL dentro de un 200 -> RemoteQueryError

Limitacion conocida: no hay continuacion por cursor. Si la API indica
hasNextPage, se deja un warning y se sincroniza solo la primera pagina.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import httpx
from loguru import logger

from dsi_engine.infrastructure.external.shopify.admin_client import (
    AdminGraphQLClient,
    GraphQLResponse,
)
from dsi_engine.shared.exceptions.sync import RemoteFetchError, RemoteQueryError

from .types import RawRemoteDefinition

SCHEMA_QUERY = """
  query getMetafieldDefinitions($first: Int!, $ownerType: MetafieldOwnerType!) {
    metafieldDefinitions(first: $first, ownerType: $ownerType) {
      edges {
        node {
          id
          namespace
          key
          name
          description
          type {
            name
          }
          validationStatus
        }
      }
      pageInfo {
        hasNextPage
      }
    }
  }
"""


def _read_body_text(response: GraphQLResponse) -> str:
    """Body de la respuesta; si no se puede leer, string vacio."""
    try:
        return response.text or ""
    except Exception as e:
        logger.debug(f"No se pudo leer el body de la respuesta remota: {type(e).__name__}")
        return ""


def parse_definition_node(node: dict[str, Any]) -> RawRemoteDefinition:
    """
    Convierte un `node` GraphQL en RawRemoteDefinition.

    namespace, key y name son obligatorios; si faltan preferimos fallar
    temprano y visible.
    """
    missing = [f for f in ("namespace", "key", "name") if not node.get(f)]
    if missing:
        raise RemoteQueryError(
            f"Definicion remota {node.get('id') or '<sin id>'} sin campos requeridos: {', '.join(missing)}"
        )

    type_info = node.get("type") or {}
    return RawRemoteDefinition(
        remote_id=str(node.get("id") or ""),
        namespace=node["namespace"],
        key=node["key"],
        name=node["name"],
        description=node.get("description"),
        type_name=type_info.get("name"),
        validation_status=node.get("validationStatus"),
    )


class RemoteSchemaFetcher:
    """
    Trae las definiciones de un owner type como lista ordenada de
    RawRemoteDefinition (en el orden que devuelve la API).

    No muta estado local.
    """

    def __init__(
        self,
        *,
        owner_type: str = "PRODUCT",
        page_size: int = 250,
        timeout_s: Optional[float] = None,
    ) -> None:
        self._owner_type = owner_type
        self._page_size = page_size
        self._timeout_s = timeout_s

    @property
    def owner_type(self) -> str:
        return self._owner_type

    async def fetch(self, admin: AdminGraphQLClient) -> list[RawRemoteDefinition]:
        variables = {"first": self._page_size, "ownerType": self._owner_type}

        try:
            response = await asyncio.wait_for(
                admin.graphql(SCHEMA_QUERY, variables), timeout=self._timeout_s
            )
        except asyncio.TimeoutError as e:
            raise RemoteFetchError(
                f"Timeout consultando la Admin API ({self._timeout_s}s)"
            ) from e
        except httpx.HTTPError as e:
            raise RemoteFetchError(
                f"Error de transporte con la Admin API: {type(e).__name__}", body=str(e)
            ) from e

        if not 200 <= response.status_code < 300:
            raise RemoteFetchError(
                "Shopify GraphQL error",
                status_code=response.status_code,
                body=_read_body_text(response),
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteFetchError(
                "Respuesta de la Admin API no es JSON valido",
                status_code=response.status_code,
                body=_read_body_text(response),
            ) from e

        if not isinstance(payload, dict):
            raise RemoteFetchError(
                "Respuesta de la Admin API con formato inesperado",
                status_code=response.status_code,
                body=_read_body_text(response),
            )

        errors = payload.get("errors") or []
        if errors:
            raise RemoteQueryError(f"GraphQL errors: {json.dumps(errors)}", errors=errors)

        connection = ((payload.get("data") or {}).get("metafieldDefinitions")) or {}
        edges = connection.get("edges") or []

        if (connection.get("pageInfo") or {}).get("hasNextPage"):
            logger.warning(
                f"La Admin API reporta mas de {self._page_size} definiciones para {self._owner_type}; "
                f"solo se sincroniza la primera pagina"
            )

        if any(not isinstance(edge, dict) for edge in edges):
            raise RemoteQueryError("Respuesta de metafieldDefinitions con edges malformados")

        definitions = [parse_definition_node(edge.get("node") or {}) for edge in edges]
        logger.info(f"Definiciones remotas obtenidas: {len(definitions)} (ownerType={self._owner_type})")
        return definitions
