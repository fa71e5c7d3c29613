"""
Tipos y utilidades puras para el pipeline de schema.

Se mantienen libres de I/O para poder testearlos fácilmente.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

STATUS_SUCCESS = "success"
STATUS_NO_DEFINITIONS = "no_definitions"


def utc_now() -> datetime:
    """Retorna la hora actual en UTC, como datetime aware."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RawRemoteDefinition:
    """
    Definicion de metafield tal como la devuelve la Admin API.

    Vive solo durante una corrida; nunca se persiste tal cual.
    validation_status se observa pero no se guarda.
    """

    remote_id: str
    namespace: str
    key: str
    name: str
    description: Optional[str] = None
    type_name: Optional[str] = None
    validation_status: Optional[str] = None


@dataclass(frozen=True)
class SchemaUpsertCommand:
    """Fila normalizada lista para upsert por (shop, owner_type, key)."""

    shop: str
    owner_type: str
    key: str
    name: str
    type: Optional[str]
    description: Optional[str]


@dataclass(frozen=True)
class SyncResult:
    """Resultado terminal de una corrida: status + registros aplicados."""

    status: str
    count: int
