"""
DTOs relacionados con el sync de schema.
Definen la estructura de datos que reciben el panel admin y el CLI.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from dsi_engine.infrastructure.external.schema_sync.normalizer import split_composite_key
from dsi_engine.infrastructure.external.schema_sync.types import (
    STATUS_NO_DEFINITIONS,
    SyncResult,
)


class SchemaSyncResponseDTO(BaseModel):
    """Resultado de una corrida de sync (espejo de SyncResult)."""
    status: str = Field(..., description="success | no_definitions")
    message: Optional[str] = Field(None, description="Mensaje legible para el panel")
    count: int = Field(..., description="Registros aplicados")

    @classmethod
    def from_result(cls, result: SyncResult) -> "SchemaSyncResponseDTO":
        if result.status == STATUS_NO_DEFINITIONS:
            message = "No se encontraron definiciones de metafields en la tienda"
        else:
            message = f"Sincronizacion completada: {result.count} definicion(es) aplicada(s)"
        return cls(status=result.status, message=message, count=result.count)


class SchemaDefinitionDTO(BaseModel):
    """
    Fila local de schema_definitions.

    namespace / local_key salen de partir la clave compuesta en el primer
    "."; son solo para mostrar.
    """
    key: str
    namespace: str
    local_key: str
    owner_type: str
    name: str
    type: Optional[str] = None
    description: Optional[str] = None
    last_audited: Optional[datetime] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_model(cls, model) -> "SchemaDefinitionDTO":
        namespace, local_key = split_composite_key(model.key)
        return cls(
            key=model.key,
            namespace=namespace,
            local_key=local_key,
            owner_type=model.owner_type,
            name=model.name,
            type=model.type,
            description=model.description,
            last_audited=model.last_audited,
        )


class SchemaListResponseDTO(BaseModel):
    """Listado de definiciones locales de una tienda."""
    shop: str
    count: int
    last_audited: Optional[datetime] = None
    definitions: List[SchemaDefinitionDTO] = Field(default_factory=list)
