"""
DTOs de la API.
"""
from dsi_engine.application.dto.schema_dto import (
    SchemaDefinitionDTO,
    SchemaListResponseDTO,
    SchemaSyncResponseDTO,
)

__all__ = ["SchemaDefinitionDTO", "SchemaListResponseDTO", "SchemaSyncResponseDTO"]
