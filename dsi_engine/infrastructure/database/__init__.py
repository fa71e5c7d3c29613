"""
Configuración de base de datos.

Importa todos los modelos para que se registren con Base
antes de crear las tablas.
"""
from dsi_engine.infrastructure.database.models import SchemaDefinitionModel
from dsi_engine.infrastructure.database.session import Base, Database

__all__ = ["Base", "Database", "SchemaDefinitionModel"]
