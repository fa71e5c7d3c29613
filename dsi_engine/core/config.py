"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales.

Las credenciales de Shopify, el secreto de webhooks y la llave maestra del
trigger de sync se leen de variables de entorno (o de un archivo .env).
Los parametros del pipeline (owner type, page size, chunk size, timeouts)
tambien son configurables para no asumir valores fijos en el codigo.
"""
import json
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, computed_field


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.

    - DATABASE_URL se puede especificar completa o por componentes
    - DSI_MASTER_KEY vacio deshabilita el trigger de sync (todo es 403)
    - SHOPIFY_WEBHOOK_SECRET vacio hace que todo webhook sea rechazado
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="OmniGraph DSI Engine")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)

    # Base de datos - Componentes separados
    DATABASE_HOST: str = Field(default="localhost")
    DATABASE_PORT: int = Field(default=5432)
    DATABASE_USER: str = Field(default="dsi_user")
    DATABASE_PASSWORD: str = Field(default="dsi_pass")
    DATABASE_NAME: str = Field(default="dsi_db")

    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="")
    DB_POOL_SIZE: int = Field(default=5)
    DB_MAX_OVERFLOW: int = Field(default=10)
    DB_CHUNK_TIMEOUT_S: float = Field(default=30.0)

    # Seguridad
    DSI_MASTER_KEY: str = Field(default="")
    SHOPIFY_WEBHOOK_SECRET: str = Field(default="")

    # CORS (acepta lista JSON o "*" para todos los origenes)
    CORS_ORIGINS: str = Field(default="*")

    # Shopify Admin API
    # Sesion offline: tienda y token de acceso ya emitidos por el flujo OAuth
    SHOPIFY_SHOP: str = Field(default="")
    SHOPIFY_ACCESS_TOKEN: str = Field(default="")
    SHOPIFY_API_VERSION: str = Field(default="2026-01")
    SHOPIFY_TIMEOUT_S: float = Field(default=30.0)

    # Pipeline de sincronizacion de schema
    SCHEMA_OWNER_TYPE: str = Field(default="PRODUCT")
    SCHEMA_PAGE_SIZE: int = Field(default=250)
    SCHEMA_CHUNK_SIZE: int = Field(default=50)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente.
        Si no, construye la URL desde los componentes individuales.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    @computed_field
    @property
    def is_development(self) -> bool:
        """Indica si el entorno es de desarrollo."""
        return self.ENVIRONMENT.lower() == "development"

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


def get_cors_origins(cors_string: str) -> List[str]:
    """
    Parsea la configuracion de CORS.
    Acepta "*" para todos los origenes o una lista JSON.
    """
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        # Si no es JSON valido, retornar como lista simple
        return [origin.strip() for origin in cors_string.split(",")]


# Instancia global de configuracion
settings = Settings()
