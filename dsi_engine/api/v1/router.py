"""
Router principal de la API.
Agrupa los endpoints administrativos y el receptor de webhooks.

Las rutas conservan los paths que ya consumen el panel admin y Shopify
(/admin/..., /webhook/...), por eso no llevan prefijo de version.
"""
from fastapi import APIRouter

from dsi_engine.api.v1.endpoints import schema_sync, webhooks


api_router = APIRouter()

# Incluir routers de endpoints especificos
api_router.include_router(schema_sync.router)
api_router.include_router(webhooks.router)
