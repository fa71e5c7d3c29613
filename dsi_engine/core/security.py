"""
Utilidades de seguridad: autorizacion del trigger de sync por llave maestra.
"""
import hmac
from typing import Optional

from fastapi import Header
from loguru import logger

from dsi_engine.core.config import settings
from dsi_engine.shared.exceptions.auth import AuthorizationError

BEARER_PREFIX = "Bearer "


class MasterKeyAuthService:
    """
    Verifica el header Authorization: Bearer <DSI_MASTER_KEY>.

    Usa comparación en tiempo constante (hmac.compare_digest) para reducir leaks
    por timing. Sin llave configurada, ninguna credencial es valida.
    """

    def __init__(self, master_key: str) -> None:
        self._master_key = master_key or ""

    def is_configured(self) -> bool:
        return bool(self._master_key)

    def verify_authorization_header(self, authorization: Optional[str]) -> bool:
        if not self.is_configured() or not authorization:
            return False
        if not authorization.startswith(BEARER_PREFIX):
            return False

        token = authorization[len(BEARER_PREFIX):]
        return hmac.compare_digest(token.encode("utf-8"), self._master_key.encode("utf-8"))


async def require_master_key(authorization: Optional[str] = Header(default=None)) -> None:
    """
    Dependencia FastAPI para endpoints administrativos.

    Raises:
        AuthorizationError: credencial ausente o distinta (403)
    """
    if not MasterKeyAuthService(settings.DSI_MASTER_KEY).verify_authorization_header(authorization):
        # Nunca registrar el valor de la credencial
        logger.warning("Llamada administrativa rechazada: credencial ausente o invalida")
        raise AuthorizationError()
