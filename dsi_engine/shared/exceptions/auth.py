"""
Excepciones relacionadas con autenticacion y autorizacion.
"""
from dsi_engine.shared.exceptions.base import AppException


class AuthorizationError(AppException):
    """
    Trigger de sync invocado sin la llave maestra valida.

    El mensaje es fijo: nunca incluye la credencial recibida.
    """

    def __init__(self, message: str = "Forbidden"):
        super().__init__(
            message=message,
            status_code=403,
            error_code="FORBIDDEN"
        )
