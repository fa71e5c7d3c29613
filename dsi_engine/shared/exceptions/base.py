"""
Excepcion base para los errores que cruzan la frontera HTTP.
"""
from typing import Optional, Dict, Any


class AppException(Exception):
    """
    Excepcion base de la aplicacion.

    El manejador global de main.py la serializa como
    {"error": error_code, "message": message, "details": details}, por lo que
    nunca debe llevar texto interno (trazas, errores de la base, digests).
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_response_body(self) -> Dict[str, Any]:
        """Cuerpo JSON que se entrega al cliente."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details
        }
