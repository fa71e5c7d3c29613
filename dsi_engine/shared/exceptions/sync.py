"""
Taxonomia de errores del pipeline de sincronizacion de schema.

Estos errores NO heredan de AppException: se propagan sin cambios hasta el
borde del orquestador y es el endpoint quien los traduce a una respuesta
generica (sin detalle interno).
"""
from __future__ import annotations

from typing import Any, Optional

# Limite del cuerpo de respuesta remoto que se guarda en el error
MAX_ERROR_BODY_CHARS = 2000


class SchemaSyncError(RuntimeError):
    """Error base del pipeline de sync."""


class RemoteFetchError(SchemaSyncError):
    """
    Fallo de transporte/HTTP al consultar la API remota.

    status_code es None cuando no hubo respuesta (timeout, DNS, conexion).
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, body: str = "") -> None:
        self.status_code = status_code
        self.body = (body or "")[:MAX_ERROR_BODY_CHARS]
        detail = f"{message} (status={status_code})"
        if self.body:
            detail = f"{detail}: {self.body}"
        super().__init__(detail)


class RemoteQueryError(SchemaSyncError):
    """La API remota acepto la llamada pero reporto errores GraphQL."""

    def __init__(self, message: str, *, errors: Optional[list[Any]] = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class UpsertError(SchemaSyncError):
    """
    Fallo al confirmar la transaccion de un chunk.

    - chunk_index: indice (base 0) del chunk que fallo
    - applied_count: registros ya confirmados por chunks anteriores
    - cause: excepcion original del store (o timeout)
    """

    def __init__(self, chunk_index: int, applied_count: int, cause: BaseException) -> None:
        self.chunk_index = chunk_index
        self.applied_count = applied_count
        self.cause = cause
        super().__init__(
            f"Fallo el chunk {chunk_index} tras {applied_count} registro(s) confirmados: "
            f"{type(cause).__name__}"
        )
