"""
Aplicacion de comandos de upsert en chunks transaccionales.

Politica de fallo parcial:
- cada chunk es todo-o-nada (una transaccion del store)
- los chunks ya confirmados NO se revierten si un chunk posterior falla
- el primer fallo aborta la corrida con UpsertError (sin reintentos)

Los chunks se aplican en secuencia: el chunk N confirma (o falla) antes de
que empiece el N+1. Una cancelacion externa solo se respeta entre chunks.
"""

from __future__ import annotations

import asyncio
from typing import Iterator, Optional, Sequence, TypeVar

from loguru import logger

from dsi_engine.shared.exceptions.sync import UpsertError

from .schema_repository import SchemaDefinitionStore
from .types import SchemaUpsertCommand

T = TypeVar("T")


def iter_chunks(items: Sequence[T], chunk_size: int) -> Iterator[Sequence[T]]:
    """Particiona en sub-secuencias contiguas de chunk_size (la ultima puede ser menor)."""
    if chunk_size < 1:
        raise ValueError(f"chunk_size debe ser >= 1 (recibido {chunk_size})")
    for start in range(0, len(items), chunk_size):
        yield items[start:start + chunk_size]


class ChunkedUpserter:
    def __init__(
        self,
        store: SchemaDefinitionStore,
        *,
        chunk_size: int = 50,
        chunk_timeout_s: Optional[float] = None,
    ) -> None:
        if chunk_size < 1:
            raise ValueError(f"chunk_size debe ser >= 1 (recibido {chunk_size})")
        self._store = store
        self._chunk_size = chunk_size
        self._chunk_timeout_s = chunk_timeout_s

    async def apply(self, commands: Sequence[SchemaUpsertCommand]) -> int:
        """
        Aplica todos los comandos, en orden, chunk por chunk.

        Returns:
            int: total de registros confirmados

        Raises:
            UpsertError: si falla (o expira) la transaccion de un chunk
        """
        applied = 0
        total_chunks = (len(commands) + self._chunk_size - 1) // self._chunk_size

        for index, chunk in enumerate(iter_chunks(commands, self._chunk_size)):
            try:
                await self._apply_chunk_uncancellable(chunk)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(
                    f"Chunk {index + 1}/{total_chunks} fallo ({type(e).__name__}); "
                    f"quedan confirmados {applied} registro(s)"
                )
                raise UpsertError(chunk_index=index, applied_count=applied, cause=e) from e

            applied += len(chunk)
            logger.debug(f"Chunk {index + 1}/{total_chunks} confirmado ({len(chunk)} registros)")

        return applied

    async def _apply_chunk_uncancellable(self, chunk: Sequence[SchemaUpsertCommand]) -> None:
        """
        Ejecuta el chunk protegido de cancelaciones externas.

        Si la tarea se cancela mientras el chunk esta en vuelo, se espera a que
        la transaccion termine (commit o rollback) y recien entonces se propaga
        la cancelacion.
        """
        task = asyncio.ensure_future(
            asyncio.wait_for(self._store.upsert_chunk(chunk), timeout=self._chunk_timeout_s)
        )
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.done():
                logger.warning("Cancelacion recibida con un chunk en vuelo; esperando su transaccion")
                try:
                    await task
                except Exception as e:
                    # La corrida ya esta cancelada: el fallo del chunk solo se registra
                    logger.error(f"El chunk en vuelo fallo durante la cancelacion: {type(e).__name__}")
            raise
