"""
Pipeline de sincronizacion de schema: Shopify (metafield definitions) -> store local.

Etapas, en orden y sin paralelismo dentro de una corrida:
- RemoteSchemaFetcher: una consulta GraphQL (primera pagina) a la Admin API
- normalize_definition: registro remoto -> comando de upsert con clave compuesta
- ChunkedUpserter: upsert en chunks transaccionales (todo-o-nada por chunk)
- SchemaSyncOrchestrator: compone las etapas y reporta el estado terminal

Objetivos de diseño:
- Idempotencia: se puede ejecutar N veces sin duplicar filas.
- Fallo parcial explicito: los chunks confirmados antes de un error quedan
  confirmados; el error se propaga sin reintentos.
- Sin borrados: las definiciones que desaparecen del remoto no se podan.
- Sin locking entre corridas: dos syncs concurrentes de la misma tienda
  compiten sobre el upsert del store (last-write-wins).
"""
