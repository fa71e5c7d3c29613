"""
Normalizacion de definiciones remotas a comandos de upsert.

Funciones puras: sin red ni store, deterministas e idempotentes.

Clave compuesta: "<namespace>.<key>". Si el namespace o la key remota
contienen el separador, la descomposicion es ambigua (p.ej. "a.b.c" puede
ser ("a", "b.c") o ("a.b", "c")). Es una limitacion aceptada: la clave se
construye tal cual y la descomposicion solo se usa para mostrar datos.
"""

from __future__ import annotations

from .types import RawRemoteDefinition, SchemaUpsertCommand

KEY_SEPARATOR = "."


def build_composite_key(namespace: str, key: str) -> str:
    return f"{namespace}{KEY_SEPARATOR}{key}"


def split_composite_key(composite_key: str) -> tuple[str, str]:
    """
    Separa una clave compuesta en (namespace, key) cortando en el primer
    separador. Ambigua si el namespace contiene el separador.
    """
    namespace, _, key = composite_key.partition(KEY_SEPARATOR)
    return namespace, key


def normalize_definition(
    definition: RawRemoteDefinition,
    *,
    shop: str,
    owner_type: str,
) -> SchemaUpsertCommand:
    """
    Mapea una RawRemoteDefinition a un SchemaUpsertCommand.

    - key = namespace + "." + key
    - type viene de type.name tal cual (None si la API no lo envia)
    - validation_status se descarta
    """
    return SchemaUpsertCommand(
        shop=shop,
        owner_type=owner_type,
        key=build_composite_key(definition.namespace, definition.key),
        name=definition.name,
        type=definition.type_name,
        description=definition.description,
    )
