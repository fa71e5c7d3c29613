"""
Modelos de base de datos (ORM).
"""
from sqlalchemy import Column, String, Integer, DateTime, Text, UniqueConstraint
from sqlalchemy.sql import func

from dsi_engine.infrastructure.database.session import Base


class SchemaDefinitionModel(Base):
    """
    Espejo local de una definicion de metafield remota.

    Identidad: (shop, owner_type, key) con key = "<namespace>.<key>".
    Ese trio es el target de conflicto del upsert.

    last_audited queda en NULL al crear la fila y se refresca cada vez que
    un sync vuelve a ver la definicion (rama UPDATE del upsert).
    Las filas que desaparecen del remoto no se borran.
    """

    __tablename__ = "schema_definitions"
    __table_args__ = (
        UniqueConstraint("shop", "owner_type", "key", name="uq_schema_definitions_shop_owner_key"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    shop = Column(String(255), nullable=False, index=True)
    owner_type = Column(String(64), nullable=False)
    key = Column(String(512), nullable=False)
    name = Column(String(255), nullable=False)
    type = Column(String(128), nullable=True)
    description = Column(Text, nullable=True)
    last_audited = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<SchemaDefinition(shop={self.shop}, owner_type={self.owner_type}, key={self.key})>"
