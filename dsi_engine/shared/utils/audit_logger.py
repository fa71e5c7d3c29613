"""
AuditLogger - rastro de auditoria de syncs y webhooks.

Escribe en logs/audit_logs/ un archivo diario con una linea por evento:
- corridas de sync (tienda, estado, registros aplicados, duracion)
- fallos de sync (tienda, tipo de error; sin detalle del store)
- webhooks (tienda, topic, aceptado/rechazado)
"""
from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger


class AuditLogger:
    """
    Gestor de logs de auditoria.

    Uso:
        # Al inicio de la app
        AuditLogger.initialize()

        # En un endpoint
        AuditLogger.log_sync_run("tienda.myshopify.com", "success", 120, 1.4)
    """

    BASE_LOG_DIR = Path("logs")
    AUDIT_LOG_DIR = BASE_LOG_DIR / "audit_logs"

    FILE_TIMESTAMP_FORMAT = "%Y-%m-%d"

    _initialized: bool = False
    _audit_logger = logger.bind(context="audit")

    @classmethod
    def initialize(cls) -> None:
        """
        Inicializa la carpeta y el sink de auditoria.
        Debe llamarse al inicio de la aplicacion.
        """
        if cls._initialized:
            return

        cls.AUDIT_LOG_DIR.mkdir(parents=True, exist_ok=True)

        today = datetime.now().strftime(cls.FILE_TIMESTAMP_FORMAT)
        audit_log_file = cls.AUDIT_LOG_DIR / f"audit_{today}.log"

        logger.add(
            str(audit_log_file),
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {message}",
            filter=lambda record: record["extra"].get("context") == "audit",
            rotation="1 day",
            retention="30 days",
            level="INFO"
        )

        cls._initialized = True
        logger.info("AuditLogger inicializado")

    @classmethod
    def log_sync_run(cls, shop: str, status: str, count: int, duration_s: Optional[float] = None) -> None:
        duration = f" duration={duration_s:.2f}s" if duration_s is not None else ""
        cls._audit_logger.info(f"SYNC shop={shop} status={status} count={count}{duration}")

    @classmethod
    def log_sync_failure(cls, shop: str, error_kind: str, applied_count: Optional[int] = None) -> None:
        applied = f" applied={applied_count}" if applied_count is not None else ""
        cls._audit_logger.error(f"SYNC_FAILED shop={shop} error={error_kind}{applied}")

    @classmethod
    def log_webhook(cls, shop: Optional[str], topic: Optional[str], accepted: bool) -> None:
        outcome = "accepted" if accepted else "rejected"
        cls._audit_logger.info(f"WEBHOOK shop={shop} topic={topic} outcome={outcome}")
