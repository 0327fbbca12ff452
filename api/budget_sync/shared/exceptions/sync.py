"""
Excepciones del motor de sincronización local <-> nube.
"""
from typing import Any, Dict, Optional

from budget_sync.shared.exceptions.base import AppException


class SyncException(AppException):
    """Excepción base para errores de sincronización."""
    
    def __init__(
        self,
        message: str,
        error_code: str = "SYNC_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 502
    ):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code,
            details=details
        )


class EntitySyncFailure(SyncException):
    """
    Fallo de store/red para un tipo de entidad durante push o pull.
    Aborta el resto del ciclo.
    """
    
    def __init__(self, entity_type: str, phase: str, cause: BaseException):
        self.entity_type = entity_type
        self.phase = phase
        self.cause = cause
        super().__init__(
            message=f"Fallo sincronizando {entity_type} ({phase}): {cause}",
            error_code="ENTITY_SYNC_FAILURE",
            details={
                "entity": entity_type,
                "phase": phase,
                "reason": type(cause).__name__,
                "cause": str(cause),
            }
        )


class OrphanCleanupFailure(SyncException):
    """Fallo en la limpieza de huérfanos. Solo se registra, nunca aborta el ciclo."""
    
    def __init__(self, entity_type: str, cause: BaseException):
        self.entity_type = entity_type
        self.cause = cause
        super().__init__(
            message=f"Fallo limpiando huérfanos de {entity_type}: {cause}",
            error_code="ORPHAN_CLEANUP_FAILURE",
            details={"entity": entity_type, "cause": str(cause)}
        )


class CloudStoreError(SyncException):
    """Error de integración con el document store en la nube."""
    
    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(
            message=message,
            error_code="CLOUD_STORE_ERROR",
            details={"status": status, "body": body[:500]}
        )
