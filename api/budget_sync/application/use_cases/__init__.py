"""
Casos de uso de la aplicacion.
"""
from .sync_orchestrator import SyncOrchestrator
from .orphan_cleanup import OrphanCleanupUseCase
from .auto_sync_scheduler import AutoSyncScheduler
from .realtime_sync import RealtimeSubscriptionManager

__all__ = [
    "SyncOrchestrator",
    "OrphanCleanupUseCase",
    "AutoSyncScheduler",
    "RealtimeSubscriptionManager",
]
