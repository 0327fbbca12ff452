"""
Entidades del dominio.
"""
from budget_sync.domain.entities.identity import Identity
from budget_sync.domain.entities.sync import (
    EntityType,
    PUSH_ORDER,
    PULL_ORDER,
    TOTAL_SYNC_STEPS,
    SyncStatus,
    SyncProgress,
    EntityCycleStats,
    SyncCycleReport,
)

__all__ = [
    "Identity",
    "EntityType",
    "PUSH_ORDER",
    "PULL_ORDER",
    "TOTAL_SYNC_STEPS",
    "SyncStatus",
    "SyncProgress",
    "EntityCycleStats",
    "SyncCycleReport",
]
