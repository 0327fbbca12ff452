"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .sync_dto import (
    SyncProgressDTO,
    SyncRunResponseDTO,
    SyncStatusDTO,
    AutoSyncStartDTO,
    AutoSyncResponseDTO,
    RealtimeResponseDTO,
    ClearCloudDataResponseDTO,
)

__all__ = [
    "SyncProgressDTO",
    "SyncRunResponseDTO",
    "SyncStatusDTO",
    "AutoSyncStartDTO",
    "AutoSyncResponseDTO",
    "RealtimeResponseDTO",
    "ClearCloudDataResponseDTO",
]
