"""
DTOs del motor de sync.
Definen la estructura de datos expuesta por la API HTTP.
"""
from typing import Dict, Optional
from pydantic import BaseModel, Field


class SyncProgressDTO(BaseModel):
    """Evento de progreso de un ciclo."""
    status: str = Field(..., description="idle | syncing | error | success")
    message: str
    current: Optional[int] = None
    total: Optional[int] = None


class SyncRunResponseDTO(BaseModel):
    """Resultado de disparar un ciclo manual."""
    success: bool
    profile_id: str
    message: str
    skipped: bool = Field(False, description="True si ya habia un ciclo en curso")
    last_synced_at: Optional[str] = None


class SyncStatusDTO(BaseModel):
    """Estado actual del motor de sync."""
    is_syncing: bool
    last_synced_at: Optional[str] = None
    auto_sync_running: bool = False
    auto_sync_profile_id: Optional[str] = None
    auto_sync_enabled: bool = False
    realtime_enabled: bool = False
    realtime_profile_id: Optional[str] = None
    last_progress: Optional[SyncProgressDTO] = None


class AutoSyncStartDTO(BaseModel):
    """Solicitud para iniciar el auto-sync."""
    profile_id: str = Field(..., min_length=1)
    interval_minutes: float = Field(5, gt=0, description="Minutos entre ciclos")


class AutoSyncResponseDTO(BaseModel):
    running: bool
    profile_id: Optional[str] = None
    auto_sync_enabled: bool
    message: str


class RealtimeResponseDTO(BaseModel):
    enabled: bool
    profile_id: Optional[str] = None
    collections: list[str] = []


class ClearCloudDataResponseDTO(BaseModel):
    """Documentos eliminados por coleccion."""
    profile_id: str
    removed: Dict[str, int]
