"""
Endpoints del motor de sync.
Disparador delgado para la UI: ciclo manual, auto-sync, tiempo real y estado.
"""
from fastapi import APIRouter, Depends, status
from loguru import logger

from budget_sync.api.v1.dependencies.sync_deps import (
    get_auto_sync,
    get_orchestrator,
    get_realtime,
)
from budget_sync.application.dto.sync_dto import (
    AutoSyncResponseDTO,
    AutoSyncStartDTO,
    ClearCloudDataResponseDTO,
    RealtimeResponseDTO,
    SyncProgressDTO,
    SyncRunResponseDTO,
    SyncStatusDTO,
)
from budget_sync.application.use_cases.auto_sync_scheduler import AutoSyncScheduler
from budget_sync.application.use_cases.realtime_sync import RealtimeSubscriptionManager
from budget_sync.application.use_cases.sync_orchestrator import SyncOrchestrator
from budget_sync.shared.exceptions.auth import NotAuthenticatedException


router = APIRouter(prefix="/sync", tags=["Sync"])


@router.post(
    "/profiles/{profile_id}",
    response_model=SyncRunResponseDTO,
    status_code=status.HTTP_200_OK,
    summary="Ejecutar un ciclo de sync"
)
async def sync_profile(
    profile_id: str,
    orchestrator: SyncOrchestrator = Depends(get_orchestrator)
) -> SyncRunResponseDTO:
    """
    Ejecuta un ciclo completo (huerfanos -> push -> pull) y espera el resultado.

    Sin sesion responde 401 aunque haya un ciclo en curso; con sesion y un
    ciclo activo responde sin ejecutar nada (skipped=True).
    Los errores se traducen por el handler global: 401 sin sesion,
    502 si falla un tipo de entidad.
    """
    if not orchestrator.auth_gate.is_authenticated():
        raise NotAuthenticatedException()

    if orchestrator.is_sync_in_progress():
        return SyncRunResponseDTO(
            success=False,
            profile_id=profile_id,
            message="Sync already in progress",
            skipped=True,
            last_synced_at=await orchestrator.get_last_synced_at(),
        )

    await orchestrator.sync_profile(profile_id)
    return SyncRunResponseDTO(
        success=True,
        profile_id=profile_id,
        message="Sync completed successfully",
        last_synced_at=await orchestrator.get_last_synced_at(),
    )


@router.get("/status", response_model=SyncStatusDTO)
async def get_sync_status(
    orchestrator: SyncOrchestrator = Depends(get_orchestrator),
    auto_sync: AutoSyncScheduler = Depends(get_auto_sync),
    realtime: RealtimeSubscriptionManager = Depends(get_realtime)
) -> SyncStatusDTO:
    """Estado del motor: latch, ultimo sync, auto-sync y tiempo real."""
    progress = orchestrator.last_progress
    return SyncStatusDTO(
        is_syncing=orchestrator.is_sync_in_progress(),
        last_synced_at=await orchestrator.get_last_synced_at(),
        auto_sync_running=auto_sync.is_running(),
        auto_sync_profile_id=auto_sync.profile_id,
        auto_sync_enabled=await auto_sync.get_auto_sync_enabled(),
        realtime_enabled=realtime.is_enabled(),
        realtime_profile_id=realtime.profile_id,
        last_progress=SyncProgressDTO(**progress.to_dict()) if progress else None,
    )


@router.post("/auto", response_model=AutoSyncResponseDTO)
async def start_auto_sync(
    dto: AutoSyncStartDTO,
    auto_sync: AutoSyncScheduler = Depends(get_auto_sync)
) -> AutoSyncResponseDTO:
    """Activa el auto-sync y deja la preferencia persistida."""
    started = auto_sync.start(dto.profile_id, dto.interval_minutes)
    if started:
        await auto_sync.set_auto_sync_enabled(True)

    if started:
        message = f"Auto-sync iniciado cada {dto.interval_minutes} minutos"
    elif auto_sync.is_running():
        message = "Auto-sync ya estaba corriendo"
    else:
        message = "Usuario no autenticado"

    return AutoSyncResponseDTO(
        running=auto_sync.is_running(),
        profile_id=auto_sync.profile_id,
        auto_sync_enabled=await auto_sync.get_auto_sync_enabled(),
        message=message,
    )


@router.delete("/auto", response_model=AutoSyncResponseDTO)
async def stop_auto_sync(
    auto_sync: AutoSyncScheduler = Depends(get_auto_sync)
) -> AutoSyncResponseDTO:
    """Detiene el auto-sync (idempotente)."""
    auto_sync.stop()
    await auto_sync.set_auto_sync_enabled(False)
    return AutoSyncResponseDTO(
        running=False,
        profile_id=None,
        auto_sync_enabled=False,
        message="Auto-sync detenido",
    )


@router.post("/realtime/{profile_id}", response_model=RealtimeResponseDTO)
async def enable_realtime(
    profile_id: str,
    realtime: RealtimeSubscriptionManager = Depends(get_realtime)
) -> RealtimeResponseDTO:
    """Abre los listeners de la nube para el perfil."""
    realtime.enable(
        profile_id,
        on_update=lambda: logger.info(f"Cambios remotos aplicados para {profile_id}"),
    )
    return RealtimeResponseDTO(
        enabled=realtime.is_enabled(),
        profile_id=realtime.profile_id,
        collections=[e.collection for e in realtime.entities] if realtime.is_enabled() else [],
    )


@router.delete("/realtime", response_model=RealtimeResponseDTO)
async def disable_realtime(
    realtime: RealtimeSubscriptionManager = Depends(get_realtime)
) -> RealtimeResponseDTO:
    realtime.disable()
    return RealtimeResponseDTO(enabled=False)


@router.delete("/profiles/{profile_id}/cloud", response_model=ClearCloudDataResponseDTO)
async def clear_cloud_data(
    profile_id: str,
    orchestrator: SyncOrchestrator = Depends(get_orchestrator)
) -> ClearCloudDataResponseDTO:
    """Borra todos los documentos del perfil en la nube."""
    removed = await orchestrator.clear_cloud_data(profile_id)
    return ClearCloudDataResponseDTO(profile_id=profile_id, removed=removed)
