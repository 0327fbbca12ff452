"""
Dependencias para inyeccion de los servicios de sync.

Los servicios se construyen una vez al arrancar y viven en app.state.container.
"""
from fastapi import Depends, Request

from budget_sync.application.use_cases.auto_sync_scheduler import AutoSyncScheduler
from budget_sync.application.use_cases.realtime_sync import RealtimeSubscriptionManager
from budget_sync.application.use_cases.sync_orchestrator import SyncOrchestrator
from budget_sync.core.container import SyncContainer
from budget_sync.infrastructure.external.firebase.auth_client import FirebaseAuthGate


def get_container(request: Request) -> SyncContainer:
    """
    Dependencia para obtener el contenedor de servicios.

    Args:
        request: Peticion HTTP

    Returns:
        SyncContainer: Contenedor construido en el startup
    """
    return request.app.state.container


def get_orchestrator(container: SyncContainer = Depends(get_container)) -> SyncOrchestrator:
    return container.orchestrator


def get_auto_sync(container: SyncContainer = Depends(get_container)) -> AutoSyncScheduler:
    return container.auto_sync


def get_realtime(container: SyncContainer = Depends(get_container)) -> RealtimeSubscriptionManager:
    return container.realtime


def get_auth_gate(container: SyncContainer = Depends(get_container)) -> FirebaseAuthGate:
    return container.auth_gate
