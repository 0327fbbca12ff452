"""
Construccion del grafo de servicios del motor de sync.

Todo se construye una sola vez por proceso y se comparte por referencia:
el latch y los listeners viven en el SyncOrchestrator, no en globales.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from budget_sync.application.use_cases.auto_sync_scheduler import AutoSyncScheduler
from budget_sync.application.use_cases.realtime_sync import RealtimeSubscriptionManager
from budget_sync.application.use_cases.sync_orchestrator import SyncOrchestrator
from budget_sync.core.config import Settings, get_realtime_collections
from budget_sync.domain.repositories.auth_gate import IAuthGate
from budget_sync.domain.repositories.cloud_store import ICloudStore
from budget_sync.domain.repositories.local_store import ILocalStore
from budget_sync.infrastructure.database.session import (
    close_db,
    create_engine,
    create_sessionmaker,
)
from budget_sync.infrastructure.external.firebase.auth_client import FirebaseAuthGate
from budget_sync.infrastructure.external.firebase.firestore_client import FirestoreCloudStore
from budget_sync.infrastructure.repositories.local_store import SqlAlchemyLocalStore
from budget_sync.infrastructure.repositories.sync_settings_repository import SyncSettingsRepository


@dataclass
class SyncContainer:
    """Servicios compartidos del proceso."""

    local_store: ILocalStore
    cloud_store: ICloudStore
    auth_gate: IAuthGate
    settings_repository: SyncSettingsRepository
    orchestrator: SyncOrchestrator
    auto_sync: AutoSyncScheduler
    realtime: RealtimeSubscriptionManager
    engine: Optional[AsyncEngine] = None

    async def close(self) -> None:
        """Detiene auto-sync y listeners, y cierra la base local."""
        self.realtime.disable()
        self.auto_sync.shutdown()
        await close_db(self.engine)


def build_services(
    *,
    local_store: ILocalStore,
    cloud_store: ICloudStore,
    auth_gate: IAuthGate,
    settings_repository: SyncSettingsRepository,
    realtime_collections: list[str],
    engine: Optional[AsyncEngine] = None,
) -> SyncContainer:
    """Cablea los casos de uso sobre adaptadores ya construidos."""
    orchestrator = SyncOrchestrator(
        local_store=local_store,
        cloud_store=cloud_store,
        auth_gate=auth_gate,
        settings_repository=settings_repository,
    )
    return SyncContainer(
        local_store=local_store,
        cloud_store=cloud_store,
        auth_gate=auth_gate,
        settings_repository=settings_repository,
        orchestrator=orchestrator,
        auto_sync=AutoSyncScheduler(orchestrator, auth_gate, settings_repository),
        realtime=RealtimeSubscriptionManager(
            orchestrator, cloud_store, auth_gate, realtime_collections
        ),
        engine=engine,
    )


def build_sync_container(settings: Settings) -> SyncContainer:
    """
    Constructor "oficial" leyendo la configuracion.

    - Base local: settings.effective_database_url
    - Nube: Firestore + Firebase Auth via REST
    """
    engine = create_engine(settings.effective_database_url, echo=settings.DEBUG)
    session_factory: async_sessionmaker = create_sessionmaker(engine)

    auth_gate = FirebaseAuthGate(
        settings.FIREBASE_API_KEY,
        auth_base_url=settings.FIREBASE_AUTH_BASE_URL,
        token_base_url=settings.FIREBASE_TOKEN_BASE_URL,
        timeout_s=settings.CLOUD_TIMEOUT_SECONDS,
    )
    cloud_store = FirestoreCloudStore(
        settings.FIREBASE_PROJECT_ID,
        auth_gate,
        base_url=settings.FIRESTORE_BASE_URL,
        timeout_s=settings.CLOUD_TIMEOUT_SECONDS,
        poll_interval_s=settings.REALTIME_POLL_SECONDS,
    )

    return build_services(
        local_store=SqlAlchemyLocalStore(session_factory),
        cloud_store=cloud_store,
        auth_gate=auth_gate,
        settings_repository=SyncSettingsRepository(session_factory),
        realtime_collections=get_realtime_collections(settings.REALTIME_COLLECTIONS),
        engine=engine,
    )
