"""
Escucha de cambios remotos en tiempo real.

Por cada coleccion configurada abre un listener en la nube; ante cualquier
cambio hace un pull de esa coleccion y avisa al caller. Los errores de un
listener se registran y nunca se propagan.
"""
import inspect
from typing import Any, Callable, List, Optional

from loguru import logger

from budget_sync.application.use_cases.sync_orchestrator import SyncOrchestrator
from budget_sync.domain.entities.sync import EntityType
from budget_sync.domain.repositories.auth_gate import IAuthGate
from budget_sync.domain.repositories.cloud_store import Document, ICloudStore

UpdateCallback = Callable[[], Any]


class RealtimeSubscriptionManager:
    """Administra los listeners de la nube abiertos para un perfil."""

    def __init__(
        self,
        orchestrator: SyncOrchestrator,
        cloud_store: ICloudStore,
        auth_gate: IAuthGate,
        collections: List[str],
    ):
        self.orchestrator = orchestrator
        self.cloud_store = cloud_store
        self.auth_gate = auth_gate
        self.entities = [EntityType.from_collection(name) for name in collections]
        self._unsubscribers: List[Callable[[], None]] = []
        self._profile_id: Optional[str] = None

    @property
    def profile_id(self) -> Optional[str]:
        return self._profile_id

    def is_enabled(self) -> bool:
        return bool(self._unsubscribers)

    def enable(self, profile_id: str, on_update: Optional[UpdateCallback] = None) -> Callable[[], None]:
        """
        Abre un listener por coleccion configurada. Si ya habia listeners
        abiertos se cierran antes.

        Returns:
            Disposer equivalente a disable()
        """
        if not self.auth_gate.is_authenticated():
            logger.warning("Usuario no autenticado, se omite la sync en tiempo real")
            return lambda: None

        self.disable()
        self._profile_id = profile_id
        for entity in self.entities:
            unsubscribe = self.cloud_store.subscribe(
                entity.collection,
                profile_id,
                self._build_handler(entity, profile_id, on_update),
                self._build_error_handler(entity),
            )
            self._unsubscribers.append(unsubscribe)

        logger.info(
            f"Sync en tiempo real activa para {profile_id}: "
            f"{', '.join(e.collection for e in self.entities)}"
        )
        return self.disable

    def disable(self) -> None:
        """Cierra todos los listeners abiertos por este manager."""
        if not self._unsubscribers:
            return
        for unsubscribe in self._unsubscribers:
            try:
                unsubscribe()
            except Exception as e:
                logger.error(f"Error cerrando listener: {e}")
        self._unsubscribers = []
        self._profile_id = None
        logger.info("Sync en tiempo real desactivada")

    def _build_handler(
        self,
        entity: EntityType,
        profile_id: str,
        on_update: Optional[UpdateCallback],
    ):
        async def handle_change(records: List[Document]) -> None:
            # Se baja aunque haya un ciclo en curso: su pull de esta
            # coleccion puede haber terminado ya
            logger.debug(f"[realtime:{entity.collection}] {len(records)} documentos en el snapshot")
            try:
                await self.orchestrator.pull_entity(entity, profile_id)
                if on_update is not None:
                    result = on_update()
                    if inspect.isawaitable(result):
                        await result
            except Exception as e:
                logger.error(f"[realtime:{entity.collection}] error aplicando cambios: {e}")

        return handle_change

    @staticmethod
    def _build_error_handler(entity: EntityType):
        def handle_error(error: BaseException) -> None:
            logger.error(f"[realtime:{entity.collection}] error en listener: {error}")

        return handle_error
