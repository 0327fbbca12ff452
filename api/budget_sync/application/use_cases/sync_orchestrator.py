"""
Casos de uso de sincronizacion local <-> nube.

Un ciclo completo para un perfil:
1. Limpieza de huerfanos (best-effort, nunca aborta)
2. Push de cada tipo de entidad (local -> nube)
3. Pull de cada tipo de entidad en orden de dependencias (nube -> local)

Solo puede correr un ciclo a la vez por proceso. Un segundo llamado mientras
hay un ciclo activo retorna sin hacer I/O.
"""
from typing import Callable, Dict, List, Optional

from loguru import logger

from budget_sync.application.services.conflict_resolver import (
    should_apply_remote,
    should_push_local,
)
from budget_sync.application.services.entity_mappings import (
    from_cloud_document,
    to_cloud_document,
)
from budget_sync.application.use_cases.orphan_cleanup import OrphanCleanupUseCase
from budget_sync.domain.entities.sync import (
    PULL_ORDER,
    PUSH_ORDER,
    TOTAL_SYNC_STEPS,
    EntityCycleStats,
    EntityType,
    SyncCycleReport,
    SyncProgress,
    SyncStatus,
)
from budget_sync.domain.repositories.auth_gate import IAuthGate
from budget_sync.domain.repositories.cloud_store import ICloudStore
from budget_sync.domain.repositories.local_store import ILocalStore
from budget_sync.infrastructure.repositories.sync_settings_repository import (
    LAST_SYNCED_AT_KEY,
    SyncSettingsRepository,
)
from budget_sync.shared.exceptions.auth import NotAuthenticatedException
from budget_sync.shared.exceptions.sync import EntitySyncFailure
from budget_sync.shared.utils.datetime_utils import DateTimeUtils

ProgressListener = Callable[[SyncProgress], None]


class SyncOrchestrator:
    """
    Orquestador del ciclo de sync.

    Se construye una sola vez y se comparte (scheduler, realtime, API).
    El latch, los listeners de progreso y el ultimo reporte son estado de
    esta instancia.
    """

    def __init__(
        self,
        local_store: ILocalStore,
        cloud_store: ICloudStore,
        auth_gate: IAuthGate,
        settings_repository: SyncSettingsRepository,
        orphan_cleanup: Optional[OrphanCleanupUseCase] = None,
    ):
        self.local_store = local_store
        self.cloud_store = cloud_store
        self.auth_gate = auth_gate
        self.settings_repository = settings_repository
        self.orphan_cleanup = orphan_cleanup or OrphanCleanupUseCase(local_store)

        self._is_syncing = False
        self._listeners: List[ProgressListener] = []
        self.last_progress: Optional[SyncProgress] = None
        self.last_report: Optional[SyncCycleReport] = None

    # ------------------------------------------------------------------
    # Progreso
    # ------------------------------------------------------------------

    def on_sync_progress(self, callback: ProgressListener) -> Callable[[], None]:
        """
        Registra un listener de progreso.

        Returns:
            Funcion que elimina el listener (idempotente)
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(callback)
            except ValueError:
                pass

        return unsubscribe

    def _notify_progress(
        self,
        status: SyncStatus,
        message: str,
        current: Optional[int] = None,
        total: Optional[int] = None,
    ) -> None:
        progress = SyncProgress(status=status, message=message, current=current, total=total)
        self.last_progress = progress
        # Copia: un listener puede desuscribirse durante la notificacion
        for listener in list(self._listeners):
            try:
                listener(progress)
            except Exception as e:
                logger.warning(f"Error en callback de progreso: {e}")

    def is_sync_in_progress(self) -> bool:
        return self._is_syncing

    async def get_last_synced_at(self) -> Optional[str]:
        """Marca del ultimo ciclo exitoso. Solo observabilidad."""
        return await self.settings_repository.get_value(LAST_SYNCED_AT_KEY)

    # ------------------------------------------------------------------
    # Ciclo completo
    # ------------------------------------------------------------------

    async def sync_profile(self, profile_id: str) -> None:
        """
        Ejecuta un ciclo completo de sync para el perfil.

        Raises:
            NotAuthenticatedException: si no hay identidad (sin I/O)
            EntitySyncFailure: si falla el push o pull de algun tipo de entidad
        """
        if not self.auth_gate.is_authenticated():
            raise NotAuthenticatedException()

        if self._is_syncing:
            logger.warning("Sync ya en progreso, se omite la solicitud")
            return

        self._is_syncing = True
        report = SyncCycleReport(profile_id=profile_id, started_at=DateTimeUtils.now_iso())
        logger.info(f"Iniciando sync del perfil {profile_id}")

        try:
            self._notify_progress(SyncStatus.SYNCING, "Starting sync...")

            self._notify_progress(SyncStatus.SYNCING, "Cleaning up orphaned records...")
            await self.orphan_cleanup.execute(report)

            step = 0
            for entity in PUSH_ORDER:
                step += 1
                self._notify_progress(
                    SyncStatus.SYNCING, f"Syncing {entity.value}...", step, TOTAL_SYNC_STEPS
                )
                await self.push_entity(entity, profile_id, report)

            for entity in PULL_ORDER:
                step += 1
                self._notify_progress(
                    SyncStatus.SYNCING, f"Pulling {entity.value}...", step, TOTAL_SYNC_STEPS
                )
                await self.pull_entity(entity, profile_id, report)

            report.finished_at = DateTimeUtils.now_iso()
            await self.settings_repository.set_value(LAST_SYNCED_AT_KEY, report.finished_at)
            self.last_report = report

            logger.success(
                f"Sync del perfil {profile_id} completado: {report.total_writes} escrituras"
            )
            self._log_report(report)
            self._notify_progress(SyncStatus.SUCCESS, "Sync completed successfully")

        except Exception as e:
            logger.error(f"Sync del perfil {profile_id} fallido: {e}")
            message = getattr(e, "message", None) or str(e) or "Sync failed"
            self._notify_progress(SyncStatus.ERROR, message)
            raise
        finally:
            self._is_syncing = False

    # ------------------------------------------------------------------
    # Push / Pull por tipo de entidad
    # ------------------------------------------------------------------

    async def push_entity(
        self,
        entity: EntityType,
        profile_id: str,
        report: Optional[SyncCycleReport] = None,
    ) -> int:
        """
        Sube los registros locales del perfil, incluyendo tombstones.

        Solo se escribe en la nube lo que falta alli o es estrictamente mas
        nuevo que la copia de la nube; con eso un segundo ciclo sin cambios
        no escribe nada.

        Returns:
            Cantidad de documentos escritos
        """
        stats = report.stats(entity) if report is not None else EntityCycleStats()
        try:
            rows = await self.local_store.entity(entity).get_all_including_deleted(profile_id)
            if not rows:
                return 0

            cloud_docs = {
                doc.get("id"): doc
                for doc in await self.cloud_store.query_by_profile(entity.collection, profile_id)
            }

            pushed = 0
            for row in rows:
                document = to_cloud_document(entity, row)
                if not should_push_local(cloud_docs.get(document["id"]), document):
                    stats.push_skipped += 1
                    continue
                await self.cloud_store.upsert(entity.collection, document)
                logger.debug(f"[push:{entity.collection}] {document['id']}")
                pushed += 1

            stats.pushed += pushed
            return pushed

        except Exception as e:
            logger.error(f"Fallo el push de {entity.value}: {e}")
            raise EntitySyncFailure(entity.value, "push", e) from e

    async def pull_entity(
        self,
        entity: EntityType,
        profile_id: str,
        report: Optional[SyncCycleReport] = None,
    ) -> int:
        """
        Baja los documentos del perfil y los aplica con last-writer-wins.

        - Sin perfil local: se omite el tipo completo (no crea dependientes huerfanos)
        - Documentos de otro perfil: se descartan
        - Se copia deleted_at, de modo que tombstones y "undeletes" se propagan

        Returns:
            Cantidad de filas locales creadas o actualizadas
        """
        stats = report.stats(entity) if report is not None else EntityCycleStats()
        try:
            if not await self.local_store.profile_exists(profile_id):
                logger.warning(
                    f"Perfil {profile_id} no existe localmente, se omite el pull de {entity.value}"
                )
                return 0

            documents = await self.cloud_store.query_by_profile(entity.collection, profile_id)
            store = self.local_store.entity(entity)

            writes = 0
            for document in documents:
                record_id = document.get("id")
                if not record_id or document.get("profileId") != profile_id:
                    stats.discarded += 1
                    logger.warning(
                        f"[pull:{entity.collection}] documento {record_id} descartado: "
                        f"profileId {document.get('profileId')} != {profile_id}"
                    )
                    continue

                local_row = await store.get_by_id_including_deleted(record_id)
                local_doc = to_cloud_document(entity, local_row) if local_row else None
                if not should_apply_remote(local_doc, document):
                    stats.pull_skipped += 1
                    continue

                if local_row is None:
                    if entity is EntityType.PROFILE:
                        # Un perfil solo se actualiza; su alta es local
                        stats.pull_skipped += 1
                        continue
                    await store.create(from_cloud_document(entity, document))
                    stats.created += 1
                    logger.debug(f"[pull:{entity.collection}] creado {record_id}")
                else:
                    await store.update_including_deleted_field(
                        record_id, from_cloud_document(entity, document, include_identity=False)
                    )
                    stats.updated += 1
                    logger.debug(f"[pull:{entity.collection}] actualizado {record_id}")
                writes += 1

            return writes

        except Exception as e:
            logger.error(f"Fallo el pull de {entity.value}: {e}")
            raise EntitySyncFailure(entity.value, "pull", e) from e

    # ------------------------------------------------------------------
    # Otros flujos
    # ------------------------------------------------------------------

    async def clear_cloud_data(self, profile_id: str) -> Dict[str, int]:
        """
        Borra todos los documentos del perfil en la nube (flujo "clear data").
        Los dependientes se borran antes que el perfil.

        Returns:
            Documentos eliminados por coleccion
        """
        if not self.auth_gate.is_authenticated():
            raise NotAuthenticatedException()

        removed: Dict[str, int] = {}
        for entity in reversed(PULL_ORDER):
            removed[entity.collection] = await self.cloud_store.delete_all_for_profile(
                entity.collection, profile_id
            )
        logger.info(f"Datos en la nube del perfil {profile_id} eliminados: {removed}")
        return removed

    @staticmethod
    def _log_report(report: SyncCycleReport) -> None:
        for entity, stats in report.entities.items():
            logger.info(
                f"  {entity.value}: push={stats.pushed} (omitidos {stats.push_skipped}), "
                f"pull creados={stats.created} actualizados={stats.updated} "
                f"(omitidos {stats.pull_skipped}, descartados {stats.discarded}), "
                f"huerfanos={stats.orphans_removed}"
            )
