"""
Limpieza de registros huérfanos en la base local.

Un registro es huérfano cuando su profile_id ya no corresponde a ningún
perfil local (p.ej. el perfil se borró en otro dispositivo). El barrido
recorre toda la base, no solo el perfil que se está sincronizando.
"""
from typing import Dict, Optional

from loguru import logger

from budget_sync.domain.entities.sync import EntityType, SyncCycleReport
from budget_sync.domain.repositories.local_store import ILocalStore
from budget_sync.shared.exceptions.sync import OrphanCleanupFailure


class OrphanCleanupUseCase:
    """Barrido best-effort: nunca lanza, solo registra fallos."""

    def __init__(self, local_store: ILocalStore):
        self.local_store = local_store

    async def execute(self, report: Optional[SyncCycleReport] = None) -> Dict[EntityType, int]:
        """
        Borra físicamente las filas cuyo perfil no existe.

        Returns:
            Filas eliminadas por tipo de entidad (solo tipos con borrados)
        """
        try:
            valid_profile_ids = await self.local_store.profile_ids()
        except Exception as e:
            logger.error(f"No se pudo leer el conjunto de perfiles válidos: {e}")
            return {}

        removed: Dict[EntityType, int] = {}
        for entity in EntityType:
            if entity is EntityType.PROFILE:
                continue
            try:
                count = await self._sweep(entity, valid_profile_ids)
            except Exception as e:
                failure = OrphanCleanupFailure(entity.value, e)
                logger.error(failure.message)
                continue

            if count:
                removed[entity] = count
                if report is not None:
                    report.stats(entity).orphans_removed += count

        if removed:
            total = sum(removed.values())
            logger.info(f"Limpieza de huérfanos: {total} registros eliminados")
        return removed

    async def _sweep(self, entity: EntityType, valid_profile_ids) -> int:
        store = self.local_store.entity(entity)
        valid = set(valid_profile_ids)
        rows = await store.get_all_rows()
        orphans = [r for r in rows if r.get("profile_id") not in valid]
        if not orphans:
            return 0
        for row in orphans:
            logger.debug(f"[{entity.table}] huérfano {row['id']} (perfil {row.get('profile_id')})")
        return await store.hard_delete_where_profile_not_in(valid)
