"""
Repositorio para las configuraciones del motor de sync.
"""
from typing import Any, Dict

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from budget_sync.infrastructure.database.models import SyncSettingModel
from budget_sync.shared.utils.datetime_utils import DateTimeUtils

AUTO_SYNC_ENABLED_KEY = "auto_sync_enabled"
LAST_SYNCED_AT_KEY = "last_synced_at"


class SyncSettingsRepository:
    """
    Gestiona la tabla sync_settings.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def get_value(self, key: str, default: Any = None) -> Any:
        """
        Obtiene el valor de una configuración por su clave.
        """
        async with self.session_factory() as session:
            setting = await session.get(SyncSettingModel, key)
            return setting.value if setting and setting.value is not None else default

    async def get_all(self) -> Dict[str, Any]:
        """
        Obtiene todas las configuraciones como un diccionario.
        """
        async with self.session_factory() as session:
            result = await session.execute(select(SyncSettingModel))
            return {r.key: r.value for r in result.scalars().all()}

    async def set_value(self, key: str, value: Any) -> None:
        """
        Crea o actualiza una configuración.
        """
        async with self.session_factory() as session:
            existing = await session.get(SyncSettingModel, key)
            now = DateTimeUtils.now_iso()
            if existing:
                existing.value = value
                existing.updated_at = now
            else:
                session.add(SyncSettingModel(key=key, value=value, updated_at=now))
            await session.commit()
        logger.debug(f"Configuración '{key}' actualizada a: {value}")
