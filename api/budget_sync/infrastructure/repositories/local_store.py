"""
Store local: agrupa un repositorio por tipo de entidad sobre la misma base.
"""
from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from budget_sync.domain.entities.sync import EntityType
from budget_sync.domain.repositories.local_store import ILocalEntityStore, ILocalStore
from budget_sync.infrastructure.database.models import ProfileModel
from budget_sync.infrastructure.repositories.entity_repository import SqlAlchemyEntityRepository


class SqlAlchemyLocalStore(ILocalStore):
    """Base local embebida (SQLite via aiosqlite), multi-perfil."""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory
        self._repositories: Dict[EntityType, SqlAlchemyEntityRepository] = {
            entity: SqlAlchemyEntityRepository(session_factory, entity)
            for entity in EntityType
        }

    def entity(self, entity_type: EntityType) -> ILocalEntityStore:
        return self._repositories[entity_type]

    async def profile_ids(self) -> List[str]:
        """Todo perfil existente es válido (los perfiles se borran físicamente)."""
        async with self.session_factory() as session:
            result = await session.execute(select(ProfileModel.id))
            return list(result.scalars().all())

    async def profile_exists(self, profile_id: str) -> bool:
        async with self.session_factory() as session:
            return await session.get(ProfileModel, profile_id) is not None
