"""
Implementación SQLAlchemy del store local por tipo de entidad.

Cada operación abre su propia sesión y hace commit al terminar: el motor de
sync avanza registro a registro y un fallo a mitad de ciclo no deshace lo
ya aplicado.
"""
from typing import Any, Dict, Iterable, List, Optional, Type

from loguru import logger
from sqlalchemy import delete as sa_delete
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from budget_sync.domain.entities.sync import EntityType
from budget_sync.domain.repositories.local_store import ILocalEntityStore, Row
from budget_sync.infrastructure.database.models import (
    AccountModel,
    CategoryModel,
    IncomeSourceModel,
    ProfileModel,
    ProjectModel,
    ProjectStatusModel,
    ProjectTypeModel,
    TransactionModel,
)
from budget_sync.shared.utils.datetime_utils import DateTimeUtils

MODEL_BY_ENTITY: Dict[EntityType, Type] = {
    EntityType.PROFILE: ProfileModel,
    EntityType.ACCOUNT: AccountModel,
    EntityType.CATEGORY: CategoryModel,
    EntityType.TRANSACTION: TransactionModel,
    EntityType.INCOME_SOURCE: IncomeSourceModel,
    EntityType.PROJECT: ProjectModel,
    EntityType.PROJECT_TYPE: ProjectTypeModel,
    EntityType.PROJECT_STATUS: ProjectStatusModel,
}


def _to_row(obj: Any) -> Row:
    return {c.name: getattr(obj, c.name) for c in obj.__table__.columns}


class SqlAlchemyEntityRepository(ILocalEntityStore):
    """Repositorio genérico para una tabla sincronizable."""

    def __init__(self, session_factory: async_sessionmaker, entity_type: EntityType):
        self.session_factory = session_factory
        self.entity_type = entity_type
        self.model = MODEL_BY_ENTITY[entity_type]
        self._columns = {c.name for c in self.model.__table__.columns}

    @property
    def is_profile(self) -> bool:
        return self.entity_type is EntityType.PROFILE

    def _tenant_column(self):
        # Un perfil es su propio tenant
        return self.model.id if self.is_profile else self.model.profile_id

    def _clean(self, fields: Row) -> Row:
        return {k: v for k, v in fields.items() if k in self._columns}

    async def get_all(self, profile_id: str) -> List[Row]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(self.model).where(
                    self._tenant_column() == profile_id,
                    self.model.deleted_at.is_(None),
                )
            )
            return [_to_row(obj) for obj in result.scalars().all()]

    async def get_all_including_deleted(self, profile_id: str) -> List[Row]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(self.model).where(self._tenant_column() == profile_id)
            )
            return [_to_row(obj) for obj in result.scalars().all()]

    async def get_by_id(self, record_id: str) -> Optional[Row]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(self.model).where(
                    self.model.id == record_id,
                    self.model.deleted_at.is_(None),
                )
            )
            obj = result.scalars().first()
            return _to_row(obj) if obj else None

    async def get_by_id_including_deleted(self, record_id: str) -> Optional[Row]:
        async with self.session_factory() as session:
            obj = await session.get(self.model, record_id)
            return _to_row(obj) if obj else None

    async def create(self, record: Row) -> Row:
        """
        Inserta la fila tal cual. Si faltan timestamps se completan con la
        hora actual (alta local); el pull siempre los trae desde la nube.
        """
        data = self._clean(record)
        now = DateTimeUtils.now_iso()
        if not data.get("created_at"):
            data["created_at"] = data.get("updated_at") or now
        if not data.get("updated_at"):
            data["updated_at"] = data["created_at"]
        if self.is_profile:
            data.pop("deleted_at", None)

        async with self.session_factory() as session:
            obj = self.model(**data)
            session.add(obj)
            await session.commit()
            return _to_row(obj)

    async def update(self, record_id: str, fields: Row) -> Optional[Row]:
        """Mutación local: solo filas vivas, marca updated_at con la hora actual."""
        async with self.session_factory() as session:
            obj = await session.get(self.model, record_id)
            if obj is None or obj.deleted_at is not None:
                return None
            data = self._clean(fields)
            data.pop("id", None)
            data.setdefault("updated_at", DateTimeUtils.now_iso())
            for key, value in data.items():
                setattr(obj, key, value)
            await session.commit()
            return _to_row(obj)

    async def update_including_deleted_field(self, record_id: str, fields: Row) -> Optional[Row]:
        async with self.session_factory() as session:
            obj = await session.get(self.model, record_id)
            if obj is None:
                return None
            data = self._clean(fields)
            data.pop("id", None)
            if self.is_profile:
                data.pop("deleted_at", None)
            for key, value in data.items():
                setattr(obj, key, value)
            await session.commit()
            return _to_row(obj)

    async def delete(self, record_id: str) -> None:
        """
        Soft-delete: deja un tombstone con deleted_at = updated_at = ahora,
        para que el borrado se propague a la nube en el siguiente push.
        Los perfiles se borran físicamente.
        """
        async with self.session_factory() as session:
            obj = await session.get(self.model, record_id)
            if obj is None:
                return
            if self.is_profile:
                await session.delete(obj)
            else:
                now = DateTimeUtils.now_iso()
                obj.deleted_at = now
                obj.updated_at = now
            await session.commit()

    async def get_all_rows(self) -> List[Row]:
        async with self.session_factory() as session:
            result = await session.execute(select(self.model))
            return [_to_row(obj) for obj in result.scalars().all()]

    async def hard_delete_where_profile_not_in(self, profile_ids: Iterable[str]) -> int:
        if self.is_profile:
            return 0

        valid = list(profile_ids)
        async with self.session_factory() as session:
            result = await session.execute(
                sa_delete(self.model).where(self.model.profile_id.not_in(valid))
            )
            await session.commit()
            removed = result.rowcount or 0

        if removed:
            logger.debug(f"[{self.entity_type.table}] {removed} filas huérfanas eliminadas")
        return removed
