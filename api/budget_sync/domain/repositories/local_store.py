"""
Interfaz del store local (base embebida, multi-perfil).
Define el contrato que debe cumplir cualquier implementación.

Las filas viajan como dict con columnas snake_case (id, profile_id,
updated_at, deleted_at, ...). Los timestamps son texto ISO-8601.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from budget_sync.domain.entities.sync import EntityType

Row = Dict[str, Any]


class ILocalEntityStore(ABC):
    """
    Operaciones CRUD con soft-delete para un tipo de entidad.
    """

    entity_type: EntityType

    @abstractmethod
    async def get_all(self, profile_id: str) -> List[Row]:
        """Filas vivas (deleted_at IS NULL) del perfil."""

    @abstractmethod
    async def get_all_including_deleted(self, profile_id: str) -> List[Row]:
        """Filas del perfil, incluyendo tombstones."""

    @abstractmethod
    async def get_by_id(self, record_id: str) -> Optional[Row]:
        """Fila viva por id, o None."""

    @abstractmethod
    async def get_by_id_including_deleted(self, record_id: str) -> Optional[Row]:
        """Fila por id aunque esté marcada como borrada, o None."""

    @abstractmethod
    async def create(self, record: Row) -> Row:
        """Inserta una fila completa (incluyendo deleted_at y timestamps)."""

    @abstractmethod
    async def update(self, record_id: str, fields: Row) -> Optional[Row]:
        """
        Actualiza campos de una fila viva. Si no se indica updated_at
        se marca con la hora actual (mutación local).
        """

    @abstractmethod
    async def update_including_deleted_field(self, record_id: str, fields: Row) -> Optional[Row]:
        """
        Actualiza la fila aunque sea tombstone, copiando deleted_at y
        updated_at tal cual vienen en `fields` (camino de sync).
        """

    @abstractmethod
    async def delete(self, record_id: str) -> None:
        """Soft-delete (o hard-delete para perfiles)."""

    @abstractmethod
    async def get_all_rows(self) -> List[Row]:
        """Todas las filas de la tabla, de todos los perfiles."""

    @abstractmethod
    async def hard_delete_where_profile_not_in(self, profile_ids: Iterable[str]) -> int:
        """Borra físicamente las filas cuyo perfil ya no existe. Retorna cuántas."""


class ILocalStore(ABC):
    """
    Agrupa los stores por tipo de entidad de una misma base local.
    """

    @abstractmethod
    def entity(self, entity_type: EntityType) -> ILocalEntityStore:
        """Store del tipo de entidad indicado."""

    @abstractmethod
    async def profile_ids(self) -> List[str]:
        """Ids de perfiles existentes localmente (el conjunto válido)."""

    @abstractmethod
    async def profile_exists(self, profile_id: str) -> bool:
        """Indica si el perfil existe localmente."""
