"""
Entidades del dominio de sincronizacion.

Define los tipos de entidad sincronizables, el orden fijo de push y pull,
y los eventos de progreso que se emiten durante un ciclo.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class EntityType(str, Enum):
    """
    Tipos de entidad sincronizables.

    El valor es el nombre legible usado en logs y mensajes de progreso.
    """

    PROFILE = "profiles"
    ACCOUNT = "accounts"
    CATEGORY = "categories"
    TRANSACTION = "transactions"
    INCOME_SOURCE = "income sources"
    PROJECT = "projects"
    PROJECT_TYPE = "project types"
    PROJECT_STATUS = "project statuses"

    @property
    def collection(self) -> str:
        """Nombre de la coleccion en el document store."""
        return _COLLECTIONS[self]

    @property
    def table(self) -> str:
        """Nombre de la tabla en la base local."""
        return _TABLES[self]

    @classmethod
    def from_collection(cls, collection: str) -> "EntityType":
        for entity, name in _COLLECTIONS.items():
            if name == collection:
                return entity
        raise ValueError(f"Coleccion desconocida: {collection}")


_COLLECTIONS: Dict[EntityType, str] = {
    EntityType.PROFILE: "profiles",
    EntityType.ACCOUNT: "accounts",
    EntityType.CATEGORY: "categories",
    EntityType.TRANSACTION: "transactions",
    EntityType.INCOME_SOURCE: "incomeSources",
    EntityType.PROJECT: "projects",
    EntityType.PROJECT_TYPE: "projectTypes",
    EntityType.PROJECT_STATUS: "projectStatuses",
}

_TABLES: Dict[EntityType, str] = {
    EntityType.PROFILE: "profiles",
    EntityType.ACCOUNT: "accounts",
    EntityType.CATEGORY: "categories",
    EntityType.TRANSACTION: "transactions",
    EntityType.INCOME_SOURCE: "income_sources",
    EntityType.PROJECT: "projects",
    EntityType.PROJECT_TYPE: "project_types",
    EntityType.PROJECT_STATUS: "project_statuses",
}


# Push: local -> nube
PUSH_ORDER: tuple[EntityType, ...] = (
    EntityType.PROFILE,
    EntityType.ACCOUNT,
    EntityType.CATEGORY,
    EntityType.TRANSACTION,
    EntityType.INCOME_SOURCE,
    EntityType.PROJECT,
    EntityType.PROJECT_TYPE,
    EntityType.PROJECT_STATUS,
)

# Pull: nube -> local, padres antes que dependientes
PULL_ORDER: tuple[EntityType, ...] = (
    EntityType.PROFILE,
    EntityType.PROJECT_STATUS,
    EntityType.PROJECT_TYPE,
    EntityType.ACCOUNT,
    EntityType.CATEGORY,
    EntityType.INCOME_SOURCE,
    EntityType.PROJECT,
    EntityType.TRANSACTION,
)

TOTAL_SYNC_STEPS = len(PUSH_ORDER) + len(PULL_ORDER)


class SyncStatus(str, Enum):
    """Estado reportado en los eventos de progreso."""

    IDLE = "idle"
    SYNCING = "syncing"
    ERROR = "error"
    SUCCESS = "success"


@dataclass(frozen=True)
class SyncProgress:
    """Evento de progreso entregado a los listeners registrados."""

    status: SyncStatus
    message: str
    current: Optional[int] = None
    total: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"status": self.status.value, "message": self.message}
        if self.current is not None:
            data["current"] = self.current
        if self.total is not None:
            data["total"] = self.total
        return data


@dataclass
class EntityCycleStats:
    """Contadores por tipo de entidad dentro de un ciclo."""

    pushed: int = 0
    push_skipped: int = 0
    created: int = 0
    updated: int = 0
    pull_skipped: int = 0
    discarded: int = 0
    orphans_removed: int = 0


@dataclass
class SyncCycleReport:
    """Resumen de un ciclo completo, usado para logging."""

    profile_id: str
    started_at: str
    finished_at: Optional[str] = None
    entities: Dict[EntityType, EntityCycleStats] = field(default_factory=dict)

    def stats(self, entity: EntityType) -> EntityCycleStats:
        if entity not in self.entities:
            self.entities[entity] = EntityCycleStats()
        return self.entities[entity]

    @property
    def total_writes(self) -> int:
        """Escrituras netas (nube + local) del ciclo, sin contar huérfanos."""
        return sum(s.pushed + s.created + s.updated for s in self.entities.values())
