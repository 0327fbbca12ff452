"""
Servicios de aplicacion.

Logica pura y reutilizable del motor de sync: resolucion de conflictos
y mapeo entre filas locales y documentos de nube.
"""
from budget_sync.application.services.conflict_resolver import (
    should_apply_remote,
    should_push_local,
)
from budget_sync.application.services.entity_mappings import (
    FieldMapping,
    EntityMapping,
    ENTITY_MAPPINGS,
    get_entity_mapping,
    to_cloud_document,
    from_cloud_document,
)

__all__ = [
    # Conflictos
    "should_apply_remote",
    "should_push_local",
    # Mapeos
    "FieldMapping",
    "EntityMapping",
    "ENTITY_MAPPINGS",
    "get_entity_mapping",
    "to_cloud_document",
    "from_cloud_document",
]
