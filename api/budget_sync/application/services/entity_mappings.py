"""
Mapeos fila local <-> documento de nube por tipo de entidad.

Aquí se controla:
- qué columnas locales viajan a la nube
- cómo se llaman en el documento (snake_case -> camelCase)
- cómo se transforman los valores (flags enteros <-> booleanos, JSON <-> listas)

Los campos de sync (id, profileId, createdAt, updatedAt, deletedAt) se
agregan siempre, no se declaran por entidad.

Este módulo no realiza I/O.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from budget_sync.domain.entities.sync import EntityType

Transform = Callable[[Any], Any]


def _camel(column: str) -> str:
    head, *rest = column.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _int_to_bool(value: Any) -> Any:
    return None if value is None else bool(value)


def _bool_to_int(value: Any) -> Any:
    return None if value is None else int(bool(value))


def _json_text_to_list(value: Any) -> Any:
    if value is None or isinstance(value, list):
        return value
    try:
        parsed = json.loads(value)
    except (TypeError, ValueError):
        return []
    return parsed if isinstance(parsed, list) else []


def _list_to_json_text(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    return json.dumps(list(value))


@dataclass(frozen=True)
class FieldMapping:
    """
    Define el mapeo de una columna local a un campo del documento.

    - local_column: nombre de la columna en la base local
    - cloud_field: nombre del campo en el documento de nube
    - to_cloud: transformación opcional al subir
    - from_cloud: transformación opcional al bajar
    """

    local_column: str
    cloud_field: str
    to_cloud: Optional[Transform] = None
    from_cloud: Optional[Transform] = None


def _f(column: str, to_cloud: Optional[Transform] = None, from_cloud: Optional[Transform] = None) -> FieldMapping:
    return FieldMapping(local_column=column, cloud_field=_camel(column), to_cloud=to_cloud, from_cloud=from_cloud)


def _flag(column: str) -> FieldMapping:
    return _f(column, to_cloud=_int_to_bool, from_cloud=_bool_to_int)


@dataclass(frozen=True)
class EntityMapping:
    """Config de un tipo de entidad: tabla local <-> colección de nube."""

    entity_type: EntityType
    fields: List[FieldMapping]

    @property
    def collection(self) -> str:
        return self.entity_type.collection

    @property
    def payload_columns(self) -> List[str]:
        return [m.local_column for m in self.fields]


ENTITY_MAPPINGS: Dict[EntityType, EntityMapping] = {
    EntityType.PROFILE: EntityMapping(
        EntityType.PROFILE,
        [_f("name"), _f("description"), _f("password_hash"), _f("password_hint")],
    ),
    EntityType.ACCOUNT: EntityMapping(
        EntityType.ACCOUNT,
        [
            _f("name"),
            _f("budget_type"),
            _f("account_type"),
            _f("balance"),
            _f("interest_rate"),
            _f("credit_limit"),
            _f("payment_due_date"),
            _f("minimum_payment"),
            _f("website_url"),
            _f("notes"),
        ],
    ),
    EntityType.CATEGORY: EntityMapping(
        EntityType.CATEGORY,
        [
            _f("name"),
            _f("budget_type"),
            _f("bucket_id"),
            _f("category_group"),
            _f("monthly_budget"),
            _flag("is_fixed_expense"),
            _flag("is_active"),
            _flag("tax_deductible_by_default"),
            _flag("is_income_category"),
            _flag("exclude_from_budget"),
            _f("icon"),
        ],
    ),
    EntityType.TRANSACTION: EntityMapping(
        EntityType.TRANSACTION,
        [
            _f("date"),
            _f("description"),
            _f("amount"),
            _f("category_id"),
            _f("bucket_id"),
            _f("budget_type"),
            _f("account_id"),
            _f("to_account_id"),
            _f("linked_transaction_id"),
            _f("project_id"),
            _f("income_source_id"),
            _flag("tax_deductible"),
            _flag("reconciled"),
            _f("notes"),
        ],
    ),
    EntityType.INCOME_SOURCE: EntityMapping(
        EntityType.INCOME_SOURCE,
        [
            _f("name"),
            _f("budget_type"),
            _f("income_type"),
            _f("category_id"),
            _f("expected_amount"),
            _f("frequency"),
            _f("next_expected_date"),
            _f("client_source"),
            _flag("is_active"),
        ],
    ),
    EntityType.PROJECT: EntityMapping(
        EntityType.PROJECT,
        [
            _f("name"),
            _f("budget_type"),
            _f("project_type_id"),
            _f("status_id"),
            _f("income_source_id"),
            _f("budget"),
            _f("date_created"),
            _f("date_completed"),
            _flag("commission_paid"),
            _f("notes"),
        ],
    ),
    EntityType.PROJECT_TYPE: EntityMapping(
        EntityType.PROJECT_TYPE,
        [
            _f("name"),
            _f("budget_type"),
            _f("allowed_statuses", to_cloud=_json_text_to_list, from_cloud=_list_to_json_text),
        ],
    ),
    EntityType.PROJECT_STATUS: EntityMapping(
        EntityType.PROJECT_STATUS,
        [_f("name"), _f("description")],
    ),
}


def get_entity_mapping(entity_type: EntityType) -> EntityMapping:
    return ENTITY_MAPPINGS[entity_type]


def local_profile_id(entity_type: EntityType, row: Mapping[str, Any]) -> Optional[str]:
    """Un perfil es su propio tenant: su profileId es su id."""
    if entity_type is EntityType.PROFILE:
        return row.get("id")
    return row.get("profile_id")


def to_cloud_document(entity_type: EntityType, row: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Mapea una fila local a un documento listo para upsert.

    Reglas:
    - Se copian los campos técnicos: id, profileId, createdAt, updatedAt, deletedAt
    - Cada FieldMapping decide cómo mapear y transformar el valor
    """
    mapping = get_entity_mapping(entity_type)
    doc: Dict[str, Any] = {
        "id": row["id"],
        "profileId": local_profile_id(entity_type, row),
        "createdAt": row.get("created_at"),
        "updatedAt": row.get("updated_at"),
        "deletedAt": row.get("deleted_at"),
    }
    for m in mapping.fields:
        raw = row.get(m.local_column)
        doc[m.cloud_field] = m.to_cloud(raw) if m.to_cloud else raw
    return doc


def from_cloud_document(
    entity_type: EntityType,
    doc: Mapping[str, Any],
    *,
    include_identity: bool = True,
) -> Dict[str, Any]:
    """
    Mapea un documento de nube a columnas locales.

    Copia todos los campos de payload incluyendo deleted_at, de modo que un
    tombstone remoto borra la copia local y un "undelete" la revive.

    Args:
        include_identity: si False, omite id/profile_id/created_at
            (para updates de una fila existente)
    """
    mapping = get_entity_mapping(entity_type)
    row: Dict[str, Any] = {
        "updated_at": doc.get("updatedAt"),
        "deleted_at": doc.get("deletedAt"),
    }
    if include_identity:
        row["id"] = doc["id"]
        row["created_at"] = doc.get("createdAt") or doc.get("updatedAt")
        if entity_type is not EntityType.PROFILE:
            row["profile_id"] = doc.get("profileId")

    for m in mapping.fields:
        if m.cloud_field not in doc:
            # merge: campo ausente en la nube no pisa el valor local
            if include_identity:
                row[m.local_column] = None
            continue
        raw = doc.get(m.cloud_field)
        row[m.local_column] = m.from_cloud(raw) if m.from_cloud else raw
    return row
