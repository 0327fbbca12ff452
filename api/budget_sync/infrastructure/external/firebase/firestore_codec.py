"""
Codec de valores tipados de Firestore REST.

Firestore no acepta JSON plano: cada valor viaja envuelto en su tipo
(`stringValue`, `integerValue`, `mapValue`...). Aquí se traduce en ambos
sentidos entre dict Python y `{"fields": {...}}`.

Los campos de tiempo de sync viajan como `timestampValue` con precision de
microsegundos (la que guarda Firestore) y vuelven como texto ISO-8601 UTC con
sufijo Z. Un timestamp que no se puede interpretar viaja como string: el
resolver de conflictos lo trata como ausente.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, FrozenSet, Mapping

from loguru import logger

from budget_sync.shared.utils.datetime_utils import DateTimeUtils

TIMESTAMP_PRECISION = "microseconds"

TIMESTAMP_FIELDS: FrozenSet[str] = frozenset({"createdAt", "updatedAt", "deletedAt", "syncedAt"})


class FirestoreCodecError(ValueError):
    """Valor que no se puede codificar/decodificar."""


def encode_value(value: Any, *, as_timestamp: bool = False) -> Dict[str, Any]:
    if value is None:
        return {"nullValue": None}
    if as_timestamp:
        dt = DateTimeUtils.from_iso_string(value)
        if dt is None:
            logger.warning(f"Timestamp no interpretable, se envía como texto: {value!r}")
            return encode_value(value)
        return {"timestampValue": DateTimeUtils.to_iso_string(dt, TIMESTAMP_PRECISION)}
    # bool antes que int: bool es subclase de int
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        # int64 viaja como string
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        return {"timestampValue": DateTimeUtils.to_iso_string(value, TIMESTAMP_PRECISION)}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    if isinstance(value, Mapping):
        return {"mapValue": {"fields": {str(k): encode_value(v) for k, v in value.items()}}}
    raise FirestoreCodecError(f"Tipo no soportado: {type(value).__name__}")


def decode_value(value: Mapping[str, Any]) -> Any:
    if "nullValue" in value:
        return None
    if "stringValue" in value:
        return value["stringValue"]
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "timestampValue" in value:
        dt = DateTimeUtils.from_iso_string(value["timestampValue"])
        return DateTimeUtils.to_iso_string(dt, TIMESTAMP_PRECISION) if dt else value["timestampValue"]
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    if "referenceValue" in value:
        return value["referenceValue"]
    raise FirestoreCodecError(f"Valor Firestore desconocido: {sorted(value)}")


def encode_fields(record: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    """dict plano -> `fields` de Firestore."""
    return {
        key: encode_value(val, as_timestamp=key in TIMESTAMP_FIELDS)
        for key, val in record.items()
    }


def decode_fields(fields: Mapping[str, Mapping[str, Any]]) -> Dict[str, Any]:
    """`fields` de Firestore -> dict plano."""
    return {key: decode_value(val) for key, val in fields.items()}


def decode_document(document: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Documento REST completo (`name`, `fields`, ...) -> dict plano.
    Si el documento no trae `id` en sus campos se toma del final del `name`.
    """
    data = decode_fields(document.get("fields", {}))
    if "id" not in data and document.get("name"):
        data["id"] = document["name"].rsplit("/", 1)[-1]
    return data
