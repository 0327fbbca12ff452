"""
Resolución de conflictos last-writer-wins.

Funciones puras, libres de I/O. Ambos registros se comparan en forma de
documento de nube (campo `updatedAt`).

Regla:
- Sin copia local -> aplicar remoto.
- Falta cualquiera de los timestamps -> aplicar (evita que un registro quede
  sin sincronizar para siempre).
- Si no, aplicar solo si remoto.updatedAt > local.updatedAt (estricto).
  Con timestamps iguales gana la copia local.

Los timestamps son de reloj de pared del dispositivo que escribió; no hay
compensación de desfase entre relojes.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from budget_sync.shared.utils.datetime_utils import DateTimeUtils

UPDATED_AT_FIELD = "updatedAt"


def _timestamp(record: Mapping[str, Any]):
    return DateTimeUtils.from_iso_string(record.get(UPDATED_AT_FIELD))


def should_apply_remote(
    local: Optional[Mapping[str, Any]],
    remote: Mapping[str, Any],
) -> bool:
    """
    Decide si el registro remoto debe aplicarse sobre la copia local.

    Args:
        local: Copia local (incluyendo tombstones) o None si no existe
        remote: Registro traído de la nube

    Returns:
        True si se debe crear/actualizar la copia local
    """
    if local is None:
        return True

    local_ts = _timestamp(local)
    remote_ts = _timestamp(remote)
    if local_ts is None or remote_ts is None:
        return True

    return remote_ts > local_ts


def should_push_local(
    cloud: Optional[Mapping[str, Any]],
    local: Mapping[str, Any],
) -> bool:
    """
    Guard del push: misma regla con los roles invertidos.

    La nube solo recibe el registro local si no lo tiene, si falta un
    timestamp, o si el local es estrictamente más nuevo.
    """
    return should_apply_remote(cloud, local)
