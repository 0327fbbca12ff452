"""
Identidad autenticada en la nube.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from budget_sync.shared.utils.datetime_utils import DateTimeUtils


@dataclass(frozen=True)
class Identity:
    """
    Usuario autenticado contra Firebase.

    - uid: raiz de todas las colecciones del usuario (users/{uid}/...)
    - id_token: bearer token para Firestore
    - expires_at: momento de expiracion del id_token (UTC)
    """

    uid: str
    email: Optional[str] = None
    id_token: str = ""
    refresh_token: str = ""
    expires_at: Optional[datetime] = None

    def expires_within(self, seconds: int) -> bool:
        if self.expires_at is None:
            return False
        return DateTimeUtils.now_utc() + timedelta(seconds=seconds) >= self.expires_at
