"""
Interfaz del gate de autenticación.
"""
from abc import ABC, abstractmethod
from typing import Optional

from budget_sync.domain.entities.identity import Identity


class IAuthGate(ABC):
    """Reporta si hay una identidad en la nube."""

    @abstractmethod
    def current_identity(self) -> Optional[Identity]:
        """Identidad actual o None si no hay sesión."""

    @abstractmethod
    async def get_id_token(self) -> str:
        """Bearer token vigente; lo renueva si está por expirar."""

    def is_authenticated(self) -> bool:
        return self.current_identity() is not None
