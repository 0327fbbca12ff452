"""
Interfaz del document store en la nube.

Todo queda bajo la identidad autenticada (users/{uid}/{collection}/{id}).
Los documentos viajan como dict con campos camelCase e incluyen
siempre `id` y `profileId`.
"""
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

Document = Dict[str, Any]
Unsubscribe = Callable[[], None]
ChangeCallback = Callable[[List[Document]], Union[None, Awaitable[None]]]


class ICloudStore(ABC):
    """Contrato del document store multi-tenant."""

    @abstractmethod
    async def upsert(self, collection: str, record: Document) -> None:
        """Merge por id (no reemplaza el documento completo)."""

    @abstractmethod
    async def query_by_profile(self, collection: str, profile_id: str) -> List[Document]:
        """Documentos de la colección con profileId == profile_id."""

    @abstractmethod
    async def get_one(self, collection: str, record_id: str) -> Optional[Document]:
        """Documento por id, o None."""

    @abstractmethod
    async def delete_one(self, collection: str, record_id: str) -> None:
        """Borra físicamente un documento."""

    @abstractmethod
    async def delete_all_for_profile(self, collection: str, profile_id: str) -> int:
        """Borra todos los documentos del perfil. Retorna cuántos."""

    @abstractmethod
    def subscribe(
        self,
        collection: str,
        profile_id: str,
        on_change: ChangeCallback,
        on_error: Optional[Callable[[BaseException], None]] = None,
    ) -> Unsubscribe:
        """Escucha cambios de la colección para el perfil. Retorna un cancelador."""
