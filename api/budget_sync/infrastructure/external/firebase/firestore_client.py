"""
Document store en la nube sobre Firestore REST v1.

Layout: users/{uid}/{collection}/{id}. Todo queda bajo la identidad
autenticada, y dentro de ella los documentos se filtran por `profileId`.

Requisitos cubiertos:
- httpx async
- upsert con merge (commit + updateMask) y marca `syncedAt` del servidor
- consultas por perfil con runQuery
- escucha de cambios por polling (subscribe)

Sin reintentos: cualquier error HTTP se propaga como CloudStoreError y el
ciclo de sync decide qué hacer.
"""
from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Tuple

import httpx
from loguru import logger

from budget_sync.domain.repositories.auth_gate import IAuthGate
from budget_sync.domain.repositories.cloud_store import (
    ChangeCallback,
    Document,
    ICloudStore,
    Unsubscribe,
)
from budget_sync.infrastructure.external.firebase.firestore_codec import (
    decode_document,
    encode_fields,
    encode_value,
)
from budget_sync.shared.exceptions.auth import NotAuthenticatedException
from budget_sync.shared.exceptions.sync import CloudStoreError

Fingerprint = FrozenSet[Tuple[Any, Any, Any]]


def snapshot_fingerprint(records: List[Document]) -> Fingerprint:
    """Huella de un snapshot: cambia si cambia cualquier (id, updatedAt, deletedAt)."""
    return frozenset((r.get("id"), r.get("updatedAt"), r.get("deletedAt")) for r in records)


class FirestoreCloudStore(ICloudStore):
    """
    Implementación REST del contrato ICloudStore.

    El uid y el bearer token se toman del AuthGate en cada llamada.
    """

    def __init__(
        self,
        project_id: str,
        auth_gate: IAuthGate,
        *,
        base_url: str = "https://firestore.googleapis.com/v1",
        timeout_s: float = 30.0,
        poll_interval_s: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._project_id = project_id
        self._auth = auth_gate
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._poll_interval_s = poll_interval_s
        self._transport = transport

    @property
    def database_path(self) -> str:
        return f"projects/{self._project_id}/databases/(default)/documents"

    def _uid(self) -> str:
        identity = self._auth.current_identity()
        if identity is None:
            raise NotAuthenticatedException()
        return identity.uid

    def _user_path(self) -> str:
        return f"{self.database_path}/users/{self._uid()}"

    def _document_name(self, collection: str, record_id: str) -> str:
        return f"{self._user_path()}/{collection}/{record_id}"

    async def upsert(self, collection: str, record: Document) -> None:
        """
        Merge por id: solo se escriben los campos presentes en `record`.
        `syncedAt` se fija con la hora del servidor.
        """
        record_id = record.get("id")
        if not record_id:
            raise CloudStoreError(f"Documento sin id en {collection}")

        fields = {k: v for k, v in record.items() if k != "syncedAt"}
        write = {
            "update": {
                "name": self._document_name(collection, record_id),
                "fields": encode_fields(fields),
            },
            "updateMask": {"fieldPaths": sorted(fields)},
            "updateTransforms": [
                {"fieldPath": "syncedAt", "setToServerValue": "REQUEST_TIME"}
            ],
        }
        await self._request("POST", f"{self.database_path}:commit", json={"writes": [write]})
        logger.debug(f"[cloud:{collection}] upsert {record_id}")

    async def query_by_profile(self, collection: str, profile_id: str) -> List[Document]:
        body = {
            "structuredQuery": {
                "from": [{"collectionId": collection}],
                "where": {
                    "fieldFilter": {
                        "field": {"fieldPath": "profileId"},
                        "op": "EQUAL",
                        "value": encode_value(profile_id),
                    }
                },
            }
        }
        payload = await self._request("POST", f"{self._user_path()}:runQuery", json=body)
        # runQuery responde una lista; entradas sin "document" son metadatos
        return [
            decode_document(item["document"])
            for item in (payload or [])
            if isinstance(item, dict) and item.get("document")
        ]

    async def get_one(self, collection: str, record_id: str) -> Optional[Document]:
        payload = await self._request(
            "GET", self._document_name(collection, record_id), allow_not_found=True
        )
        return decode_document(payload) if payload else None

    async def delete_one(self, collection: str, record_id: str) -> None:
        await self._request(
            "DELETE", self._document_name(collection, record_id), allow_not_found=True
        )

    async def delete_all_for_profile(self, collection: str, profile_id: str) -> int:
        records = await self.query_by_profile(collection, profile_id)
        for record in records:
            await self.delete_one(collection, record["id"])
        logger.info(f"[cloud:{collection}] {len(records)} documentos eliminados del perfil {profile_id}")
        return len(records)

    def subscribe(
        self,
        collection: str,
        profile_id: str,
        on_change: ChangeCallback,
        on_error: Optional[Callable[[BaseException], None]] = None,
    ) -> Unsubscribe:
        """
        Inicia un watcher que consulta la colección cada `poll_interval_s`.

        Emite el primer snapshot y luego cada vez que cambia su huella.
        Debe llamarse con un event loop activo.
        """
        task = asyncio.get_running_loop().create_task(
            self._watch(collection, profile_id, on_change, on_error),
            name=f"firestore-watch-{collection}-{profile_id}",
        )

        def unsubscribe() -> None:
            if not task.done():
                task.cancel()

        return unsubscribe

    async def _watch(
        self,
        collection: str,
        profile_id: str,
        on_change: ChangeCallback,
        on_error: Optional[Callable[[BaseException], None]],
    ) -> None:
        last: Optional[Fingerprint] = None
        while True:
            try:
                records = await self.query_by_profile(collection, profile_id)
                fingerprint = snapshot_fingerprint(records)
                if fingerprint != last:
                    last = fingerprint
                    result = on_change(records)
                    if inspect.isawaitable(result):
                        await result
            except asyncio.CancelledError:
                raise
            except Exception as e:
                if on_error is not None:
                    on_error(e)
                else:
                    logger.error(f"[cloud:{collection}] error en watcher: {e}")
            await asyncio.sleep(self._poll_interval_s)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        allow_not_found: bool = False,
    ) -> Any:
        """
        Request HTTP autenticada contra Firestore.

        - 2xx: retorna el JSON (o None si no hay cuerpo)
        - 404 con allow_not_found: retorna None
        - resto: CloudStoreError con status y cuerpo
        """
        token = await self._auth.get_id_token()
        headers = {"Authorization": f"Bearer {token}"}
        url = f"{self._base_url}/{path}"

        try:
            async with httpx.AsyncClient(timeout=self._timeout_s, transport=self._transport) as client:
                response = await client.request(method, url, headers=headers, json=json)
        except httpx.HTTPError as e:
            raise CloudStoreError(f"Error de red con Firestore: {e}") from e

        if response.status_code == 404 and allow_not_found:
            return None
        if not 200 <= response.status_code < 300:
            raise CloudStoreError(
                f"Firestore {method} falló {response.status_code}",
                status=response.status_code,
                body=response.text,
            )
        if not response.content:
            return None
        return response.json()
