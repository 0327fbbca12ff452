"""
Configuración de fixtures para pytest.

- Base local: SQLite en archivo temporal por test (aiosqlite abre una
  conexión por sesión y ":memory:" no se comparte entre conexiones).
- Nube y auth: fakes en memoria que cumplen los contratos del dominio.
"""
import copy
from typing import Any, Callable, Dict, List, Optional

import pytest
import pytest_asyncio

from budget_sync.domain.entities.identity import Identity
from budget_sync.domain.repositories.auth_gate import IAuthGate
from budget_sync.domain.repositories.cloud_store import ICloudStore
from budget_sync.infrastructure.database.session import (
    close_db,
    create_engine,
    create_sessionmaker,
    init_db,
)
from budget_sync.infrastructure.repositories.local_store import SqlAlchemyLocalStore
from budget_sync.infrastructure.repositories.sync_settings_repository import SyncSettingsRepository
from budget_sync.application.use_cases.sync_orchestrator import SyncOrchestrator


class FakeAuthGate(IAuthGate):
    """Gate controlable desde el test."""

    def __init__(self, identity: Optional[Identity] = None):
        self.identity = identity

    def current_identity(self) -> Optional[Identity]:
        return self.identity

    async def get_id_token(self) -> str:
        return self.identity.id_token if self.identity else ""


class InMemoryCloudStore(ICloudStore):
    """
    Document store en memoria: {collection: {id: doc}}.
    Registra las llamadas para verificar cuánto I/O hizo un ciclo.
    """

    def __init__(self):
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.calls: List[tuple] = []
        self.upserts: List[tuple] = []
        self.fail_on: Dict[str, Exception] = {}
        self.subscriptions: Dict[tuple, Callable] = {}
        self.error_handlers: Dict[tuple, Callable] = {}

    def _check(self, op: str, collection: str) -> None:
        self.calls.append((op, collection))
        error = self.fail_on.get(collection)
        if error is not None:
            raise error

    async def upsert(self, collection: str, record: Dict[str, Any]) -> None:
        self._check("upsert", collection)
        docs = self.collections.setdefault(collection, {})
        merged = dict(docs.get(record["id"], {}))
        merged.update(copy.deepcopy(record))
        merged["syncedAt"] = "2030-01-01T00:00:00.000Z"
        docs[record["id"]] = merged
        self.upserts.append((collection, record["id"]))

    async def query_by_profile(self, collection: str, profile_id: str) -> List[Dict[str, Any]]:
        self._check("query", collection)
        return [
            copy.deepcopy(doc)
            for doc in self.collections.get(collection, {}).values()
            if doc.get("profileId") == profile_id
        ]

    async def get_one(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        self._check("get", collection)
        doc = self.collections.get(collection, {}).get(record_id)
        return copy.deepcopy(doc) if doc else None

    async def delete_one(self, collection: str, record_id: str) -> None:
        self._check("delete", collection)
        self.collections.get(collection, {}).pop(record_id, None)

    async def delete_all_for_profile(self, collection: str, profile_id: str) -> int:
        docs = await self.query_by_profile(collection, profile_id)
        for doc in docs:
            await self.delete_one(collection, doc["id"])
        return len(docs)

    def subscribe(self, collection, profile_id, on_change, on_error=None):
        key = (collection, profile_id)
        self.subscriptions[key] = on_change
        if on_error is not None:
            self.error_handlers[key] = on_error

        def unsubscribe() -> None:
            self.subscriptions.pop(key, None)
            self.error_handlers.pop(key, None)

        return unsubscribe

    # Helpers de test
    def put(self, collection: str, doc: Dict[str, Any]) -> None:
        self.collections.setdefault(collection, {})[doc["id"]] = copy.deepcopy(doc)

    def doc(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        return self.collections.get(collection, {}).get(record_id)

    def reset_calls(self) -> None:
        self.calls.clear()
        self.upserts.clear()


def make_profile(profile_id: str = "p1", updated_at: str = "2024-01-01T00:00:00.000Z") -> Dict[str, Any]:
    return {
        "id": profile_id,
        "name": f"Perfil {profile_id}",
        "description": None,
        "created_at": updated_at,
        "updated_at": updated_at,
    }


def make_account(
    account_id: str = "a1",
    profile_id: str = "p1",
    balance: float = 100.0,
    updated_at: str = "2024-01-01T00:00:00.000Z",
    deleted_at: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "id": account_id,
        "profile_id": profile_id,
        "name": f"Cuenta {account_id}",
        "budget_type": "household",
        "account_type": "checking",
        "balance": balance,
        "created_at": "2024-01-01T00:00:00.000Z",
        "updated_at": updated_at,
        "deleted_at": deleted_at,
    }


def make_category(
    category_id: str = "c1",
    profile_id: str = "p1",
    updated_at: str = "2024-01-01T00:00:00.000Z",
) -> Dict[str, Any]:
    return {
        "id": category_id,
        "profile_id": profile_id,
        "name": f"Categoria {category_id}",
        "budget_type": "household",
        "is_active": 1,
        "is_fixed_expense": 0,
        "created_at": "2024-01-01T00:00:00.000Z",
        "updated_at": updated_at,
    }


def make_transaction(
    transaction_id: str = "t1",
    profile_id: str = "p1",
    account_id: str = "a1",
    updated_at: str = "2024-01-01T00:00:00.000Z",
) -> Dict[str, Any]:
    return {
        "id": transaction_id,
        "profile_id": profile_id,
        "date": "2024-01-01",
        "description": "Supermercado",
        "amount": -42.5,
        "account_id": account_id,
        "reconciled": 0,
        "created_at": "2024-01-01T00:00:00.000Z",
        "updated_at": updated_at,
    }


def cloud_account(
    account_id: str = "a1",
    profile_id: str = "p1",
    balance: float = 150.0,
    updated_at: str = "2024-01-02T00:00:00.000Z",
    deleted_at: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "id": account_id,
        "profileId": profile_id,
        "name": f"Cuenta {account_id}",
        "budgetType": "household",
        "accountType": "checking",
        "balance": balance,
        "createdAt": "2024-01-01T00:00:00.000Z",
        "updatedAt": updated_at,
        "deletedAt": deleted_at,
    }


@pytest.fixture
def identity() -> Identity:
    return Identity(uid="user-1", email="user@example.com", id_token="token-1")


@pytest.fixture
def auth_gate(identity: Identity) -> FakeAuthGate:
    return FakeAuthGate(identity)


@pytest.fixture
def cloud_store() -> InMemoryCloudStore:
    return InMemoryCloudStore()


@pytest_asyncio.fixture
async def make_session_factory(tmp_path):
    """
    Fábrica de bases locales independientes (una por "dispositivo").
    """
    engines = []

    async def factory(name: str = "local"):
        engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / (name + '.db')}")
        await init_db(engine)
        engines.append(engine)
        return create_sessionmaker(engine)

    yield factory

    for engine in engines:
        await close_db(engine)


@pytest_asyncio.fixture
async def session_factory(make_session_factory):
    return await make_session_factory("device-a")


@pytest.fixture
def local_store(session_factory) -> SqlAlchemyLocalStore:
    return SqlAlchemyLocalStore(session_factory)


@pytest.fixture
def settings_repository(session_factory) -> SyncSettingsRepository:
    return SyncSettingsRepository(session_factory)


@pytest.fixture
def orchestrator(local_store, cloud_store, auth_gate, settings_repository) -> SyncOrchestrator:
    return SyncOrchestrator(
        local_store=local_store,
        cloud_store=cloud_store,
        auth_gate=auth_gate,
        settings_repository=settings_repository,
    )
