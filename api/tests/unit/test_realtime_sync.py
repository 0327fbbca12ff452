"""
Tests del manager de listeners en tiempo real. Los cambios se simulan
invocando los callbacks que registro el InMemoryCloudStore.
"""
import pytest

from conftest import cloud_account, make_account, make_profile
from budget_sync.application.use_cases.realtime_sync import RealtimeSubscriptionManager
from budget_sync.domain.entities.sync import EntityType
from budget_sync.shared.exceptions.sync import CloudStoreError


@pytest.fixture
def realtime(orchestrator, cloud_store, auth_gate):
    return RealtimeSubscriptionManager(
        orchestrator, cloud_store, auth_gate, ["accounts", "categories"]
    )


@pytest.mark.asyncio
async def test_enable_subscribes_each_collection(realtime, cloud_store) -> None:
    dispose = realtime.enable("p1")

    assert set(cloud_store.subscriptions) == {("accounts", "p1"), ("categories", "p1")}
    assert set(cloud_store.error_handlers) == set(cloud_store.subscriptions)
    assert realtime.is_enabled()
    assert realtime.profile_id == "p1"

    dispose()
    assert cloud_store.subscriptions == {}
    assert not realtime.is_enabled()


@pytest.mark.asyncio
async def test_enable_without_session_is_a_no_op(realtime, cloud_store, auth_gate) -> None:
    auth_gate.identity = None

    dispose = realtime.enable("p1")
    dispose()

    assert cloud_store.subscriptions == {}
    assert not realtime.is_enabled()


@pytest.mark.asyncio
async def test_enable_replaces_previous_listeners(realtime, cloud_store) -> None:
    realtime.enable("p1")
    realtime.enable("p2")

    assert set(cloud_store.subscriptions) == {("accounts", "p2"), ("categories", "p2")}
    assert realtime.profile_id == "p2"


@pytest.mark.asyncio
async def test_change_pulls_collection_and_notifies(realtime, cloud_store, local_store) -> None:
    await local_store.entity(EntityType.PROFILE).create(make_profile("p1"))
    await local_store.entity(EntityType.ACCOUNT).create(make_account(balance=100.0))
    updates = []

    async def on_update() -> None:
        updates.append("accounts")

    realtime.enable("p1", on_update)
    cloud_store.put("accounts", cloud_account(balance=150.0))
    await cloud_store.subscriptions[("accounts", "p1")]([cloud_account(balance=150.0)])

    row = await local_store.entity(EntityType.ACCOUNT).get_by_id("a1")
    assert row["balance"] == 150.0
    assert updates == ["accounts"]


@pytest.mark.asyncio
async def test_sync_callback_can_be_plain_function(realtime, cloud_store, local_store) -> None:
    await local_store.entity(EntityType.PROFILE).create(make_profile("p1"))
    updates = []

    realtime.enable("p1", lambda: updates.append(True))
    await cloud_store.subscriptions[("categories", "p1")]([])

    assert updates == [True]


@pytest.mark.asyncio
async def test_change_is_applied_while_cycle_runs(realtime, cloud_store, orchestrator, local_store) -> None:
    await local_store.entity(EntityType.PROFILE).create(make_profile("p1"))
    await local_store.entity(EntityType.ACCOUNT).create(make_account(balance=100.0))
    updates = []
    realtime.enable("p1", lambda: updates.append(True))
    orchestrator._is_syncing = True

    cloud_store.put("accounts", cloud_account(balance=150.0, updated_at="2024-01-02T00:00:00.000Z"))
    await cloud_store.subscriptions[("accounts", "p1")]([cloud_account(balance=150.0)])
    orchestrator._is_syncing = False

    row = await local_store.entity(EntityType.ACCOUNT).get_by_id("a1")
    assert row["balance"] == 150.0
    assert updates == [True]


@pytest.mark.asyncio
async def test_pull_errors_are_logged_not_raised(realtime, cloud_store, local_store) -> None:
    await local_store.entity(EntityType.PROFILE).create(make_profile("p1"))
    updates = []
    realtime.enable("p1", lambda: updates.append(True))
    cloud_store.fail_on["accounts"] = CloudStoreError("permission denied", status=403)

    await cloud_store.subscriptions[("accounts", "p1")]([])

    assert updates == []
    assert realtime.is_enabled()


@pytest.mark.asyncio
async def test_listener_errors_are_logged(realtime, cloud_store) -> None:
    realtime.enable("p1")

    cloud_store.error_handlers[("accounts", "p1")](CloudStoreError("stream closed"))

    assert realtime.is_enabled()


@pytest.mark.asyncio
async def test_unknown_collection_is_rejected(orchestrator, cloud_store, auth_gate) -> None:
    with pytest.raises(ValueError):
        RealtimeSubscriptionManager(orchestrator, cloud_store, auth_gate, ["budgets"])
