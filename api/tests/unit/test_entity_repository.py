"""
Tests del store local SQLAlchemy (aiosqlite en archivo temporal).
"""
import pytest

from conftest import make_account, make_profile
from budget_sync.domain.entities.sync import EntityType
from budget_sync.infrastructure.repositories.sync_settings_repository import (
    AUTO_SYNC_ENABLED_KEY,
    LAST_SYNCED_AT_KEY,
)


@pytest.mark.asyncio
async def test_create_and_get_by_id(local_store) -> None:
    accounts = local_store.entity(EntityType.ACCOUNT)
    await accounts.create(make_account())

    row = await accounts.get_by_id("a1")
    assert row["balance"] == 100.0
    assert row["profile_id"] == "p1"
    assert row["deleted_at"] is None


@pytest.mark.asyncio
async def test_soft_delete_leaves_tombstone(local_store) -> None:
    accounts = local_store.entity(EntityType.ACCOUNT)
    await accounts.create(make_account())

    await accounts.delete("a1")

    assert await accounts.get_by_id("a1") is None
    assert await accounts.get_all("p1") == []
    tombstone = await accounts.get_by_id_including_deleted("a1")
    assert tombstone["deleted_at"] is not None
    assert tombstone["updated_at"] == tombstone["deleted_at"]
    assert [r["id"] for r in await accounts.get_all_including_deleted("p1")] == ["a1"]


@pytest.mark.asyncio
async def test_local_update_bumps_updated_at(local_store) -> None:
    accounts = local_store.entity(EntityType.ACCOUNT)
    await accounts.create(make_account(updated_at="2024-01-01T00:00:00.000Z"))

    row = await accounts.update("a1", {"balance": 120.0})

    assert row["balance"] == 120.0
    assert row["updated_at"] > "2024-01-01T00:00:00.000Z"


@pytest.mark.asyncio
async def test_update_ignores_tombstones(local_store) -> None:
    accounts = local_store.entity(EntityType.ACCOUNT)
    await accounts.create(make_account(deleted_at="2024-01-02T00:00:00.000Z"))

    assert await accounts.update("a1", {"balance": 1.0}) is None


@pytest.mark.asyncio
async def test_update_including_deleted_field_copies_timestamps(local_store) -> None:
    accounts = local_store.entity(EntityType.ACCOUNT)
    await accounts.create(make_account(deleted_at="2024-01-02T00:00:00.000Z"))

    row = await accounts.update_including_deleted_field(
        "a1",
        {"balance": 5.0, "deleted_at": None, "updated_at": "2024-01-03T00:00:00.000Z"},
    )

    assert row["deleted_at"] is None
    assert row["updated_at"] == "2024-01-03T00:00:00.000Z"
    assert (await accounts.get_by_id("a1"))["balance"] == 5.0


@pytest.mark.asyncio
async def test_profiles_are_hard_deleted(local_store) -> None:
    profiles = local_store.entity(EntityType.PROFILE)
    await profiles.create(make_profile("p1"))
    assert await local_store.profile_exists("p1") is True

    await profiles.delete("p1")

    assert await profiles.get_by_id_including_deleted("p1") is None
    assert await local_store.profile_ids() == []


@pytest.mark.asyncio
async def test_hard_delete_where_profile_not_in(local_store) -> None:
    accounts = local_store.entity(EntityType.ACCOUNT)
    await accounts.create(make_account("a1", "p1"))
    await accounts.create(make_account("a2", "gone"))
    await accounts.create(make_account("a3", "gone"))

    removed = await accounts.hard_delete_where_profile_not_in(["p1"])

    assert removed == 2
    assert [r["id"] for r in await accounts.get_all_rows()] == ["a1"]


@pytest.mark.asyncio
async def test_settings_repository_roundtrip(settings_repository) -> None:
    assert await settings_repository.get_value(LAST_SYNCED_AT_KEY) is None
    assert await settings_repository.get_value(AUTO_SYNC_ENABLED_KEY, False) is False

    await settings_repository.set_value(AUTO_SYNC_ENABLED_KEY, True)
    await settings_repository.set_value(LAST_SYNCED_AT_KEY, "2024-01-01T00:00:00.000Z")
    await settings_repository.set_value(AUTO_SYNC_ENABLED_KEY, False)

    assert await settings_repository.get_all() == {
        AUTO_SYNC_ENABLED_KEY: False,
        LAST_SYNCED_AT_KEY: "2024-01-01T00:00:00.000Z",
    }
