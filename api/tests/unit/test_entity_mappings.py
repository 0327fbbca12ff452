import json

from budget_sync.application.services.entity_mappings import (
    from_cloud_document,
    get_entity_mapping,
    to_cloud_document,
)
from budget_sync.domain.entities.sync import EntityType


def test_account_row_maps_to_camel_case_document() -> None:
    row = {
        "id": "a1",
        "profile_id": "p1",
        "name": "Banco",
        "budget_type": "household",
        "account_type": "checking",
        "balance": 100.0,
        "interest_rate": None,
        "website_url": "https://bank.example",
        "created_at": "2024-01-01T00:00:00.000Z",
        "updated_at": "2024-01-02T00:00:00.000Z",
        "deleted_at": None,
    }

    doc = to_cloud_document(EntityType.ACCOUNT, row)

    assert doc["id"] == "a1"
    assert doc["profileId"] == "p1"
    assert doc["budgetType"] == "household"
    assert doc["accountType"] == "checking"
    assert doc["websiteUrl"] == "https://bank.example"
    assert doc["updatedAt"] == "2024-01-02T00:00:00.000Z"
    assert doc["deletedAt"] is None
    assert "budget_type" not in doc


def test_profile_is_its_own_tenant() -> None:
    row = {"id": "p1", "name": "Casa", "password_hash": "x", "updated_at": "2024-01-01T00:00:00Z"}
    doc = to_cloud_document(EntityType.PROFILE, row)
    assert doc["profileId"] == "p1"
    assert doc["passwordHash"] == "x"

    back = from_cloud_document(EntityType.PROFILE, doc)
    assert "profile_id" not in back


def test_integer_flags_travel_as_booleans() -> None:
    row = {"id": "c1", "profile_id": "p1", "name": "Comida", "is_active": 1, "is_fixed_expense": 0}
    doc = to_cloud_document(EntityType.CATEGORY, row)
    assert doc["isActive"] is True
    assert doc["isFixedExpense"] is False

    back = from_cloud_document(EntityType.CATEGORY, doc)
    assert back["is_active"] == 1
    assert back["is_fixed_expense"] == 0


def test_allowed_statuses_json_text_becomes_array() -> None:
    row = {
        "id": "pt1",
        "profile_id": "p1",
        "name": "Diseño",
        "allowed_statuses": json.dumps(["s1", "s2"]),
    }
    doc = to_cloud_document(EntityType.PROJECT_TYPE, row)
    assert doc["allowedStatuses"] == ["s1", "s2"]

    back = from_cloud_document(EntityType.PROJECT_TYPE, doc)
    assert json.loads(back["allowed_statuses"]) == ["s1", "s2"]


def test_from_cloud_copies_tombstone_fields() -> None:
    doc = {
        "id": "a1",
        "profileId": "p1",
        "name": "Banco",
        "balance": 10,
        "updatedAt": "2024-01-03T00:00:00.000Z",
        "deletedAt": "2024-01-03T00:00:00.000Z",
    }
    row = from_cloud_document(EntityType.ACCOUNT, doc)
    assert row["profile_id"] == "p1"
    assert row["deleted_at"] == "2024-01-03T00:00:00.000Z"
    assert row["updated_at"] == "2024-01-03T00:00:00.000Z"


def test_update_payload_skips_absent_fields_and_identity() -> None:
    doc = {"id": "a1", "profileId": "p1", "balance": 150, "updatedAt": "2024-01-02T00:00:00Z"}
    row = from_cloud_document(EntityType.ACCOUNT, doc, include_identity=False)

    assert row["balance"] == 150
    assert row["deleted_at"] is None
    assert "id" not in row
    assert "profile_id" not in row
    # merge: campos que no vinieron no pisan el valor local
    assert "name" not in row


def test_every_entity_type_has_mapping() -> None:
    for entity in EntityType:
        mapping = get_entity_mapping(entity)
        assert mapping.fields
        assert len(set(mapping.payload_columns)) == len(mapping.payload_columns)
