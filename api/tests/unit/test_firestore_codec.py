import pytest

from budget_sync.application.services.conflict_resolver import should_push_local
from budget_sync.infrastructure.external.firebase.firestore_codec import (
    FirestoreCodecError,
    decode_document,
    decode_fields,
    decode_value,
    encode_fields,
    encode_value,
)


def test_encode_scalars() -> None:
    assert encode_value(None) == {"nullValue": None}
    assert encode_value(True) == {"booleanValue": True}
    assert encode_value(42) == {"integerValue": "42"}
    assert encode_value(1.5) == {"doubleValue": 1.5}
    assert encode_value("hola") == {"stringValue": "hola"}


def test_encode_nested_values() -> None:
    encoded = encode_value({"statuses": ["open", "done"], "count": 2})
    fields = encoded["mapValue"]["fields"]
    assert fields["count"] == {"integerValue": "2"}
    assert fields["statuses"]["arrayValue"]["values"][1] == {"stringValue": "done"}


def test_sync_timestamps_are_encoded_as_timestamps() -> None:
    fields = encode_fields({
        "id": "a1",
        "updatedAt": "2024-01-02T03:04:05Z",
        "deletedAt": None,
        "name": "2024-01-02T03:04:05Z",
    })

    assert fields["updatedAt"] == {"timestampValue": "2024-01-02T03:04:05.000000Z"}
    assert fields["deletedAt"] == {"nullValue": None}
    # Un string que parece fecha fuera de los campos de sync sigue siendo string
    assert fields["name"] == {"stringValue": "2024-01-02T03:04:05Z"}


def test_unparseable_timestamp_travels_as_text() -> None:
    fields = encode_fields({"updatedAt": "ayer"})

    assert fields["updatedAt"] == {"stringValue": "ayer"}
    # Para el resolver es un timestamp ausente: siempre se sincroniza
    assert should_push_local(decode_fields(fields), {"updatedAt": "2024-01-01T00:00:00Z"}) is True


def test_unsupported_type_raises() -> None:
    with pytest.raises(FirestoreCodecError):
        encode_value(object())


def test_decode_normalizes_server_timestamps() -> None:
    assert decode_value({"timestampValue": "2024-01-02T03:04:05.123456789Z"}) == "2024-01-02T03:04:05.123456Z"
    assert decode_value({"integerValue": "7"}) == 7


def test_decode_unknown_value_raises() -> None:
    with pytest.raises(FirestoreCodecError):
        decode_value({"geoPointValue": {"latitude": 0, "longitude": 0}})


def test_decode_document_takes_id_from_name() -> None:
    document = {
        "name": "projects/demo/databases/(default)/documents/users/u1/accounts/a9",
        "fields": {
            "profileId": {"stringValue": "p1"},
            "balance": {"doubleValue": 10.0},
            "isActive": {"booleanValue": True},
        },
    }

    assert decode_document(document) == {
        "id": "a9",
        "profileId": "p1",
        "balance": 10.0,
        "isActive": True,
    }


def test_round_trip_keeps_microseconds() -> None:
    local = {"id": "a1", "updatedAt": "2024-01-01T00:00:00.123456+00:00", "deletedAt": None}

    cloud = decode_fields(encode_fields(local))

    assert cloud["updatedAt"] == "2024-01-01T00:00:00.123456Z"
    # Sin cambios locales el push no vuelve a subir el registro
    assert should_push_local(cloud, local) is False


def test_round_trip_of_millisecond_timestamps() -> None:
    local = {"id": "a1", "updatedAt": "2024-01-01T00:00:00.123Z"}

    assert should_push_local(decode_fields(encode_fields(local)), local) is False
