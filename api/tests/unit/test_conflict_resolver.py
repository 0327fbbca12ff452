from budget_sync.application.services.conflict_resolver import (
    should_apply_remote,
    should_push_local,
)


def _rec(updated_at):
    return {"id": "a1", "updatedAt": updated_at}


def test_applies_when_local_missing() -> None:
    assert should_apply_remote(None, _rec("2024-01-01T00:00:00Z")) is True


def test_applies_when_remote_strictly_newer() -> None:
    local = _rec("2024-01-01T00:00:00Z")
    remote = _rec("2024-01-02T00:00:00Z")
    assert should_apply_remote(local, remote) is True


def test_equal_timestamps_keep_local() -> None:
    local = _rec("2024-01-01T00:00:00Z")
    remote = _rec("2024-01-01T00:00:00Z")
    assert should_apply_remote(local, remote) is False


def test_older_remote_is_ignored() -> None:
    local = _rec("2024-01-02T00:00:00Z")
    remote = _rec("2024-01-01T00:00:00Z")
    assert should_apply_remote(local, remote) is False


def test_missing_timestamp_always_applies() -> None:
    assert should_apply_remote(_rec(None), _rec("2024-01-01T00:00:00Z")) is True
    assert should_apply_remote(_rec("2024-01-01T00:00:00Z"), _rec(None)) is True
    assert should_apply_remote({"id": "a1"}, {"id": "a1"}) is True


def test_compares_instants_not_strings() -> None:
    # Mismo instante con distinta precision/sufijo: empate, gana el local
    local = _rec("2024-01-01T00:00:00Z")
    remote = _rec("2024-01-01T00:00:00.000000+00:00")
    assert should_apply_remote(local, remote) is False

    # Lexicograficamente menor pero cronologicamente mayor
    local = _rec("2024-01-01T10:00:00+02:00")
    remote = _rec("2024-01-01T09:00:00Z")
    assert should_apply_remote(local, remote) is True


def test_push_guard_mirrors_pull_rule() -> None:
    local = _rec("2024-01-02T00:00:00Z")
    assert should_push_local(None, local) is True
    assert should_push_local(_rec("2024-01-01T00:00:00Z"), local) is True
    assert should_push_local(_rec("2024-01-02T00:00:00.000Z"), local) is False
    assert should_push_local(_rec("2024-01-03T00:00:00Z"), local) is False
