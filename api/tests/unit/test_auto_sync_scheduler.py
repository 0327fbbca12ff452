"""
Tests del auto-sync periodico (APScheduler AsyncIOScheduler real, intervalos cortos).
"""
import asyncio

import pytest
import pytest_asyncio

from budget_sync.application.use_cases.auto_sync_scheduler import AUTO_SYNC_JOB_ID, AutoSyncScheduler
from budget_sync.shared.exceptions.sync import CloudStoreError


class RecordingOrchestrator:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    async def sync_profile(self, profile_id: str) -> None:
        self.calls.append(profile_id)
        if self.error is not None:
            raise self.error


@pytest.fixture
def recorder():
    return RecordingOrchestrator()


@pytest_asyncio.fixture
async def auto_sync(recorder, auth_gate, settings_repository):
    scheduler = AutoSyncScheduler(recorder, auth_gate, settings_repository)
    yield scheduler
    scheduler.shutdown()


@pytest.mark.asyncio
async def test_start_runs_a_cycle_immediately(auto_sync, recorder) -> None:
    assert auto_sync.start("p1", 5) is True
    await asyncio.sleep(0.05)

    assert recorder.calls == ["p1"]
    assert auto_sync.is_running()
    assert auto_sync.profile_id == "p1"
    assert auto_sync._scheduler.get_job(AUTO_SYNC_JOB_ID) is not None


@pytest.mark.asyncio
async def test_start_twice_is_a_no_op(auto_sync, recorder) -> None:
    auto_sync.start("p1", 5)
    assert auto_sync.start("p2", 5) is False
    await asyncio.sleep(0.05)

    assert recorder.calls == ["p1"]
    assert auto_sync.profile_id == "p1"


@pytest.mark.asyncio
async def test_start_without_session_does_nothing(auto_sync, recorder, auth_gate) -> None:
    auth_gate.identity = None

    assert auto_sync.start("p1", 5) is False
    await asyncio.sleep(0.05)

    assert recorder.calls == []
    assert not auto_sync.is_running()


@pytest.mark.asyncio
async def test_invalid_interval_is_rejected(auto_sync) -> None:
    with pytest.raises(ValueError):
        auto_sync.start("p1", 0)
    assert not auto_sync.is_running()


@pytest.mark.asyncio
async def test_interval_fires_repeatedly(auto_sync, recorder) -> None:
    auto_sync.start("p1", 0.002)  # ~120 ms
    await asyncio.sleep(0.6)

    assert len(recorder.calls) >= 3
    assert set(recorder.calls) == {"p1"}


@pytest.mark.asyncio
async def test_stop_is_idempotent_and_cancels_job(auto_sync, recorder) -> None:
    auto_sync.start("p1", 0.002)
    await asyncio.sleep(0.05)

    auto_sync.stop()
    auto_sync.stop()
    count = len(recorder.calls)
    await asyncio.sleep(0.3)

    assert len(recorder.calls) == count
    assert not auto_sync.is_running()
    assert auto_sync._scheduler.get_job(AUTO_SYNC_JOB_ID) is None


@pytest.mark.asyncio
async def test_stop_before_start(auto_sync) -> None:
    auto_sync.stop()
    assert not auto_sync.is_running()


@pytest.mark.asyncio
async def test_cycle_errors_do_not_stop_the_scheduler(auth_gate, settings_repository) -> None:
    failing = RecordingOrchestrator(error=CloudStoreError("sin red"))
    scheduler = AutoSyncScheduler(failing, auth_gate, settings_repository)
    try:
        scheduler.start("p1", 0.002)
        await asyncio.sleep(0.4)
        assert len(failing.calls) >= 2
        assert scheduler.is_running()
    finally:
        scheduler.shutdown()


@pytest.mark.asyncio
async def test_enabled_flag_is_persisted(auto_sync) -> None:
    assert await auto_sync.get_auto_sync_enabled() is False

    await auto_sync.set_auto_sync_enabled(True)
    assert await auto_sync.get_auto_sync_enabled() is True

    await auto_sync.set_auto_sync_enabled(False)
    assert await auto_sync.get_auto_sync_enabled() is False
