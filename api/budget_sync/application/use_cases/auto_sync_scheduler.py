"""
Auto-sync periodico.

Usa un AsyncIOScheduler (APScheduler) con un unico job de intervalo. Cada
disparo lanza sync_profile como tarea independiente (fire-and-forget); si
un ciclo anterior sigue corriendo, el latch del orquestador lo omite.
"""
import asyncio
from typing import Optional, Set

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from budget_sync.application.use_cases.sync_orchestrator import SyncOrchestrator
from budget_sync.domain.repositories.auth_gate import IAuthGate
from budget_sync.infrastructure.repositories.sync_settings_repository import (
    AUTO_SYNC_ENABLED_KEY,
    SyncSettingsRepository,
)

AUTO_SYNC_JOB_ID = "auto_sync"


class AutoSyncScheduler:
    """
    Estados: detenido / corriendo(profile_id).

    A lo sumo un job activo por instancia. No hace cola: los disparos que
    coinciden con un ciclo en curso se pierden.
    """

    def __init__(
        self,
        orchestrator: SyncOrchestrator,
        auth_gate: IAuthGate,
        settings_repository: SyncSettingsRepository,
        scheduler: Optional[AsyncIOScheduler] = None,
    ):
        self.orchestrator = orchestrator
        self.auth_gate = auth_gate
        self.settings_repository = settings_repository
        self._scheduler = scheduler
        self._profile_id: Optional[str] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def profile_id(self) -> Optional[str]:
        return self._profile_id

    def is_running(self) -> bool:
        return self._profile_id is not None

    def start(self, profile_id: str, interval_minutes: float) -> bool:
        """
        Arranca el auto-sync: un ciclo inmediato y luego uno cada
        `interval_minutes`. Debe llamarse con un event loop activo.

        Returns:
            True si se arranco; False si ya corria o no hay sesion
        """
        if self.is_running():
            logger.warning("Auto-sync ya está corriendo")
            return False

        if not self.auth_gate.is_authenticated():
            logger.warning("Usuario no autenticado, no se puede iniciar el auto-sync")
            return False

        if interval_minutes <= 0:
            raise ValueError("interval_minutes debe ser mayor a 0")

        self._profile_id = profile_id
        scheduler = self._ensure_scheduler()
        scheduler.add_job(
            self._tick,
            trigger=IntervalTrigger(minutes=interval_minutes),
            id=AUTO_SYNC_JOB_ID,
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        logger.info(f"Auto-sync iniciado cada {interval_minutes} minutos para el perfil {profile_id}")

        self._fire(profile_id)
        return True

    def stop(self) -> None:
        """Cancela el job y olvida el perfil. Idempotente."""
        if self._scheduler is not None and self._scheduler.get_job(AUTO_SYNC_JOB_ID):
            self._scheduler.remove_job(AUTO_SYNC_JOB_ID)
        if self._profile_id is not None:
            logger.info("Auto-sync detenido")
        self._profile_id = None

    def shutdown(self) -> None:
        """Detiene el auto-sync y el scheduler (cierre de la app)."""
        self.stop()
        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)

    async def get_auto_sync_enabled(self) -> bool:
        return bool(await self.settings_repository.get_value(AUTO_SYNC_ENABLED_KEY, False))

    async def set_auto_sync_enabled(self, enabled: bool) -> None:
        await self.settings_repository.set_value(AUTO_SYNC_ENABLED_KEY, bool(enabled))

    def _ensure_scheduler(self) -> AsyncIOScheduler:
        if self._scheduler is None:
            self._scheduler = AsyncIOScheduler()
        if not self._scheduler.running:
            self._scheduler.start()
        return self._scheduler

    async def _tick(self) -> None:
        if self._profile_id:
            self._fire(self._profile_id)

    def _fire(self, profile_id: str) -> None:
        task = asyncio.get_running_loop().create_task(self._run_cycle(profile_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_cycle(self, profile_id: str) -> None:
        try:
            await self.orchestrator.sync_profile(profile_id)
        except Exception as e:
            logger.error(f"Auto-sync fallido: {e}")
