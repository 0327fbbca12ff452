"""
Manejadores de eventos de inicio y cierre de la aplicacion.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI
from loguru import logger

from budget_sync.core.config import settings
from budget_sync.core.container import build_sync_container
from budget_sync.infrastructure.database.session import init_db
from budget_sync.shared.exceptions.base import AppException


def startup_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de inicio de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de inicio
    """
    async def startup() -> None:
        """Inicializa recursos al inicio de la aplicacion."""
        try:
            logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
            logger.info(f"Entorno: {settings.ENVIRONMENT}")

            # Configurar logging adicional
            logger.add(
                settings.LOG_FILE,
                rotation="500 MB",
                retention="10 days",
                level=settings.LOG_LEVEL
            )

            # Validar configuracion critica
            _validate_config()

            # Los tests inyectan su propio contenedor
            if getattr(app.state, "container", None) is None:
                app.state.container = build_sync_container(settings)

            container = app.state.container
            if container.engine is not None:
                await init_db(container.engine)
                logger.info("Base de datos inicializada")

            await _maybe_sign_in(container)
            await _maybe_start_auto_sync(container)

            logger.success("Aplicacion iniciada correctamente")

        except Exception as e:
            logger.error(f"Error durante startup: {e}")
            logger.exception("Detalle del error:")
            raise

    return startup


def _validate_config() -> None:
    """Valida que la configuracion critica este presente."""
    warnings = []

    if not settings.FIREBASE_PROJECT_ID:
        warnings.append("FIREBASE_PROJECT_ID no configurado - el sync con la nube no funcionara")
    if not settings.FIREBASE_API_KEY:
        warnings.append("FIREBASE_API_KEY no configurada - no se podra iniciar sesion")

    for warning in warnings:
        logger.warning(f"CONFIG: {warning}")


async def _maybe_sign_in(container) -> None:
    """Inicia sesion con las credenciales del entorno, si estan definidas."""
    if not (settings.FIREBASE_EMAIL and settings.FIREBASE_PASSWORD):
        return
    if container.auth_gate.current_identity() is not None:
        return
    try:
        await container.auth_gate.sign_in(settings.FIREBASE_EMAIL, settings.FIREBASE_PASSWORD)
    except AppException as e:
        logger.warning(f"No se pudo iniciar sesion con FIREBASE_EMAIL: {e.message}")


async def _maybe_start_auto_sync(container) -> None:
    """Arranca el auto-sync si quedo habilitado y hay perfil configurado."""
    if not settings.AUTO_SYNC_PROFILE_ID:
        return
    if not await container.auto_sync.get_auto_sync_enabled():
        return
    container.auto_sync.start(settings.AUTO_SYNC_PROFILE_ID, settings.SYNC_INTERVAL_MINUTES)


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de cierre de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de cierre
    """
    async def shutdown() -> None:
        """Libera recursos al cerrar la aplicacion."""
        logger.info("Cerrando aplicacion...")

        container = getattr(app.state, "container", None)
        if container is not None:
            await container.close()
            logger.info("Auto-sync, listeners y base de datos cerrados")

        logger.success("Aplicacion cerrada correctamente")

    return shutdown


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Ciclo de vida de la app: startup antes de servir, shutdown al salir."""
    await startup_handler(app)()
    try:
        yield
    finally:
        await shutdown_handler(app)()
