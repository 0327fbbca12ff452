"""
Servicio HTTP del motor de sync: disparador delgado para la UI.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from budget_sync.api.middlewares.error_handler import ErrorHandlerMiddleware
from budget_sync.api.v1.router import api_router
from budget_sync.core.config import get_cors_origins, settings
from budget_sync.core.events import lifespan
from budget_sync.shared.exceptions.base import AppException


def create_application() -> FastAPI:
    """
    Construye la app. El contenedor de servicios se arma en el lifespan;
    los tests lo inyectan directamente en app.state.container.
    """
    application = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Motor de sincronización local-first (SQLite <-> Firestore)",
        lifespan=lifespan,
    )
    application.state.container = None

    application.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(settings.CORS_ORIGINS),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(ErrorHandlerMiddleware)

    application.include_router(api_router, prefix="/api")

    # 401 sin sesion, 502 si falla un tipo de entidad, etc.
    @application.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @application.get("/health", tags=["Health"])
    async def health_check():
        container = application.state.container
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "is_syncing": bool(container and container.orchestrator.is_sync_in_progress()),
        }

    return application


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
