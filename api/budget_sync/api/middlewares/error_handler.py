"""
Middleware para manejo centralizado de errores.
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from loguru import logger


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Ultima red para errores que no son AppException.
    Las AppException (401/502...) las traduce el handler global de la app.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            # Escapar llaves para evitar error de formato en loguru
            error_msg = str(exc).replace("{", "{{").replace("}", "}}")
            logger.error(f"Error no manejado en {request.method} {request.url.path}: {error_msg}")

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": "INTERNAL_SERVER_ERROR",
                    "message": "Ha ocurrido un error interno del servidor",
                    "details": {}
                }
            )
