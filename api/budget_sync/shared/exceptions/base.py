"""
Excepción base del motor de sync.

Toda excepción propia lleva status HTTP y código de error, de modo que la
API la traduce sin conocer el tipo concreto.
"""
from typing import Any, Dict, Optional


class AppException(Exception):
    """
    Raíz de las excepciones de la aplicación.

    Args:
        message: Mensaje legible (también se usa en el evento de progreso de error)
        status_code: Status HTTP con el que la API responde
        error_code: Código estable para clientes (p.ej. ENTITY_SYNC_FAILURE)
        details: Datos estructurados del fallo
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Cuerpo JSON de la respuesta de error."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }
