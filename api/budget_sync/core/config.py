"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales del motor de sync.
Soporta configuracion dinamica para desarrollo (ENVIRONMENT=development)
y produccion (ENVIRONMENT=production).
"""
import json
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field, computed_field


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.

    Grupos principales:
    - Aplicacion/servidor: APP_NAME, HOST, PORT, ENVIRONMENT
    - Base local embebida: DATABASE_URL (SQLite via aiosqlite por defecto)
    - Nube: FIREBASE_* / FIRESTORE_* (Firestore + Firebase Auth via REST)
    - Sync: intervalo del auto-sync y colecciones con escucha en tiempo real
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="Dual Budget Sync")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="127.0.0.1")
    PORT: int = Field(default=8000)

    # CORS (acepta lista JSON o "*" para todos los origenes)
    CORS_ORIGINS: str = Field(default="*")

    # Base de datos local (un archivo por instalacion, multi-perfil)
    DATABASE_URL: str = Field(default="")
    DATABASE_PATH: str = Field(default="./budget_sync.db")

    # Firebase / Firestore
    FIREBASE_PROJECT_ID: str = Field(default="")
    FIREBASE_API_KEY: str = Field(default="")
    FIRESTORE_BASE_URL: str = Field(default="https://firestore.googleapis.com/v1")
    FIREBASE_AUTH_BASE_URL: str = Field(default="https://identitytoolkit.googleapis.com/v1")
    FIREBASE_TOKEN_BASE_URL: str = Field(default="https://securetoken.googleapis.com/v1")
    CLOUD_TIMEOUT_SECONDS: float = Field(default=30.0)

    # Credenciales para el CLI (scripts/run_sync.py)
    FIREBASE_EMAIL: str = Field(default="")
    FIREBASE_PASSWORD: str = Field(default="")

    # Sync
    SYNC_INTERVAL_MINUTES: float = Field(default=5)
    AUTO_SYNC_PROFILE_ID: Optional[str] = Field(default=None)
    # Lista separada por comas (nombres de coleccion en la nube)
    REALTIME_COLLECTIONS: str = Field(default="accounts,categories")
    REALTIME_POLL_SECONDS: float = Field(default=15.0)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/budget_sync.log")

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente.
        Si no, construye una URL SQLite async desde DATABASE_PATH.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"sqlite+aiosqlite:///{self.DATABASE_PATH}"

    @computed_field
    @property
    def is_development(self) -> bool:
        """Indica si el entorno es de desarrollo."""
        return self.ENVIRONMENT.lower() == "development"

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


def get_cors_origins(cors_string: str) -> List[str]:
    """
    Parsea la configuracion de CORS.
    Acepta "*" para todos los origenes o una lista JSON.
    """
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        # Si no es JSON valido, retornar como lista simple
        return [origin.strip() for origin in cors_string.split(",")]


def get_realtime_collections(raw: str) -> List[str]:
    """
    Parsea la lista de colecciones con escucha en tiempo real.
    Acepta "accounts,categories" o "*" para todas las colecciones sincronizables.
    """
    if raw.strip() == "*":
        from budget_sync.domain.entities.sync import EntityType
        return [entity.collection for entity in EntityType]
    return [name.strip() for name in raw.split(",") if name.strip()]


# Instancia global de configuracion
settings = Settings()
