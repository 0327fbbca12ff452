"""
Gestión de engine y sesiones de la base local.
"""
from typing import Optional
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker
)
from sqlalchemy.orm import declarative_base


# Base para modelos de SQLAlchemy
Base = declarative_base()


def _create_engine_args(url: str, echo: bool) -> dict:
    """
    Construye los argumentos del engine segun el tipo de base de datos.
    SQLite (aiosqlite) no usa pool de conexiones configurable.
    """
    args = {
        "echo": echo,
        "future": True,
    }

    if url.startswith("postgresql"):
        args.update({
            "pool_size": 5,
            "max_overflow": 10,
            "pool_pre_ping": True,  # Verifica conexion antes de usar
        })

    return args


def create_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Crea el engine async para la URL dada."""
    return create_async_engine(url, **_create_engine_args(url, echo))


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker:
    """Session factory ligada al engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False
    )


async def init_db(engine: AsyncEngine) -> None:
    """Inicializa la base de datos creando todas las tablas."""
    # Registra los modelos en Base.metadata
    from budget_sync.infrastructure.database import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: Optional[AsyncEngine]) -> None:
    """Cierra las conexiones de la base de datos."""
    if engine is not None:
        await engine.dispose()
