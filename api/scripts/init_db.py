"""
Script para inicializar la base de datos local.

Crea las tablas si no existen. Para bases versionadas usar `alembic upgrade head`.
"""
import asyncio
import sys
from pathlib import Path

from loguru import logger

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

from budget_sync.core.config import settings
from budget_sync.infrastructure.database.session import close_db, create_engine, init_db


async def main():
    """Función principal para inicializar la base de datos."""
    logger.info(f"Inicializando base de datos: {settings.effective_database_url}")

    engine = create_engine(settings.effective_database_url)
    try:
        await init_db(engine)
        logger.success("Base de datos inicializada correctamente")
    except Exception as e:
        logger.error(f"Error al inicializar base de datos: {e}")
        raise
    finally:
        await close_db(engine)


if __name__ == "__main__":
    asyncio.run(main())
