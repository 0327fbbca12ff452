"""
CLI: sync local <-> nube para un perfil.

Variables de entorno requeridas:
  - FIREBASE_API_KEY
  - FIREBASE_PROJECT_ID
  - FIREBASE_EMAIL / FIREBASE_PASSWORD

Ejecución:
  python scripts/run_sync.py --profile-id <id>
  python scripts/run_sync.py --profile-id <id> --auto --interval 5
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger
from dotenv import load_dotenv

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

load_dotenv(_API_ROOT / ".env", override=False)

from budget_sync.core.config import settings
from budget_sync.core.container import build_sync_container
from budget_sync.infrastructure.database.session import init_db
from budget_sync.shared.exceptions.base import AppException


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sync local <-> nube de un perfil")
    parser.add_argument("--profile-id", required=True, help="Perfil a sincronizar")
    parser.add_argument(
        "--auto",
        action="store_true",
        help="Mantiene el auto-sync corriendo hasta Ctrl+C",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.SYNC_INTERVAL_MINUTES,
        help="Minutos entre ciclos en modo --auto",
    )
    return parser.parse_args(argv)


def _print_progress(progress) -> None:
    if progress.current is not None:
        logger.info(f"[{progress.current}/{progress.total}] {progress.message}")
    else:
        logger.info(progress.message)


async def run(args: argparse.Namespace) -> int:
    if not settings.FIREBASE_EMAIL or not settings.FIREBASE_PASSWORD:
        logger.error("Faltan FIREBASE_EMAIL / FIREBASE_PASSWORD")
        return 2

    container = build_sync_container(settings)
    try:
        await init_db(container.engine)
        await container.auth_gate.sign_in(settings.FIREBASE_EMAIL, settings.FIREBASE_PASSWORD)
        container.orchestrator.on_sync_progress(_print_progress)

        if not args.auto:
            await container.orchestrator.sync_profile(args.profile_id)
            return 0

        container.auto_sync.start(args.profile_id, args.interval)
        logger.info("Auto-sync corriendo. Ctrl+C para salir.")
        await asyncio.Event().wait()
        return 0

    except AppException as e:
        logger.error(f"{e.error_code}: {e.message}")
        return 1
    finally:
        await container.close()


def main() -> int:
    args = _parse_args()
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("Interrumpido por el usuario")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
