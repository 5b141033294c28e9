"""
Run Alembic migrations programmatically.

Called on startup when RUN_MIGRATIONS_ON_STARTUP is set. Safe to call
multiple times - Alembic is a no-op if already at head.
"""
from pathlib import Path
import logging

from alembic import command
from alembic.config import Config

from .core.config import settings

logger = logging.getLogger(__name__)


def run_migrations() -> None:
    """
    Run Alembic migrations up to head using the current DATABASE_URL.
    """
    # alembic.ini lives in backend/, one level above this package
    project_root = Path(__file__).resolve().parents[1]
    alembic_ini = project_root / "alembic.ini"

    if not alembic_ini.exists():
        logger.error(f"Alembic config not found at {alembic_ini}")
        raise FileNotFoundError(f"Alembic config not found at {alembic_ini}")

    cfg = Config(str(alembic_ini))
    cfg.set_main_option("script_location", str(project_root / "alembic"))
    # Force URL from runtime settings (overrides alembic.ini default)
    cfg.set_main_option("sqlalchemy.url", settings.database_url)

    db_url = settings.database_url
    logger.info(f"Running Alembic migrations to head on {db_url.split('@')[-1] if '@' in db_url else db_url}")
    try:
        command.upgrade(cfg, "head")
        logger.info("Alembic migrations complete.")
    except Exception as e:
        logger.error(f"Migration failed: {e}", exc_info=True)
        raise
