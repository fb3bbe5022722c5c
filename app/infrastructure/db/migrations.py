"""
Apply alembic migrations programmatically (on startup or from a script)
"""
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

from app.config import get_settings

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[3]


def get_alembic_config() -> Config:
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", get_settings().get_sqlalchemy_url())
    return cfg


def run_migrations(revision: str = "head") -> None:
    """Upgrade the database schema to `revision`"""
    cfg = get_alembic_config()
    logger.info("Applying migrations from %s", cfg.get_main_option("script_location"))
    command.upgrade(cfg, revision)
    logger.info("Migrations applied (target=%s)", revision)
