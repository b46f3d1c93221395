"""
Alembic migration runner.
This module provides functions to run Alembic migrations programmatically.
"""
import logging
from pathlib import Path
from typing import Optional

from sqlalchemy.engine import Connection
from sqlalchemy.exc import OperationalError
from alembic import command
from alembic.config import Config
from database import DATABASE_URL

logger = logging.getLogger(__name__)

ALEMBIC_INI = Path(__file__).resolve().parent / "alembic.ini"


def get_alembic_config(database_url: Optional[str] = None, connection: Optional[Connection] = None) -> Config:
    """
    Alembic configuration for this project.
    An open `connection` takes precedence over `database_url`.
    """
    alembic_cfg = Config(str(ALEMBIC_INI))
    alembic_cfg.set_main_option("sqlalchemy.url", database_url or DATABASE_URL)
    if connection is not None:
        alembic_cfg.attributes["connection"] = connection
    return alembic_cfg


def run_migrations(
    revision: str = "head",
    database_url: Optional[str] = None,
    connection: Optional[Connection] = None
) -> None:
    """
    Upgrade the database to `revision` (latest by default).
    """
    try:
        alembic_cfg = get_alembic_config(database_url, connection)

        logger.info("Running Alembic migrations to %s...", revision)
        command.upgrade(alembic_cfg, revision)
        logger.info("Alembic migrations completed successfully")

    except OperationalError as e:
        logger.error(f"Failed to connect to database during migrations: {e}")
        raise
    except Exception as e:
        logger.error(f"Unexpected error during Alembic migrations: {e}", exc_info=True)
        raise


def downgrade_migrations(
    revision: str = "base",
    database_url: Optional[str] = None,
    connection: Optional[Connection] = None
) -> None:
    """Roll the database back to `revision` (empty schema by default)."""
    alembic_cfg = get_alembic_config(database_url, connection)
    logger.info("Downgrading database to %s...", revision)
    command.downgrade(alembic_cfg, revision)


def get_current_revision(connection: Optional[Connection] = None) -> str:
    """
    Get the current database revision.
    Returns the revision string or 'None' if no migrations have been applied.
    """
    from alembic.runtime.migration import MigrationContext

    try:
        if connection is not None:
            current_rev = MigrationContext.configure(connection).get_current_revision()
        else:
            from database import engine
            with engine.connect() as conn:
                current_rev = MigrationContext.configure(conn).get_current_revision()
        return current_rev if current_rev else 'None'
    except Exception as e:
        logger.error(f"Failed to get current revision: {e}")
        return 'Unknown'
