import sqlite3
from pathlib import Path
from sqlalchemy import Integer, create_engine, event
from sqlalchemy.dialects import mysql
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import QueuePool
from dotenv import load_dotenv
import logging

logger = logging.getLogger(__name__)

# Attempt to load environment variables from the project root
BASE_DIR = Path(__file__).resolve().parent
ENV_PATH = BASE_DIR / ".env"

if ENV_PATH.exists():
    load_dotenv(dotenv_path=ENV_PATH)
else:
    # Fall back to default load (will pick up system env vars if already set)
    load_dotenv()

from config import settings  # noqa: E402  (settings must see the loaded .env)

DATABASE_URL = settings.DATABASE_URL.strip()

# Some hosting environments accidentally prepend "DATABASE_URL=" to the value
# (e.g. when copying `export DATABASE_URL=...`). Strip that prefix if present
PREFIX = "DATABASE_URL="
if DATABASE_URL.startswith(PREFIX):
    DATABASE_URL = DATABASE_URL[len(PREFIX):].strip()

# Provide a sensible default for local development if DATABASE_URL is missing
if not DATABASE_URL:
    default_sqlite_path = BASE_DIR / "library_management.db"
    DATABASE_URL = f"sqlite:///{default_sqlite_path.as_posix()}"
    logger.warning(
        "DATABASE_URL not found in environment. Falling back to SQLite at %s",
        default_sqlite_path
    )


def build_engine_kwargs(url: str) -> dict:
    """Engine options for the given URL; SQLite has different pooling requirements."""
    engine_kwargs = {
        "echo": settings.SQL_ECHO,
        "future": True,
        "pool_pre_ping": True,
    }
    if url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        engine_kwargs.update(
            {
                "poolclass": QueuePool,
                "pool_size": settings.DB_POOL_SIZE,
                "max_overflow": settings.DB_MAX_OVERFLOW,
                "pool_timeout": settings.DB_POOL_TIMEOUT,
                "pool_recycle": settings.DB_POOL_RECYCLE,
            }
        )
    return engine_kwargs


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ships with foreign key enforcement off; ON DELETE rules depend on it
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_engine(DATABASE_URL, **build_engine_kwargs(DATABASE_URL))

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)

Base = declarative_base()

# Log connection pool status for observability
if DATABASE_URL.startswith("sqlite"):
    logger.info("Database configured with SQLite at %s", DATABASE_URL)
else:
    logger.info(
        "Database connection pool configured: size=%s, max_overflow=%s",
        settings.DB_POOL_SIZE, settings.DB_MAX_OVERFLOW
    )



def enum_values(enum_cls):
    """Persist enum members by their value ('Checked Out'), not their name."""
    return [member.value for member in enum_cls]


# MySQL has a native YEAR column; elsewhere a plain integer holds the year
YearType = Integer().with_variant(mysql.YEAR(), "mysql")


def commit_and_refresh(db, instance, description: str):
    """
    Commit the session and refresh `instance`.
    Constraint violations are rolled back, logged and re-raised unchanged.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Failed to {description} - Integrity error | Error: {e.orig}")
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to {description} - Database error | Error: {str(e)}", exc_info=True)
        raise
    if instance is not None:
        db.refresh(instance)
    return instance
