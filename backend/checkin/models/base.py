"""
Database base configuration for SQLAlchemy models.

The engine and session factory built here are the storage handle for the
whole service. Request handlers receive a Session through the get_db
dependency; scripts open one with SessionLocal() and close it themselves.
"""

from typing import Generator
import os

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

# Load environment variables
load_dotenv()

_DATABASE_URL_RAW = os.getenv("DATABASE_URL", "")
_is_production = os.getenv("ENV", "development").lower() == "production"
if not _DATABASE_URL_RAW:
    if _is_production:
        raise RuntimeError(
            "DATABASE_URL is not set or is empty. "
            "A production deployment must point at the relational store."
        )
    DATABASE_URL = "postgresql://localhost:5432/checkin_dev"
else:
    DATABASE_URL = _DATABASE_URL_RAW

# Echo SQL in development only
DEBUG = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")

# Database connection pool settings
POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))  # Number of connections to maintain
POOL_MAX_OVERFLOW = int(
    os.getenv("DB_POOL_MAX_OVERFLOW", "20")
)  # Max extra connections when pool exhausted
POOL_TIMEOUT = int(
    os.getenv("DB_POOL_TIMEOUT", "30")
)  # Seconds to wait for available connection
POOL_RECYCLE = int(
    os.getenv("DB_POOL_RECYCLE", "3600")
)  # Recycle connections after 1 hour
POOL_PRE_PING = os.getenv("DB_POOL_PRE_PING", "True").lower() in (
    "true",
    "1",
    "yes",
)  # Test connections before use


def _engine_kwargs(url: str) -> dict:
    """Build create_engine keyword arguments for the given database URL.

    SQLite (local development and tests) does not take pool sizing and needs
    check_same_thread disabled because FastAPI runs sync endpoints in a
    worker thread pool.
    """
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": POOL_SIZE,
        "max_overflow": POOL_MAX_OVERFLOW,
        "pool_timeout": POOL_TIMEOUT,
        "pool_recycle": POOL_RECYCLE,
        "pool_pre_ping": POOL_PRE_PING,
    }


engine = create_engine(DATABASE_URL, echo=DEBUG, **_engine_kwargs(DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """
    SQLAlchemy 2.0 declarative base class.
    """

    pass


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function to get a database session.

    Yields a session and ensures it is rolled back on error and always closed.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
