# database.py
"""
SQLAlchemy database connection and session management.

This module provides:
- Database engine configuration (Azure SQL via pymssql in production,
  any SQLAlchemy URL through DATABASE_URL)
- Session factory for dependency injection
- Connection utilities

Usage:
     from database import get_session, engine

     # In FastAPI routes:
     @router.get("/faults")
     def list_faults(db: Session = Depends(get_session)):
          return db.query(Fault).all()
     """
from contextlib import contextmanager
from typing import Generator

import structlog
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

from config import DATABASE_URL, SQL_ECHO

logger = structlog.get_logger(__name__)


def _engine_options(url: str) -> dict:
     if url.startswith("sqlite"):
          return {"connect_args": {"check_same_thread": False}, "echo": SQL_ECHO}
     return {
          "poolclass": QueuePool,
          "pool_size": 5,
          "max_overflow": 10,
          "pool_timeout": 30,
          "pool_recycle": 1800,  # Recycle connections after 30 minutes
          "echo": SQL_ECHO,
     }


# Create SQLAlchemy engine
engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

# Session factory
SessionLocal = sessionmaker(
     bind=engine,
     autocommit=False,
     autoflush=False,
     expire_on_commit=False,
)


def get_session() -> Generator[Session, None, None]:
     """
     FastAPI dependency that provides a database session.

     The session is committed when the request handler returns and rolled
     back if it raises, so a failed mutation leaves stored state unchanged.

     Yields:
          Session: SQLAlchemy database session
     """
     session = SessionLocal()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


@contextmanager
def get_session_context() -> Generator[Session, None, None]:
     """
     Context manager for database sessions (for use outside FastAPI routes).

     Usage:
          with get_session_context() as db:
               users = db.query(User).all()
     """
     session = SessionLocal()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


def init_db() -> None:
     """
     Initialize database tables.

     Creates all tables defined in the models if they don't exist.
     For production, use Alembic migrations instead.
     """
     from models import Base
     Base.metadata.create_all(bind=engine)


def check_connection(bind=None) -> bool:
     """
     Test database connectivity.

     Returns:
          bool: True if connection successful, False otherwise
     """
     try:
          with (bind or engine).connect() as conn:
               conn.execute(text("SELECT 1"))
          return True
     except Exception as e:
          logger.warning("database_connection_failed", error=str(e))
          return False
