"""
Database engine, session management, and base model.

This module is the foundation for all database operations.
Every model inherits from Base. Every request gets a session
from get_db().
"""

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from client_ledger.config import get_settings


# --- Engine ---
# Created once per process on first use and reused for every
# request. pool_pre_ping=True tests connections before using
# them, which handles a restarted database or a stale connection.
@lru_cache()
def get_engine() -> Engine:
    settings = get_settings()
    return create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,
    )


# --- Session Factory ---
# autocommit=False means we explicitly control when changes
# are saved. A transaction write and the balance rewrite it
# triggers must be committed together or not at all.
# autoflush=False means SQL is only sent when we flush or commit.
@lru_cache()
def get_session_factory() -> sessionmaker:
    return sessionmaker(
        bind=get_engine(),
        autocommit=False,
        autoflush=False,
    )


# --- Base Model Class ---
class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, preventing connection leaks.
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
