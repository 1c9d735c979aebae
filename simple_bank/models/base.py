"""
Database engine, session management, and base model.

This module is the foundation for all database operations.
Every model inherits from Base. Every request gets a session
from get_db().
"""

import math
from datetime import datetime, timezone

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from simple_bank.config import get_settings

settings = get_settings()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_store_engine(url: str, busy_timeout: float | None = None) -> Engine:
    """
    Create an engine for the transfer store.

    pool_pre_ping=True tests connections before using them,
    which handles cases where the database restarted or a
    connection went stale.

    For SQLite, pysqlite's implicit transaction handling is
    replaced with an explicit BEGIN IMMEDIATE. A writer then
    takes the database lock when its transaction opens and
    concurrent writers wait on the busy timeout instead of
    failing halfway through a unit of work.

    A connection carrying the "lock_timeout" execution option
    (seconds) waits at most that long for locks: the SQLite busy
    timeout is lowered for that transaction, and PostgreSQL gets
    SET LOCAL lock_timeout and statement_timeout.
    """
    if not url.startswith("sqlite"):
        engine = create_engine(url, pool_pre_ping=True)

        @event.listens_for(engine, "begin")
        def _bound_lock_waits(conn):
            lock_timeout = conn.get_execution_options().get("lock_timeout")
            if lock_timeout is None or conn.dialect.name != "postgresql":
                return
            ms = max(1, int(lock_timeout * 1000))
            conn.exec_driver_sql(f"SET LOCAL lock_timeout = {ms}")
            conn.exec_driver_sql(f"SET LOCAL statement_timeout = {ms}")

        return engine

    if busy_timeout is None:
        busy_timeout = settings.SQLITE_BUSY_TIMEOUT

    engine = create_engine(
        url,
        pool_pre_ping=True,
        connect_args={"check_same_thread": False, "timeout": busy_timeout},
    )

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        # Reset on every begin: pooled connections keep the last value
        wait = busy_timeout
        lock_timeout = conn.get_execution_options().get("lock_timeout")
        if lock_timeout is not None:
            wait = min(wait, lock_timeout)
        ms = max(0, math.ceil(wait * 1000))
        conn.exec_driver_sql(f"PRAGMA busy_timeout = {ms}")
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


# --- Engine ---
engine = create_store_engine(settings.DATABASE_URL)

# --- Session Factory ---
# autocommit=False means we explicitly control when changes
# are saved: a transfer commits all of its writes or none.
# autoflush=False means SQL is only sent on an explicit
# flush or commit.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, preventing connection leaks.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
