# db.py
# Role: Database bootstrap for the finance tracker API.
#       Builds the SQLAlchemy engine and session factory from a URL and
#       defines the declarative Base. The app factory owns the engine;
#       nothing here is a process-wide connection.

"""
Database setup for the finance tracker.

- Default: SQLite at <project_root>/database/finance.db (see config.py)
- SQLite connections enforce foreign keys and open every transaction with
  BEGIN IMMEDIATE, so a check-then-write sequence runs under the write lock.
"""

import logging
import os

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Declarative base class for ORM models
Base = declarative_base()


def _ensure_sqlite_dir(database_url: str) -> None:
    db_path = make_url(database_url).database
    if db_path and db_path != ":memory:":
        directory = os.path.dirname(os.path.abspath(db_path))
        os.makedirs(directory, exist_ok=True)  # ensure folder exists


def _install_sqlite_hooks(engine: Engine) -> None:
    # pysqlite emits its own BEGIN lazily; take control of it so that the
    # transaction starts (and locks) before the first validation query.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(database_url: str) -> Engine:
    """
    Create an engine for the given SQLAlchemy URL.

    In-memory SQLite URLs share a single connection (StaticPool) so every
    session sees the same database.
    """
    url = make_url(database_url)

    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, pool_pre_ping=True)

    _ensure_sqlite_dir(database_url)

    # For SQLite, we need check_same_thread=False for FastAPI (threaded request handling)
    kwargs = {"connect_args": {"check_same_thread": False}}
    if url.database in (None, "", ":memory:"):
        kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, **kwargs)
    _install_sqlite_hooks(engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Standard session factory used via dependency injection (see app/deps.py:get_db)."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def init_db(engine: Engine) -> None:
    """Create database tables (only if they don't exist yet)."""
    # models must be imported so their tables are registered on Base.metadata
    import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready (%s)", engine.url.render_as_string(hide_password=True))
