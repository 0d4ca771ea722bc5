"""SQLAlchemy engine, schema bootstrap and transaction scope for the directory.

Usage:
    from db.database import create_store_engine, init_db, transaction

    engine = create_store_engine()          # URL from config.DATABASE_URL
    init_db(engine)
    with transaction(engine) as con:
        con.execute(...)                    # committed on exit, rolled back on error
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from config import DATABASE_URL, SQLITE_BUSY_TIMEOUT
from db.schema import metadata
from logger_config import setup_logger

logger = setup_logger(__name__)

# SQLSTATE unique_violation
_PG_UNIQUE_VIOLATION = "23505"


def _install_sqlite_hooks(engine: Engine) -> None:
    """Let SQLAlchemy own BEGIN on pysqlite so SAVEPOINTs work."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Disable pysqlite's own BEGIN handling entirely
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    # IMMEDIATE takes the write lock up front: a second writer waits here
    # instead of reading a snapshot it can no longer write from.
    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_store_engine(url: str | None = None, busy_timeout: float | None = None) -> Engine:
    """Return an engine for the directory database.

    SQLite URLs get the pysqlite transaction hooks; everything else is
    assumed to be a pooled server database (Postgres via psycopg2).
    ``busy_timeout`` is how many seconds a SQLite writer waits for the lock.
    """
    url = url or DATABASE_URL
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={
                "check_same_thread": False,
                "timeout": SQLITE_BUSY_TIMEOUT if busy_timeout is None else busy_timeout,
            },
        )
        _install_sqlite_hooks(engine)
    else:
        engine = create_engine(url, pool_pre_ping=True)
    return engine


def init_db(engine: Engine) -> None:
    """Create any missing tables.  Safe to call on every start."""
    metadata.create_all(engine, checkfirst=True)


@contextmanager
def transaction(engine: Engine) -> Generator[Connection, None, None]:
    """One unit of work: commit on success, roll back on any exception.

    A failing rollback is logged and swallowed so the original error is the
    one that propagates.
    """
    con = engine.connect()
    try:
        trans = con.begin()
        try:
            yield con
            trans.commit()
        except Exception:
            try:
                trans.rollback()
            except SQLAlchemyError:
                logger.exception("Rollback failed; abandoning transaction")
            raise
    finally:
        con.close()


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the store rejected a write because of a UNIQUE constraint."""
    orig = exc.orig
    if getattr(orig, "pgcode", None) == _PG_UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(orig)


def check_db(engine: Engine) -> str:
    """Return connection status string for health checks."""
    try:
        with engine.connect() as con:
            con.execute(text("SELECT 1"))
        return "connected"
    except SQLAlchemyError as exc:
        logger.warning(f"Health check query failed: {exc}")
        return "error"
