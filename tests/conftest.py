"""Shared fixtures for the employee directory test suite.

Every test gets its own SQLite file so transactions, savepoints and a second
competing connection behave as they do against a real server database.
"""

import os
import sys
import tempfile
from datetime import date
from pathlib import Path

import pytest

# Keep test runs from writing log files into the project tree.
os.environ.setdefault("EMPDIR_LOGS", tempfile.mkdtemp(prefix="empdir-logs-"))

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import func, select  # noqa: E402

from db.database import create_store_engine, init_db, transaction  # noqa: E402


@pytest.fixture
def engine(tmp_path):
    """Fresh SQLite database with the directory schema."""
    eng = create_store_engine(f"sqlite:///{tmp_path / 'directory.db'}")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def client(engine):
    """In-process API client bound to the per-test database."""
    from fastapi.testclient import TestClient

    from api.main import create_app

    return TestClient(create_app(engine))


@pytest.fixture
def count_rows(engine):
    """count_rows(table, *where) -> number of committed rows."""

    def _count(table, *where):
        with engine.connect() as con:
            return con.execute(select(func.count()).select_from(table).where(*where)).scalar_one()

    return _count


@pytest.fixture
def make_employee(engine):
    """Create an employee through the service and return the stored row."""
    from directory.employees import create_employee

    counter = iter(range(1, 10_000))

    def _make(**overrides):
        n = next(counter)
        fields = {
            "first_name": "Test",
            "last_name": f"Person{n}",
            "email": f"person{n}@example.com",
            "phone": "555-0100",
            "hire_date": date(2024, 1, 15),
        }
        fields.update(overrides)
        with transaction(engine) as con:
            return create_employee(con, fields)

    return _make


@pytest.fixture
def racing_lookup(monkeypatch):
    """Arm the resolver so its first lookup reads on ``con`` and misses, after
    which the competing row appears, as when another transaction commits the
    same name between the loser's lookup and its insert.

    SQLite serializes writers, so the competing row is written on ``con``
    itself, outside the resolver's SAVEPOINT.  That is what a READ COMMITTED
    loser on a server database sees once the winner has committed.

    ``racing_lookup(always_miss=True)`` also makes the re-resolve miss.
    Returns the list of names looked up.
    """
    from sqlalchemy import insert

    from db.schema import departments, roles
    from directory import resolver

    def _arm(always_miss=False):
        real_lookup = resolver._lookup
        calls = []

        def fake_lookup(con, kind, name):
            calls.append(name)
            if len(calls) == 1:
                assert real_lookup(con, kind, name) is None
                table = departments if kind is resolver.ReferenceKind.DEPARTMENT else roles
                values = {"name": name}
                if table is roles:
                    values["permissions"] = {}
                con.execute(insert(table).values(**values))
                return None
            if always_miss:
                return None
            return real_lookup(con, kind, name)

        monkeypatch.setattr(resolver, "_lookup", fake_lookup)
        return calls

    return _arm
