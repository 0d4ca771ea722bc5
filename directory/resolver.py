"""Reference Resolver: turn a free-text department or role name into a row id.

Employee create/update accept ``department_name`` / ``role_name`` instead of
ids.  A name that does not exist yet is inserted on the fly, inside the
caller's transaction, so the new row is rolled back together with the
employee write if that write fails.

Two transactions resolving the same new name at once both miss on lookup and
both insert; the store's UNIQUE(name) lets only one through.  The loser's
insert runs under a SAVEPOINT, so it can roll back just that statement and
read the row the winner committed.  On SQLite, transactions start with
BEGIN IMMEDIATE, so the second writer waits for the first to commit and its
lookup already finds the row.
"""

import enum

from sqlalchemy import insert, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from db.database import is_unique_violation
from db.schema import departments, roles
from directory.errors import ConflictError
from logger_config import setup_logger

logger = setup_logger(__name__)


class ReferenceKind(enum.Enum):
    DEPARTMENT = "department"
    ROLE = "role"


_TABLES = {
    ReferenceKind.DEPARTMENT: departments,
    ReferenceKind.ROLE: roles,
}


def normalize_name(raw_name: str | None) -> str | None:
    """Trimmed name, or None when nothing is left."""
    if raw_name is None:
        return None
    name = raw_name.strip()
    return name or None


def _lookup(con: Connection, kind: ReferenceKind, name: str) -> int | None:
    table = _TABLES[kind]
    return con.execute(select(table.c.id).where(table.c.name == name)).scalar_one_or_none()


def _insert(con: Connection, kind: ReferenceKind, name: str) -> int:
    table = _TABLES[kind]
    values = {"name": name}
    if kind is ReferenceKind.ROLE:
        values["permissions"] = {}
    result = con.execute(insert(table).values(**values))
    return result.inserted_primary_key[0]


def resolve(con: Connection, kind: ReferenceKind, raw_name: str | None) -> int | None:
    """Return the id of the ``kind`` row named ``raw_name``, creating it if needed.

    Blank names resolve to None without touching the store.
    """
    name = normalize_name(raw_name)
    if name is None:
        return None

    ref_id = _lookup(con, kind, name)
    if ref_id is not None:
        return ref_id

    try:
        with con.begin_nested():
            ref_id = _insert(con, kind, name)
    except IntegrityError as exc:
        if not is_unique_violation(exc):
            raise
        # Lost the race to a concurrent first insert; read the committed row.
        logger.info(f"{kind.value} {name!r} was created concurrently, re-resolving")
        ref_id = _lookup(con, kind, name)
        if ref_id is None:
            raise ConflictError(f"Could not resolve {kind.value} {name!r}") from exc
        return ref_id

    logger.info(f"Created {kind.value} {name!r} (id={ref_id})")
    return ref_id
