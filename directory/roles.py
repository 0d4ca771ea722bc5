"""Role Service: list and explicit create."""

from typing import Any

from sqlalchemy import insert, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from db.database import is_unique_violation
from db.schema import roles
from directory.errors import ConflictError, ValidationError
from directory.resolver import normalize_name
from logger_config import setup_logger

logger = setup_logger(__name__)


def list_roles(con: Connection) -> list[dict]:
    return [dict(row) for row in con.execute(select(roles).order_by(roles.c.id)).mappings()]


def create_role(con: Connection, name: str | None, permissions: dict[str, Any] | None = None) -> dict:
    """Insert a role; ``permissions`` is stored as given, defaulting to {}."""
    name = normalize_name(name)
    if name is None:
        raise ValidationError("name required")
    try:
        row = con.execute(
            insert(roles)
            .values(name=name, permissions=permissions if permissions is not None else {})
            .returning(*roles.c)
        ).mappings().one()
    except IntegrityError as exc:
        if is_unique_violation(exc):
            raise ConflictError("Role exists") from exc
        raise
    logger.info(f"Created role {name!r} (id={row['id']})")
    return dict(row)
