"""Department Service: list and explicit create."""

from sqlalchemy import insert, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from db.database import is_unique_violation
from db.schema import departments, employees
from directory.errors import ConflictError, ValidationError
from directory.resolver import normalize_name
from logger_config import setup_logger

logger = setup_logger(__name__)


def list_departments(con: Connection) -> list[dict]:
    """All departments by id, with the manager's full name when one is set."""
    manager_name = (employees.c.first_name + " " + employees.c.last_name).label("manager_name")
    stmt = (
        select(departments, manager_name)
        .select_from(departments)
        .outerjoin(employees, employees.c.id == departments.c.manager_id)
        .order_by(departments.c.id)
    )
    return [dict(row) for row in con.execute(stmt).mappings()]


def create_department(con: Connection, name: str | None, manager_id: int | None = None) -> dict:
    name = normalize_name(name)
    if name is None:
        raise ValidationError("name required")
    try:
        row = con.execute(
            insert(departments)
            .values(name=name, manager_id=manager_id)
            .returning(*departments.c)
        ).mappings().one()
    except IntegrityError as exc:
        if is_unique_violation(exc):
            raise ConflictError("Department name exists") from exc
        raise
    logger.info(f"Created department {name!r} (id={row['id']})")
    return dict(row)
