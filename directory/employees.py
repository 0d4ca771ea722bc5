"""Employee Record Service.

Every function takes a Connection that is already inside a transaction (see
db.database.transaction) and never commits on its own, so resolver inserts
and the employee write succeed or fail together.
"""

from dataclasses import dataclass
from typing import Any, Iterator, Mapping

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from config import DEFAULT_PAGE_LIMIT
from db.database import is_unique_violation
from db.schema import departments, employees, roles
from directory.errors import ConflictError, NotFoundError, ValidationError
from directory.resolver import ReferenceKind, resolve
from logger_config import setup_logger

logger = setup_logger(__name__)

REQUIRED_FIELDS = ("first_name", "last_name", "email", "hire_date")

# Columns a partial update may assign, directly or via name resolution
ASSIGNABLE_COLUMNS = frozenset(
    {
        "first_name",
        "last_name",
        "email",
        "phone",
        "hire_date",
        "salary",
        "is_active",
        "department_id",
        "role_id",
    }
)

# Request keys copied straight onto a column of the same name
DIRECT_FIELDS = ("first_name", "last_name", "email", "phone", "hire_date", "salary", "is_active")

# Request keys resolved to a reference column
NAME_FIELDS = {
    "department_name": (ReferenceKind.DEPARTMENT, "department_id"),
    "role_name": (ReferenceKind.ROLE, "role_id"),
}

NON_NULLABLE_FIELDS = frozenset({"first_name", "last_name", "email", "hire_date", "salary", "is_active"})


# =====================================================================
# PARTIAL UPDATE
# =====================================================================


class EmployeeChanges:
    """Ordered column -> value assignments for one employee UPDATE."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def set(self, column: str, value: Any) -> None:
        if column not in ASSIGNABLE_COLUMNS:
            raise ValueError(f"Column {column!r} cannot be updated")
        self._values[column] = value

    def as_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __contains__(self, column: str) -> bool:
        return column in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)


def build_changes(con: Connection, fields: Mapping[str, Any]) -> EmployeeChanges:
    """Turn request fields into column assignments, resolving names on ``con``.

    Only keys present in ``fields`` contribute.  A present name key always
    produces an assignment, even when it resolves to None.
    """
    changes = EmployeeChanges()
    for key in DIRECT_FIELDS:
        if key in fields:
            changes.set(key, fields[key])
    for key, (kind, column) in NAME_FIELDS.items():
        if key in fields:
            changes.set(column, resolve(con, kind, fields[key]))
    return changes


# =====================================================================
# READS
# =====================================================================


@dataclass
class EmployeeFilters:
    department_id: int | None = None
    role_id: int | None = None
    is_active: bool | None = None
    limit: int = DEFAULT_PAGE_LIMIT
    offset: int = 0


def _joined_select():
    return (
        select(
            employees,
            departments.c.name.label("department_name"),
            roles.c.name.label("role_name"),
        )
        .select_from(employees)
        .outerjoin(departments, departments.c.id == employees.c.department_id)
        .outerjoin(roles, roles.c.id == employees.c.role_id)
    )


def list_employees(con: Connection, filters: EmployeeFilters | None = None) -> list[dict]:
    """Employees ordered by id, with department_name / role_name joined in."""
    filters = filters or EmployeeFilters()
    stmt = _joined_select()
    if filters.department_id is not None:
        stmt = stmt.where(employees.c.department_id == filters.department_id)
    if filters.role_id is not None:
        stmt = stmt.where(employees.c.role_id == filters.role_id)
    if filters.is_active is not None:
        stmt = stmt.where(employees.c.is_active == filters.is_active)
    stmt = stmt.order_by(employees.c.id).limit(filters.limit).offset(filters.offset)
    return [dict(row) for row in con.execute(stmt).mappings()]


def get_employee(con: Connection, employee_id: int) -> dict:
    row = con.execute(_joined_select().where(employees.c.id == employee_id)).mappings().first()
    if row is None:
        raise NotFoundError("Employee not found")
    return dict(row)


def _fetch_row(con: Connection, employee_id: int) -> dict:
    """Bare employees row, as returned by the write operations."""
    row = con.execute(select(employees).where(employees.c.id == employee_id)).mappings().first()
    if row is None:
        raise NotFoundError("Employee not found")
    return dict(row)


# =====================================================================
# WRITES
# =====================================================================


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def create_employee(con: Connection, fields: Mapping[str, Any]) -> dict:
    """Insert an employee, creating its department/role by name if needed."""
    if any(_is_blank(fields.get(name)) for name in REQUIRED_FIELDS):
        raise ValidationError("Missing required fields")

    department_id = resolve(con, ReferenceKind.DEPARTMENT, fields.get("department_name"))
    role_id = resolve(con, ReferenceKind.ROLE, fields.get("role_name"))

    salary = fields.get("salary")
    is_active = fields.get("is_active")
    values = {
        "first_name": fields["first_name"],
        "last_name": fields["last_name"],
        "email": fields["email"],
        "phone": fields.get("phone"),
        "hire_date": fields["hire_date"],
        "department_id": department_id,
        "role_id": role_id,
        "salary": 0 if salary is None else salary,
        "is_active": True if is_active is None else is_active,
    }
    try:
        result = con.execute(insert(employees).values(**values))
    except IntegrityError as exc:
        if is_unique_violation(exc):
            logger.info(f"Rejected duplicate email: {exc.orig}")
            raise ConflictError("Email already exists") from exc
        raise

    employee_id = result.inserted_primary_key[0]
    logger.info(f"Created employee {employee_id}")
    return _fetch_row(con, employee_id)


def update_employee(con: Connection, employee_id: int, fields: Mapping[str, Any]) -> dict:
    """Apply a partial update; only keys present in ``fields`` are touched."""
    requested = [key for key in fields if key in DIRECT_FIELDS or key in NAME_FIELDS]
    if not requested:
        raise ValidationError("No fields to update")

    emptied = sorted(key for key in requested if key in NON_NULLABLE_FIELDS and _is_blank(fields[key]))
    if emptied:
        raise ValidationError(f"Fields cannot be empty: {', '.join(emptied)}")

    changes = build_changes(con, fields)
    try:
        result = con.execute(
            update(employees).where(employees.c.id == employee_id).values(**changes.as_dict())
        )
    except IntegrityError as exc:
        if is_unique_violation(exc):
            logger.info(f"Rejected duplicate email: {exc.orig}")
            raise ConflictError("Email already exists") from exc
        raise

    if result.rowcount == 0:
        raise NotFoundError("Employee not found")
    logger.info(f"Updated employee {employee_id}: {', '.join(changes)}")
    return _fetch_row(con, employee_id)


def deactivate_employee(con: Connection, employee_id: int) -> dict:
    """Soft delete: clear is_active, keep the row."""
    result = con.execute(
        update(employees).where(employees.c.id == employee_id).values(is_active=False)
    )
    if result.rowcount == 0:
        raise NotFoundError("Employee not found")
    logger.info(f"Deactivated employee {employee_id}")
    return _fetch_row(con, employee_id)
