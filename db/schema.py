"""Table definitions for the employee directory (SQLAlchemy Core).

departments.manager_id has no FK constraint: with one, departments and
employees would reference each other and SQLite cannot add the constraint later.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
)
from sqlalchemy.dialects.postgresql import JSONB

metadata = MetaData()

departments = Table(
    "departments",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(100), nullable=False, unique=True),
    Column("manager_id", Integer, nullable=True),
)

roles = Table(
    "roles",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(100), nullable=False, unique=True),
    Column(
        "permissions",
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
    ),
)

employees = Table(
    "employees",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("phone", String(50)),
    Column("hire_date", Date, nullable=False),
    Column("department_id", Integer, ForeignKey("departments.id"), nullable=True),
    Column("role_id", Integer, ForeignKey("roles.id"), nullable=True),
    Column("salary", Numeric(12, 2), nullable=False, default=0),
    Column("is_active", Boolean, nullable=False, default=True),
    CheckConstraint("salary >= 0", name="ck_employees_salary_non_negative"),
)
